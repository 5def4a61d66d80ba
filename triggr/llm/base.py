"""Base LLM provider interface.

The compiler generators and the chat runner only talk to this interface,
so tests can script responses without touching the network.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from triggr.core.types import LLMResponse, Message


class BaseLLMProvider(ABC):
    """Abstract base class for LLM providers.

    Example:
        >>> class MyProvider(BaseLLMProvider):
        ...     async def complete(self, messages, **kwargs):
        ...         ...
    """

    @property
    @abstractmethod
    def model(self) -> str:
        """Return the model identifier."""
        ...

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name (e.g., 'openai', 'openrouter')."""
        ...

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        *,
        temperature: float = 0.7,
        max_tokens: int = 4096,
        **kwargs: Any,
    ) -> LLMResponse:
        """Generate a completion for the given messages.

        Args:
            messages: List of conversation messages.
            temperature: Sampling temperature (0.0-2.0).
            max_tokens: Maximum tokens to generate.
            **kwargs: Provider-specific parameters (``tools`` for function calling).

        Returns:
            LLMResponse containing the generated content and usage stats.

        Raises:
            RateLimitError: If rate limit is exceeded.
            AuthenticationError: If authentication fails.
            APIError: If the API returns an error.
            TimeoutError: If the request times out.
        """
        ...

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.model!r})"
