"""OpenAI-compatible chat-completions provider.

Used both for OpenAI itself and for OpenRouter, which exposes the same API
under a different base URL.
"""

from __future__ import annotations

import json
from typing import Any

import openai
from openai import AsyncOpenAI

from triggr.core.types import LLMResponse, Message, ToolCall, Usage
from triggr.errors.exceptions import (
    APIError,
    AuthenticationError,
    MissingAPIKeyError,
    RateLimitError,
    TimeoutError,
)
from triggr.llm.base import BaseLLMProvider

DEFAULT_MODEL = "gpt-4o-mini"


class OpenAIProvider(BaseLLMProvider):
    """Chat-completions provider backed by the ``openai`` SDK.

    Example:
        >>> provider = OpenAIProvider(model="gpt-4o-mini", api_key="sk-...")
        >>> response = await provider.complete([Message.user("Hello!")])
        >>> print(response.content)
    """

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = 60.0,
        provider_name: str = "openai",
    ) -> None:
        """Initialize the provider.

        Args:
            model: Model identifier (e.g., 'gpt-4o-mini', 'openai/gpt-4o-mini').
            api_key: API key for the endpoint.
            base_url: Custom API base URL (OpenRouter, proxies).
            timeout: Request timeout in seconds.
            provider_name: Name reported in errors and logs.
        """
        self._model = model
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout
        self._provider_name = provider_name
        self._client: AsyncOpenAI | None = None

    def _get_client(self) -> AsyncOpenAI:
        """Lazy initialization of the SDK client."""
        if self._client is None:
            if not self._api_key:
                raise MissingAPIKeyError(self._provider_name)

            self._client = AsyncOpenAI(
                api_key=self._api_key,
                base_url=self._base_url,
                timeout=self._timeout,
            )
        return self._client

    @property
    def model(self) -> str:
        return self._model

    @property
    def provider_name(self) -> str:
        return self._provider_name

    async def complete(
        self,
        messages: list[Message],
        *,
        temperature: float = 0.7,
        max_tokens: int = 4096,
        **kwargs: Any,
    ) -> LLMResponse:
        """Generate a completion.

        Args:
            messages: List of conversation messages.
            temperature: Sampling temperature (0.0-2.0).
            max_tokens: Maximum tokens to generate.
            **kwargs: Passed to ``chat.completions.create`` (e.g. ``tools``).

        Returns:
            LLMResponse with generated content, tool calls and usage.
        """
        client = self._get_client()
        openai_messages = self._convert_messages(messages)

        if not kwargs.get("tools"):
            kwargs.pop("tools", None)

        try:
            response = await client.chat.completions.create(
                model=self._model,
                messages=openai_messages,
                temperature=temperature,
                max_tokens=max_tokens,
                **kwargs,
            )
        except Exception as e:
            self._handle_error(e)

        return self._convert_response(response)

    def _convert_messages(self, messages: list[Message]) -> list[dict[str, Any]]:
        """Convert messages to the chat-completions wire format."""
        result = []
        for msg in messages:
            converted: dict[str, Any] = {
                "role": msg.role.value,
                "content": msg.content,
            }
            if msg.name:
                converted["name"] = msg.name
            if msg.tool_calls:
                converted["tool_calls"] = [
                    {
                        "id": tc.id,
                        "type": "function",
                        "function": {
                            "name": tc.name,
                            "arguments": json.dumps(tc.arguments),
                        },
                    }
                    for tc in msg.tool_calls
                ]
            if msg.tool_call_id:
                converted["tool_call_id"] = msg.tool_call_id
            result.append(converted)
        return result

    def _convert_response(self, response: Any) -> LLMResponse:
        choice = response.choices[0]

        tool_calls = None
        if choice.message.tool_calls:
            tool_calls = [
                ToolCall(
                    id=tc.id,
                    name=tc.function.name,
                    arguments=self._parse_tool_arguments(tc.function.arguments),
                )
                for tc in choice.message.tool_calls
            ]

        usage = Usage()
        if response.usage is not None:
            usage = Usage(
                prompt_tokens=response.usage.prompt_tokens or 0,
                completion_tokens=response.usage.completion_tokens or 0,
            )

        return LLMResponse(
            content=choice.message.content or "",
            model=response.model or self._model,
            usage=usage,
            finish_reason=choice.finish_reason or "stop",
            tool_calls=tool_calls,
            raw_response=response.model_dump(),
        )

    @staticmethod
    def _parse_tool_arguments(arguments: str | None) -> dict[str, Any]:
        """Parse tool call arguments from a JSON string."""
        try:
            parsed = json.loads(arguments or "{}")
        except (json.JSONDecodeError, TypeError):
            return {}
        return parsed if isinstance(parsed, dict) else {}

    def _handle_error(self, error: Exception) -> None:
        """Convert SDK errors to Triggr errors."""
        if isinstance(error, openai.RateLimitError):
            raise RateLimitError(
                str(error),
                provider=self._provider_name,
                model=self._model,
            ) from error
        elif isinstance(error, openai.AuthenticationError):
            raise AuthenticationError(
                str(error),
                provider=self._provider_name,
            ) from error
        elif isinstance(error, openai.APITimeoutError):
            raise TimeoutError(
                str(error),
                provider=self._provider_name,
                model=self._model,
                timeout_seconds=self._timeout,
            ) from error
        elif isinstance(error, openai.APIStatusError):
            raise APIError(
                str(error),
                provider=self._provider_name,
                model=self._model,
                status_code=error.status_code,
            ) from error
        elif isinstance(error, openai.APIError):
            raise APIError(
                str(error),
                provider=self._provider_name,
                model=self._model,
            ) from error
        raise error
