"""Triggr exception hierarchy.

All exceptions inherit from TriggrError for easy catching.
Each exception includes a `retryable` flag to indicate if the operation can be retried.
"""

from __future__ import annotations


class TriggrError(Exception):
    """Base exception for all Triggr errors."""

    def __init__(self, message: str, *, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable = retryable


# Configuration Errors
class ConfigurationError(TriggrError):
    """Configuration-related errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message, retryable=False)


class MissingAPIKeyError(ConfigurationError):
    """API key is missing or not configured."""

    def __init__(self, provider: str) -> None:
        super().__init__(
            f"API key for '{provider}' is not configured. "
            f"Set the {provider.upper()}_API_KEY environment variable."
        )
        self.provider = provider


# LLM Errors
class LLMError(TriggrError):
    """Base class for LLM-related errors."""

    def __init__(
        self,
        message: str,
        *,
        provider: str,
        model: str | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message, retryable=retryable)
        self.provider = provider
        self.model = model


class RateLimitError(LLMError):
    """Rate limit exceeded. Can be retried after backoff."""

    def __init__(
        self,
        message: str,
        *,
        provider: str,
        model: str | None = None,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(message, provider=provider, model=model, retryable=True)
        self.retry_after = retry_after


class AuthenticationError(LLMError):
    """Authentication failed. Cannot be retried without fixing credentials."""

    def __init__(self, message: str, *, provider: str) -> None:
        super().__init__(message, provider=provider, retryable=False)


class APIError(LLMError):
    """General API error. May be retried."""

    def __init__(
        self,
        message: str,
        *,
        provider: str,
        model: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, provider=provider, model=model, retryable=True)
        self.status_code = status_code


class TimeoutError(LLMError):
    """Request timed out. Can be retried."""

    def __init__(
        self,
        message: str,
        *,
        provider: str,
        model: str | None = None,
        timeout_seconds: float,
    ) -> None:
        super().__init__(message, provider=provider, model=model, retryable=True)
        self.timeout_seconds = timeout_seconds


# Compiler Errors
class CompilationError(TriggrError):
    """Base class for graph lowering errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message, retryable=False)


class ConfigGenerationError(CompilationError):
    """The model returned something that is not a usable agent/tool config."""

    def __init__(self, reason: str, *, raw_output: str = "") -> None:
        super().__init__(f"Failed to generate agent tool config: {reason}")
        self.reason = reason
        self.raw_output = raw_output


# Agent Errors
class AgentNotFoundError(TriggrError):
    """The primary agent of a tool config could not be resolved."""

    def __init__(self, agent_name: str | None = None) -> None:
        label = f" '{agent_name}'" if agent_name else ""
        super().__init__(f"Primary agent{label} not found", retryable=False)
        self.agent_name = agent_name


# Orchestrator Errors
class OrchestratorError(TriggrError):
    """Base class for workflow-orchestrator errors."""


class KestraAPIError(OrchestratorError):
    """Kestra answered with a non-success status."""

    def __init__(self, message: str, *, status_code: int, details: str = "") -> None:
        super().__init__(message, retryable=status_code >= 500)
        self.status_code = status_code
        self.details = details


class KestraConnectionError(OrchestratorError):
    """Kestra could not be reached."""

    def __init__(self, base_url: str) -> None:
        super().__init__(
            f"Cannot connect to Kestra. Make sure Kestra is running at {base_url}",
            retryable=True,
        )
        self.base_url = base_url


# Persistence Errors
class PersistenceError(TriggrError):
    """Base class for storage errors."""


class AgentAlreadyExistsError(PersistenceError):
    """An agent with the same agent_id is already stored."""

    def __init__(self, agent_id: str) -> None:
        super().__init__("Agent with the same agentId already exists.")
        self.agent_id = agent_id


class AgentRecordNotFoundError(PersistenceError):
    """No stored agent with the given agent_id."""

    def __init__(self, agent_id: str) -> None:
        super().__init__(f"Agent '{agent_id}' not found")
        self.agent_id = agent_id
