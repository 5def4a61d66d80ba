"""Triggr error types."""

from triggr.errors.exceptions import (
    AgentAlreadyExistsError,
    AgentNotFoundError,
    AgentRecordNotFoundError,
    APIError,
    AuthenticationError,
    CompilationError,
    ConfigGenerationError,
    ConfigurationError,
    KestraAPIError,
    KestraConnectionError,
    LLMError,
    MissingAPIKeyError,
    OrchestratorError,
    PersistenceError,
    RateLimitError,
    TimeoutError,
    TriggrError,
)

__all__ = [
    "AgentAlreadyExistsError",
    "AgentNotFoundError",
    "AgentRecordNotFoundError",
    "APIError",
    "AuthenticationError",
    "CompilationError",
    "ConfigGenerationError",
    "ConfigurationError",
    "KestraAPIError",
    "KestraConnectionError",
    "LLMError",
    "MissingAPIKeyError",
    "OrchestratorError",
    "PersistenceError",
    "RateLimitError",
    "TimeoutError",
    "TriggrError",
]
