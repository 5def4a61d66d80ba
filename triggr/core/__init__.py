"""Core types."""

from triggr.core.types import LLMResponse, Message, MessageRole, ToolCall, Usage

__all__ = ["LLMResponse", "Message", "MessageRole", "ToolCall", "Usage"]
