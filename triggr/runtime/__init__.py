"""Chat execution loop and HTTP tool dispatch."""

from triggr.runtime.chat import AgentChatRunner, ChatResult, ToolInvocation, run_agent_chat
from triggr.runtime.http_tool import (
    build_request,
    build_tool_schemas,
    execute_tool,
    json_type_for,
    sanitize_function_name,
)

__all__ = [
    "AgentChatRunner",
    "ChatResult",
    "ToolInvocation",
    "build_request",
    "build_tool_schemas",
    "execute_tool",
    "json_type_for",
    "run_agent_chat",
    "sanitize_function_name",
]
