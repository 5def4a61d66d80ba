"""Triggr - workflow graph compiler for AI-agent pipelines.

A canvas graph (Start, Agent, If/Else, While, User-Approval, API, End
nodes) is turned into a Kestra flow, an agent/tool configuration for the
chat execution loop, or generated JavaScript.

Example:
    >>> from triggr import WorkflowGraph, compile_kestra_flow
    >>> graph = WorkflowGraph.from_payload({"nodes": nodes, "edges": edges})
    >>> print(compile_kestra_flow(graph, agent_name="Weather Bot").yaml)

Persistence (``triggr.db``, ``triggr.services``) is imported separately
since it creates the database engine on import.
"""

__version__ = "0.1.0"

from triggr.config import Settings, get_settings
from triggr.core.types import LLMResponse, Message, MessageRole, ToolCall, Usage

# Graph exports
from triggr.graph import (
    NodeType,
    WorkflowEdge,
    WorkflowGraph,
    WorkflowNode,
    build_flow_config,
    execution_order,
    sanitize_id,
    validate_graph,
)

# Compiler exports
from triggr.compiler import (
    AgentToolConfig,
    KestraFlowResult,
    ToolConfigResult,
    compile_kestra_flow,
    dump_yaml,
    generate_javascript,
    generate_tool_config,
)

# Runtime exports
from triggr.runtime import AgentChatRunner, ChatResult, execute_tool, sanitize_function_name

# Orchestrator exports
from triggr.orchestrator import KestraClient

# LLM exports
from triggr.llm import BaseLLMProvider, OpenAIProvider, create_gateway_provider

# Error exports
from triggr.errors.exceptions import (
    AgentNotFoundError,
    CompilationError,
    ConfigGenerationError,
    KestraAPIError,
    KestraConnectionError,
    MissingAPIKeyError,
    TriggrError,
)

__all__ = [
    "__version__",
    # Config
    "Settings",
    "get_settings",
    # Core types
    "LLMResponse",
    "Message",
    "MessageRole",
    "ToolCall",
    "Usage",
    # Graph
    "NodeType",
    "WorkflowEdge",
    "WorkflowGraph",
    "WorkflowNode",
    "build_flow_config",
    "execution_order",
    "sanitize_id",
    "validate_graph",
    # Compiler
    "AgentToolConfig",
    "KestraFlowResult",
    "ToolConfigResult",
    "compile_kestra_flow",
    "dump_yaml",
    "generate_javascript",
    "generate_tool_config",
    # Runtime
    "AgentChatRunner",
    "ChatResult",
    "execute_tool",
    "sanitize_function_name",
    # Orchestrator
    "KestraClient",
    # LLM
    "BaseLLMProvider",
    "OpenAIProvider",
    "create_gateway_provider",
    # Errors
    "AgentNotFoundError",
    "CompilationError",
    "ConfigGenerationError",
    "KestraAPIError",
    "KestraConnectionError",
    "MissingAPIKeyError",
    "TriggrError",
]
