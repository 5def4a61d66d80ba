"""Graph compilers: Kestra YAML, agent/tool config and JavaScript."""

from triggr.compiler.codegen import JavaScriptGenerator, generate_javascript
from triggr.compiler.kestra import KestraCompiler, KestraFlowResult, compile_kestra_flow
from triggr.compiler.tool_config import (
    AgentSpec,
    AgentToolConfig,
    ToolConfigGenerator,
    ToolConfigResult,
    ToolSpec,
    generate_tool_config,
    parse_tool_config,
    strip_markdown_fences,
)
from triggr.compiler.yaml_writer import dump_yaml, quote_string

__all__ = [
    "AgentSpec",
    "AgentToolConfig",
    "JavaScriptGenerator",
    "KestraCompiler",
    "KestraFlowResult",
    "ToolConfigGenerator",
    "ToolConfigResult",
    "ToolSpec",
    "compile_kestra_flow",
    "dump_yaml",
    "generate_javascript",
    "generate_tool_config",
    "parse_tool_config",
    "quote_string",
    "strip_markdown_fences",
]
