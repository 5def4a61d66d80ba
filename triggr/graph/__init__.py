"""Workflow graph model and traversal."""

from triggr.graph.flow_config import build_flow_config
from triggr.graph.models import (
    NodePosition,
    NodeType,
    WorkflowEdge,
    WorkflowGraph,
    WorkflowNode,
)
from triggr.graph.settings import (
    AgentNodeSettings,
    ApiNodeSettings,
    EndNodeSettings,
    IfElseNodeSettings,
    UserApprovalNodeSettings,
    WhileNodeSettings,
    parse_headers,
    parse_settings,
)
from triggr.graph.traversal import build_adjacency, execution_order, sanitize_id
from triggr.graph.validation import validate_graph

__all__ = [
    "AgentNodeSettings",
    "ApiNodeSettings",
    "EndNodeSettings",
    "IfElseNodeSettings",
    "NodePosition",
    "NodeType",
    "UserApprovalNodeSettings",
    "WhileNodeSettings",
    "WorkflowEdge",
    "WorkflowGraph",
    "WorkflowNode",
    "build_adjacency",
    "build_flow_config",
    "execution_order",
    "parse_headers",
    "parse_settings",
    "sanitize_id",
    "validate_graph",
]
