"""Workflow graph schemas.

Nodes and edges exactly as the canvas stores them: camelCase keys,
free-form ``data`` payloads, and canvas-only extras that the compiler
ignores.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NodeType(str, Enum):
    """Node types offered on the canvas."""

    START = "StartNode"
    AGENT = "AgentNode"
    IF_ELSE = "IfElseNode"
    WHILE = "WhileNode"
    USER_APPROVAL = "UserApprovalNode"
    API = "ApiNode"
    END = "EndNode"


class NodePosition(BaseModel):
    """Canvas coordinates."""

    x: float = 0
    y: float = 0


class WorkflowNode(BaseModel):
    """A typed vertex on the canvas."""

    id: str = Field(..., description="Node ID")
    type: str | None = Field(None, description="Node type (StartNode, AgentNode, ...)")
    position: NodePosition = Field(default_factory=NodePosition, description="Canvas position")
    data: dict[str, Any] = Field(default_factory=dict, description="Label, type and settings payload")
    dragging: bool | None = None
    measured: dict[str, float | None] | None = None
    selected: bool | None = None

    model_config = ConfigDict(extra="allow")

    @field_validator("data", mode="before")
    @classmethod
    def _null_data_is_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def node_type(self) -> str | None:
        """Resolved node type: the node's own type, then ``data.type``."""
        return self.type or self.data.get("type")

    @property
    def settings(self) -> dict[str, Any]:
        settings = self.data.get("settings")
        return settings if isinstance(settings, dict) else {}

    @property
    def label(self) -> str:
        return self.data.get("label") or self.node_type or self.id

    def is_type(self, node_type: NodeType) -> bool:
        return self.node_type == node_type.value


class WorkflowEdge(BaseModel):
    """A directed connection between two nodes."""

    id: str = Field(..., description="Edge ID")
    source: str = Field(..., description="Source node ID")
    target: str = Field(..., description="Target node ID")
    source_handle: str | None = Field(None, description="Source handle (branch selector)", alias="sourceHandle")
    target_handle: str | None = Field(None, description="Target handle ID", alias="targetHandle")
    type: str | None = None
    label: str | None = None
    animated: bool | None = None
    style: Any = None
    marker_end: Any = Field(None, alias="markerEnd")
    data: Any = None

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class WorkflowGraph(BaseModel):
    """Nodes plus edges, as persisted for an agent."""

    nodes: list[WorkflowNode] = Field(default_factory=list)
    edges: list[WorkflowEdge] = Field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> WorkflowGraph:
        """Build a graph from a ``{"nodes": [...], "edges": [...]}`` mapping.

        ``edges`` may be missing or null.
        """
        return cls(
            nodes=payload.get("nodes") or [],
            edges=payload.get("edges") or [],
        )

    def get_node(self, node_id: str) -> WorkflowNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def edges_from(self, node_id: str) -> list[WorkflowEdge]:
        return [e for e in self.edges if e.source == node_id]

    def edges_to(self, node_id: str) -> list[WorkflowEdge]:
        return [e for e in self.edges if e.target == node_id]

    def start_node(self) -> WorkflowNode | None:
        for node in self.nodes:
            if node.is_type(NodeType.START):
                return node
        return None

    def to_payload(self) -> dict[str, Any]:
        """Serialize with canvas (camelCase) keys."""
        return {
            "nodes": [n.model_dump(by_alias=True, exclude_none=True) for n in self.nodes],
            "edges": [e.model_dump(by_alias=True, exclude_none=True) for e in self.edges],
        }
