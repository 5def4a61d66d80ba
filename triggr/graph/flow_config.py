"""Adjacency ("next"-pointer) form of a graph.

This is the representation handed to the model when generating a tool
config or JavaScript: one entry per node with its settings and where
control goes next.
"""

from __future__ import annotations

from typing import Any

from triggr.graph.models import NodeType, WorkflowEdge, WorkflowGraph, WorkflowNode

# Node types that only ever continue to a single successor.
_SINGLE_SUCCESSOR = {
    NodeType.START.value,
    NodeType.API.value,
    NodeType.USER_APPROVAL.value,
}


def _next_for(node: WorkflowNode, edges: list[WorkflowEdge]) -> Any:
    node_type = node.node_type

    if node_type == NodeType.IF_ELSE.value:
        if_edge = next((e for e in edges if e.source_handle == "if"), None)
        else_edge = next((e for e in edges if e.source_handle == "else"), None)
        return {
            "if": if_edge.target if if_edge else None,
            "else": else_edge.target if else_edge else None,
        }

    if node_type == NodeType.END.value:
        return None

    if node_type in _SINGLE_SUCCESSOR:
        return edges[0].target if len(edges) == 1 else None

    # Agent nodes and anything unrecognised may fan out.
    if len(edges) == 1:
        return edges[0].target
    if len(edges) > 1:
        return [e.target for e in edges]
    return None


def build_flow_config(graph: WorkflowGraph) -> dict[str, Any]:
    """Return ``{"startNode": ..., "flow": [...]}`` for the graph."""
    edge_map: dict[str, list[WorkflowEdge]] = {}
    for edge in graph.edges:
        edge_map.setdefault(edge.source, []).append(edge)

    flow = [
        {
            "id": node.id,
            "type": node.node_type,
            "label": node.data.get("label") or node.node_type,
            "settings": node.settings,
            "next": _next_for(node, edge_map.get(node.id, [])),
        }
        for node in graph.nodes
    ]

    start = graph.start_node()

    return {
        "startNode": start.id if start else None,
        "flow": flow,
    }
