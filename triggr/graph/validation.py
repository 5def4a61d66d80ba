"""Structural checks run before a graph is compiled or published."""

from __future__ import annotations

from triggr.graph.models import NodeType, WorkflowGraph


def validate_graph(graph: WorkflowGraph) -> list[str]:
    """Validate the workflow graph structure.

    Returns a list of error messages (empty = valid).
    """
    errors: list[str] = []

    start_nodes = [n for n in graph.nodes if n.is_type(NodeType.START)]
    if not start_nodes:
        errors.append("Workflow must have exactly one Start node.")
    elif len(start_nodes) > 1:
        errors.append("Workflow must have exactly one Start node (found multiple).")

    if not any(n.is_type(NodeType.END) for n in graph.nodes):
        errors.append("Workflow must have at least one End node.")

    if start_nodes and not graph.edges_from(start_nodes[0].id):
        errors.append("Start node must have at least one outgoing edge.")

    node_ids = {n.id for n in graph.nodes}
    for edge in graph.edges:
        if edge.source not in node_ids:
            errors.append(f"Edge references unknown source node: {edge.source}")
        if edge.target not in node_ids:
            errors.append(f"Edge references unknown target node: {edge.target}")

    if len(graph.nodes) > 1:
        connected: set[str] = set()
        for edge in graph.edges:
            connected.add(edge.source)
            connected.add(edge.target)
        for node in graph.nodes:
            if node.id not in connected:
                errors.append(f"Node '{node.label}' ({node.id}) is disconnected (no edges).")

    return errors
