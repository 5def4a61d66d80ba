"""Graph walking helpers shared by every lowering target."""

from __future__ import annotations

import re
from collections import deque

from triggr.graph.models import WorkflowGraph, WorkflowNode

_UNSAFE_ID_CHARS = re.compile(r"[^a-zA-Z0-9_]")


def sanitize_id(value: str) -> str:
    """Make a string usable as an orchestrator id (``[a-z0-9_]`` only)."""
    return _UNSAFE_ID_CHARS.sub("_", value).lower()


def build_adjacency(graph: WorkflowGraph) -> dict[str, list[str]]:
    """Map each source node id to its targets, in edge order."""
    adjacency: dict[str, list[str]] = {}
    for edge in graph.edges:
        adjacency.setdefault(edge.source, []).append(edge.target)
    return adjacency


def execution_order(graph: WorkflowGraph) -> list[WorkflowNode]:
    """Breadth-first node order starting at the Start node.

    Every reachable node appears once. Nodes not reachable from Start
    are left out; a graph without a Start node is returned as-is.
    """
    start = graph.start_node()
    if start is None:
        return list(graph.nodes)

    node_map = {n.id: n for n in graph.nodes}
    adjacency = build_adjacency(graph)

    visited: set[str] = set()
    result: list[WorkflowNode] = []
    queue = deque([start.id])

    while queue:
        node_id = queue.popleft()
        if node_id in visited:
            continue
        visited.add(node_id)

        node = node_map.get(node_id)
        if node is None:
            continue
        result.append(node)
        for target in adjacency.get(node_id, []):
            if target not in visited:
                queue.append(target)

    return result
