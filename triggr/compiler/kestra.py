"""Lower a workflow graph into a Kestra flow definition.

Each canvas node becomes one Kestra task:

    StartNode / EndNode   -> core.log.Log
    AgentNode             -> ai.completion.ChatCompletion (OpenRouter provider)
    ApiNode               -> core.http.Request (auth lowered to KV secrets)
    IfElseNode            -> core.flow.If, branch targets lowered inline
    WhileNode             -> core.flow.WaitFor
    UserApprovalNode      -> core.flow.Pause
    anything else         -> core.log.Log

Usage::

    result = KestraCompiler(graph).compile(agent_name="Weather Bot")
    print(result.yaml)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator

from triggr.compiler.yaml_writer import dump_yaml
from triggr.config import Settings, get_settings
from triggr.graph.models import NodeType, WorkflowEdge, WorkflowGraph, WorkflowNode
from triggr.graph.settings import (
    AgentNodeSettings,
    ApiNodeSettings,
    IfElseNodeSettings,
    UserApprovalNodeSettings,
    WhileNodeSettings,
)
from triggr.graph.traversal import execution_order, sanitize_id
from triggr.logging import get_logger

logger = logging.getLogger(__name__)

LOG_TASK = "io.kestra.plugin.core.log.Log"
CHAT_COMPLETION_TASK = "io.kestra.plugin.ai.completion.ChatCompletion"
HTTP_REQUEST_TASK = "io.kestra.plugin.core.http.Request"
IF_TASK = "io.kestra.plugin.core.flow.If"
WAIT_FOR_TASK = "io.kestra.plugin.core.flow.WaitFor"
PAUSE_TASK = "io.kestra.plugin.core.flow.Pause"
OPENROUTER_PROVIDER = "io.kestra.plugin.ai.provider.OpenRouter"

DEFAULT_FLOW_NAME = "triggr_workflow"
# OpenRouter model names carry the vendor prefix; a bare "gpt-4o-mini" is
# not routable through the OpenRouter provider block.
DEFAULT_AGENT_MODEL = "openai/gpt-4o-mini"
DEFAULT_USER_PROMPT = "Hello, how can you help me?"

# Edge handles that select the "then" / "else" branch of an IfElse node.
THEN_HANDLES = {"if", "true"}
ELSE_HANDLES = {"else", "false"}

# Task keys whose values are nested task lists.
_NESTED_TASK_KEYS = ("then", "else", "tasks")

Task = dict[str, Any]


def log_task(task_id: str, message: str) -> Task:
    return {"id": task_id, "type": LOG_TASK, "message": message}


def kv_ref(secret_name: str) -> str:
    """Kestra expression reading a key/value-store secret."""
    return f"{{{{ kv('{secret_name}') }}}}"


def expression(condition: str) -> str:
    return f"{{{{ {condition} }}}}"


@dataclass
class KestraFlowResult:
    """Result of lowering a graph."""

    flow_id: str
    namespace: str
    flow: dict[str, Any]
    yaml: str
    skipped_nodes: list[str] = field(default_factory=list)

    @property
    def task_count(self) -> int:
        return len(self.flow.get("tasks", []))


class KestraCompiler:
    """Compile a WorkflowGraph into a Kestra flow.

    Nodes are visited in breadth-first order from the Start node. Targets
    of an IfElse node are lowered inside its ``then``/``else`` lists and
    are not repeated at top level, except End nodes which always close the
    flow.
    """

    def __init__(self, graph: WorkflowGraph, settings: Settings | None = None) -> None:
        self._graph = graph
        self._settings = settings or get_settings()
        self._handlers: dict[str, Callable[[WorkflowNode, str], Task]] = {
            NodeType.START.value: self._lower_start,
            NodeType.END.value: self._lower_end,
            NodeType.AGENT.value: self._lower_agent,
            NodeType.API.value: self._lower_api,
            NodeType.IF_ELSE.value: self._lower_if_else,
            NodeType.WHILE.value: self._lower_while,
            NodeType.USER_APPROVAL.value: self._lower_user_approval,
        }
        # Guards against IfElse cycles while lowering branches inline.
        self._lowering: set[str] = set()

    # ========================================================================
    # Public API
    # ========================================================================

    def compile(self, agent_name: str | None = None) -> KestraFlowResult:
        """Lower the whole graph and render it as YAML."""
        namespace = self._settings.kestra_namespace
        flow_id = sanitize_id(agent_name or DEFAULT_FLOW_NAME)

        tasks: list[Task] = []
        skipped: list[str] = []
        branch_targets = self._if_else_targets()

        for node in execution_order(self._graph):
            if node.id in branch_targets and not node.is_type(NodeType.END):
                skipped.append(node.id)
                continue
            task = self.lower_node(node)
            if task is not None:
                tasks.append(task)

        if not tasks:
            tasks = [log_task("empty_workflow", "Empty workflow - add nodes to generate tasks")]

        _ensure_unique_ids(tasks)

        flow: dict[str, Any] = {
            "id": flow_id,
            "namespace": namespace,
            "description": f"Workflow generated from Triggr: {agent_name or 'Unnamed Workflow'}",
            "inputs": [
                {
                    "id": "user_prompt",
                    "type": "STRING",
                    "defaults": DEFAULT_USER_PROMPT,
                },
            ],
            "tasks": tasks,
        }

        result = KestraFlowResult(
            flow_id=flow_id,
            namespace=namespace,
            flow=flow,
            yaml=dump_yaml(flow),
            skipped_nodes=skipped,
        )
        logger.debug(f"Flow '{flow_id}' lowered, inlined branch nodes: {skipped}")
        get_logger().flow_compiled(flow_id, result.task_count)
        return result

    def lower_node(self, node: WorkflowNode) -> Task | None:
        """Lower a single node; returns None if it is already being lowered."""
        if node.id in self._lowering:
            logger.warning(f"Cycle through node '{node.label}' ({node.id}) not lowered again")
            return None

        task_id = sanitize_id(node.id)
        handler = self._handlers.get(node.node_type or "", self._lower_unknown)

        self._lowering.add(node.id)
        try:
            return handler(node, task_id)
        finally:
            self._lowering.discard(node.id)

    # ========================================================================
    # Node handlers
    # ========================================================================

    def _lower_start(self, node: WorkflowNode, task_id: str) -> Task:
        return log_task("start", "Workflow started")

    def _lower_end(self, node: WorkflowNode, task_id: str) -> Task:
        return log_task("end", "Workflow completed successfully")

    def _lower_unknown(self, node: WorkflowNode, task_id: str) -> Task:
        logger.info(f"No lowering for node type '{node.node_type}', emitting a log task")
        return log_task(task_id, f"Executing node: {node.data.get('label') or node.id}")

    def _lower_agent(self, node: WorkflowNode, task_id: str) -> Task:
        settings = AgentNodeSettings.model_validate(node.settings)
        agent_name = settings.name or node.data.get("label") or "AI Agent"
        instruction = (
            settings.instruction
            or settings.system_prompt
            or f"You are {agent_name}. Be helpful and concise."
        )

        return {
            "id": task_id,
            "type": CHAT_COMPLETION_TASK,
            "provider": self._provider_config(settings.model),
            "messages": [
                {"type": "SYSTEM", "content": instruction},
                {"type": "USER", "content": "{{ inputs.user_prompt }}"},
            ],
        }

    def _lower_api(self, node: WorkflowNode, task_id: str) -> Task:
        settings = ApiNodeSettings.model_validate(node.settings)
        endpoint = settings.target_url
        method = (settings.method or "GET").upper()
        api_name = settings.name or node.data.get("label") or "API Call"
        secret = kv_ref(f"{sanitize_id(api_name).upper()}_API_KEY")
        key_name = settings.key_name

        headers: dict[str, str] = {}
        uri = endpoint
        auth_type = settings.auth_type or "none"

        if auth_type == "bearer":
            headers["Authorization"] = f"Bearer {secret}"
        elif auth_type == "header":
            headers[key_name] = secret
        elif auth_type == "query":
            placeholder = f"{{{key_name}}}"
            if placeholder in endpoint:
                uri = endpoint.replace(placeholder, secret)
            elif "?" in endpoint:
                uri = f"{endpoint}&{key_name}={secret}"
            else:
                uri = f"{endpoint}?{key_name}={secret}"

        headers.update(settings.parsed_headers())

        task: Task = {
            "id": task_id,
            "type": HTTP_REQUEST_TASK,
            "uri": uri,
            "method": method,
        }
        if headers:
            task["headers"] = headers
        if settings.body and method != "GET":
            task["body"] = settings.body
            task["contentType"] = "application/json"
        return task

    def _lower_if_else(self, node: WorkflowNode, task_id: str) -> Task:
        settings = IfElseNodeSettings.model_validate(node.settings)
        then_tasks: list[Task] = []
        else_tasks: list[Task] = []
        then_claimed = False

        for edge in self._graph.edges_from(node.id):
            target = self._graph.get_node(edge.target)
            if target is None:
                continue
            # End targets claim the "then" slot even though they are emitted
            # at top level.
            is_then = _is_then_edge(edge, then_claimed)
            then_claimed = then_claimed or is_then
            if target.is_type(NodeType.END):
                continue
            task = self.lower_node(target)
            if task is None:
                continue
            if is_then:
                then_tasks.append(task)
            else:
                else_tasks.append(task)

        if_task: Task = {
            "id": task_id,
            "type": IF_TASK,
            "condition": expression(settings.expression),
            "then": then_tasks or [log_task(f"{task_id}_then_log", "Condition was true")],
        }
        if else_tasks:
            if_task["else"] = else_tasks
        return if_task

    def _lower_while(self, node: WorkflowNode, task_id: str) -> Task:
        settings = WhileNodeSettings.model_validate(node.settings)
        return {
            "id": task_id,
            "type": WAIT_FOR_TASK,
            "condition": expression(settings.expression),
            "tasks": [log_task(f"{task_id}_loop_task", "Loop iteration")],
            "checkFrequency": {
                "interval": "PT1S",
                "maxDuration": "PT60S",
            },
        }

    def _lower_user_approval(self, node: WorkflowNode, task_id: str) -> Task:
        settings = UserApprovalNodeSettings.model_validate(node.settings)
        return {
            "id": task_id,
            "type": PAUSE_TASK,
            "onResume": [
                {"id": "approved", "type": "BOOLEAN", "defaults": "true"},
                {"id": "reason", "type": "STRING", "required": False},
            ],
            "tasks": [
                log_task(
                    f"{task_id}_approval_log",
                    settings.message or "Please approve to continue",
                ),
            ],
        }

    # ========================================================================
    # Internal helpers
    # ========================================================================

    def _provider_config(self, model: str) -> dict[str, Any]:
        # Every model goes through the OpenRouter gateway ("vendor/model" names).
        return {
            "type": OPENROUTER_PROVIDER,
            "modelName": model or DEFAULT_AGENT_MODEL,
            "apiKey": kv_ref("OPENROUTER_API_KEY"),
            "baseUrl": self._settings.openrouter_base_url,
        }

    def _if_else_targets(self) -> set[str]:
        targets: set[str] = set()
        for edge in self._graph.edges:
            source = self._graph.get_node(edge.source)
            if source is not None and source.is_type(NodeType.IF_ELSE):
                targets.add(edge.target)
        return targets


def _is_then_edge(edge: WorkflowEdge, then_claimed: bool) -> bool:
    handle = (edge.source_handle or "").lower()
    if handle in THEN_HANDLES:
        return True
    if handle in ELSE_HANDLES:
        return False
    # Untagged edges fill "then" while it is unclaimed, otherwise "else".
    return not then_claimed


def _walk_tasks(tasks: list[Task]) -> Iterator[Task]:
    """Yield tasks depth-first, each parent before its nested tasks."""
    for task in tasks:
        yield task
        for key in _NESTED_TASK_KEYS:
            nested = task.get(key)
            if isinstance(nested, list):
                yield from _walk_tasks(nested)


def _ensure_unique_ids(tasks: list[Task]) -> None:
    """Suffix repeated task ids (``end``, ``end_2``, ...) across nested lists.

    Suffixes skip every id already present in the flow, so a node whose own
    id is ``end_2`` keeps it and a second ``end`` becomes ``end_3``.
    """
    all_tasks = list(_walk_tasks(tasks))
    taken = {task["id"] for task in all_tasks if isinstance(task.get("id"), str)}
    kept: set[str] = set()

    for task in all_tasks:
        task_id = task.get("id")
        if not isinstance(task_id, str):
            continue
        if task_id in kept:
            n = 2
            while f"{task_id}_{n}" in taken:
                n += 1
            task_id = f"{task_id}_{n}"
            task["id"] = task_id
            taken.add(task_id)
        kept.add(task_id)


def compile_kestra_flow(
    graph: WorkflowGraph,
    agent_name: str | None = None,
    settings: Settings | None = None,
) -> KestraFlowResult:
    """Convenience wrapper around :class:`KestraCompiler`."""
    return KestraCompiler(graph, settings).compile(agent_name)
