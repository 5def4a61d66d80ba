"""Unit tests for Kestra flow lowering."""

from __future__ import annotations

from typing import Any

import pytest

from triggr.compiler.kestra import (
    CHAT_COMPLETION_TASK,
    HTTP_REQUEST_TASK,
    IF_TASK,
    LOG_TASK,
    OPENROUTER_PROVIDER,
    PAUSE_TASK,
    WAIT_FOR_TASK,
    KestraCompiler,
    compile_kestra_flow,
)
from triggr.config import Settings
from triggr.graph import WorkflowGraph


def node(node_id: str, node_type: str, label: str | None = None, **settings: Any) -> dict[str, Any]:
    data: dict[str, Any] = {"settings": settings}
    if label:
        data["label"] = label
    return {"id": node_id, "type": node_type, "position": {"x": 0, "y": 0}, "data": data}


def edge(source: str, target: str, handle: str | None = None) -> dict[str, Any]:
    payload = {"id": f"{source}->{target}", "source": source, "target": target}
    if handle:
        payload["sourceHandle"] = handle
    return payload


def graph_of(nodes: list[dict[str, Any]], edges: list[dict[str, Any]] | None = None) -> WorkflowGraph:
    return WorkflowGraph.from_payload({"nodes": nodes, "edges": edges or []})


def single_task(settings: Settings, raw_node: dict[str, Any]) -> dict[str, Any]:
    graph = graph_of([raw_node])
    return KestraCompiler(graph, settings).lower_node(graph.nodes[0])


class TestCompileFlow:
    """Tests for whole-flow compilation."""

    def test_weather_graph(self, settings: Settings, weather_graph_payload: dict[str, Any]) -> None:
        """Branch targets move into the If task, End stays at top level."""
        result = compile_kestra_flow(
            WorkflowGraph.from_payload(weather_graph_payload),
            agent_name="Weather Bot",
            settings=settings,
        )

        tasks = result.flow["tasks"]
        assert [t["id"] for t in tasks] == ["start", "agent_1", "api_1", "if_1", "end"]
        assert result.skipped_nodes == ["approve-1"]
        assert result.task_count == 5

        if_task = tasks[3]
        assert if_task["type"] == IF_TASK
        assert if_task["condition"] == "{{ outputs.api_1.code == 200 }}"
        assert [t["id"] for t in if_task["then"]] == ["approve_1"]
        assert if_task["then"][0]["type"] == PAUSE_TASK
        assert "else" not in if_task

    def test_flow_header(self, settings: Settings, weather_graph_payload: dict[str, Any]) -> None:
        """Flow id, namespace, description and inputs."""
        result = compile_kestra_flow(
            WorkflowGraph.from_payload(weather_graph_payload),
            agent_name="Weather Bot",
            settings=settings,
        )

        assert result.flow_id == "weather_bot"
        assert result.namespace == "triggr.workflows"
        assert result.flow["description"] == "Workflow generated from Triggr: Weather Bot"
        assert result.flow["inputs"] == [
            {"id": "user_prompt", "type": "STRING", "defaults": "Hello, how can you help me?"}
        ]

    def test_yaml_output(self, settings: Settings, weather_graph_payload: dict[str, Any]) -> None:
        """The YAML starts with the header and quotes template expressions."""
        result = compile_kestra_flow(
            WorkflowGraph.from_payload(weather_graph_payload),
            agent_name="Weather Bot",
            settings=settings,
        )

        assert result.yaml.startswith(
            "id: weather_bot\n"
            "namespace: triggr.workflows\n"
            "description: \"Workflow generated from Triggr: Weather Bot\"\n"
        )
        assert "  - id: start\n    type: io.kestra.plugin.core.log.Log\n" in result.yaml
        assert "content: \"{{ inputs.user_prompt }}\"" in result.yaml
        assert "apiKey: \"{{ kv('OPENROUTER_API_KEY') }}\"" in result.yaml

    def test_default_name(self, settings: Settings) -> None:
        """Unnamed flows get a default id and description."""
        result = compile_kestra_flow(graph_of([node("s", "StartNode")]), settings=settings)

        assert result.flow_id == "triggr_workflow"
        assert result.flow["description"] == "Workflow generated from Triggr: Unnamed Workflow"

    def test_empty_graph(self, settings: Settings) -> None:
        """A graph without nodes still yields one task."""
        result = compile_kestra_flow(graph_of([]), settings=settings)

        assert result.flow["tasks"] == [
            {"id": "empty_workflow", "type": LOG_TASK,
             "message": "Empty workflow - add nodes to generate tasks"}
        ]

    def test_namespace_from_settings(self, settings: Settings) -> None:
        """The namespace is configurable."""
        custom = settings.model_copy(update={"kestra_namespace": "acme.flows"})

        result = compile_kestra_flow(graph_of([node("s", "StartNode")]), settings=custom)

        assert result.namespace == "acme.flows"
        assert result.flow["namespace"] == "acme.flows"

    def test_duplicate_task_ids_get_suffixes(self, settings: Settings) -> None:
        """Two End nodes both lower to 'end'; suffixes skip ids already taken."""
        graph = graph_of(
            [node("s", "StartNode"), node("e1", "EndNode"), node("e2", "EndNode"),
             node("end-2", "AgentNode")],
            [edge("s", "e1"), edge("s", "e2"), edge("s", "end-2")],
        )

        tasks = compile_kestra_flow(graph, settings=settings).flow["tasks"]

        ids = [t["id"] for t in tasks]
        assert ids == ["start", "end", "end_3", "end_2"]
        assert len(set(ids)) == len(ids)

    def test_duplicate_ids_inside_branches(self, settings: Settings) -> None:
        """Nested task ids are unique across the whole flow."""
        graph = graph_of(
            [node("s", "StartNode"), node("i", "IfElseNode"),
             node("a", "UserApprovalNode"), node("a_approval_log", "AgentNode")],
            [edge("s", "i"), edge("i", "a", "if"), edge("s", "a_approval_log")],
        )

        tasks = compile_kestra_flow(graph, settings=settings).flow["tasks"]

        ids = [t["id"] for t in tasks]
        nested = tasks[ids.index("i")]["then"][0]["tasks"][0]["id"]
        assert nested == "a_approval_log"
        assert ids == ["start", "i", "a_approval_log_2"]

    def test_untagged_end_edge_claims_then(self, settings: Settings) -> None:
        """An End reached first by an untagged edge takes the then slot."""
        graph = graph_of(
            [node("s", "StartNode"), node("i", "IfElseNode"),
             node("x", "EndNode"), node("a", "AgentNode")],
            [edge("s", "i"), edge("i", "x"), edge("i", "a")],
        )

        tasks = compile_kestra_flow(graph, settings=settings).flow["tasks"]

        if_task = next(t for t in tasks if t["id"] == "i")
        assert [t["id"] for t in if_task["then"]] == ["i_then_log"]
        assert [t["id"] for t in if_task["else"]] == ["a"]
        assert [t["id"] for t in tasks] == ["start", "i", "end"]

    def test_if_else_cycle_terminates(self, settings: Settings) -> None:
        """IfElse nodes pointing at each other are not lowered forever."""
        graph = graph_of(
            [node("s", "StartNode"), node("i1", "IfElseNode"), node("i2", "IfElseNode")],
            [edge("s", "i1"), edge("i1", "i2", "if"), edge("i2", "i1", "if")],
        )

        tasks = compile_kestra_flow(graph, settings=settings).flow["tasks"]

        # i1 is itself a branch target of i2, so nothing but start is top level.
        assert [t["id"] for t in tasks] == ["start"]


class TestLowerNode:
    """Tests for per-node lowering."""

    def test_start_and_end(self, settings: Settings) -> None:
        """Boundary nodes become log tasks."""
        assert single_task(settings, node("x", "StartNode")) == {
            "id": "start", "type": LOG_TASK, "message": "Workflow started",
        }
        assert single_task(settings, node("y", "EndNode")) == {
            "id": "end", "type": LOG_TASK, "message": "Workflow completed successfully",
        }

    def test_agent(self, settings: Settings) -> None:
        """Agents become ChatCompletion tasks behind OpenRouter."""
        task = single_task(
            settings,
            node("agent-1", "AgentNode", name="Bot", instruction="Be brief.", model="anthropic/claude-3.5-sonnet"),
        )

        assert task["id"] == "agent_1"
        assert task["type"] == CHAT_COMPLETION_TASK
        assert task["provider"] == {
            "type": OPENROUTER_PROVIDER,
            "modelName": "anthropic/claude-3.5-sonnet",
            "apiKey": "{{ kv('OPENROUTER_API_KEY') }}",
            "baseUrl": "https://openrouter.ai/api/v1",
        }
        assert task["messages"] == [
            {"type": "SYSTEM", "content": "Be brief."},
            {"type": "USER", "content": "{{ inputs.user_prompt }}"},
        ]

    def test_agent_defaults(self, settings: Settings) -> None:
        """Missing model and instruction fall back to defaults."""
        task = single_task(settings, node("a", "AgentNode", label="Helper"))

        assert task["provider"]["modelName"] == "openai/gpt-4o-mini"
        assert task["messages"][0]["content"] == "You are Helper. Be helpful and concise."

    def test_agent_system_prompt_fallback(self, settings: Settings) -> None:
        """systemPrompt is used when instruction is empty."""
        task = single_task(settings, node("a", "AgentNode", systemPrompt="Legacy prompt"))

        assert task["messages"][0]["content"] == "Legacy prompt"

    def test_api_bearer(self, settings: Settings) -> None:
        """Bearer auth uses a KV secret named after the API."""
        task = single_task(
            settings,
            node("api", "ApiNode", name="Stripe API", endpoint="https://api.stripe.test/v1/charges",
                 method="post", authType="bearer", body='{"amount": 1}'),
        )

        assert task["type"] == HTTP_REQUEST_TASK
        assert task["method"] == "POST"
        assert task["headers"] == {"Authorization": "Bearer {{ kv('STRIPE_API_API_KEY') }}"}
        assert task["body"] == '{"amount": 1}'
        assert task["contentType"] == "application/json"

    def test_api_header_auth_then_custom_headers(self, settings: Settings) -> None:
        """Custom headers are merged after the auth header."""
        task = single_task(
            settings,
            node("api", "ApiNode", name="News", url="https://news.test", authType="header",
                 apiKeyName="X-Api-Key", headers='{"Accept": "application/json"}'),
        )

        assert task["uri"] == "https://news.test"
        assert task["headers"] == {
            "X-Api-Key": "{{ kv('NEWS_API_KEY') }}",
            "Accept": "application/json",
        }

    @pytest.mark.parametrize(
        ("endpoint", "expected"),
        [
            ("https://w.test/v1?q=paris&key={key}", "https://w.test/v1?q=paris&key={{ kv('W_API_KEY') }}"),
            ("https://w.test/v1?q=paris", "https://w.test/v1?q=paris&key={{ kv('W_API_KEY') }}"),
            ("https://w.test/v1", "https://w.test/v1?key={{ kv('W_API_KEY') }}"),
        ],
    )
    def test_api_query_auth(self, settings: Settings, endpoint: str, expected: str) -> None:
        """Query auth fills the placeholder or appends a parameter."""
        task = single_task(settings, node("api", "ApiNode", name="W", endpoint=endpoint, authType="query"))

        assert task["uri"] == expected
        assert "headers" not in task

    def test_api_get_ignores_body(self, settings: Settings) -> None:
        """GET requests never carry a body."""
        task = single_task(settings, node("api", "ApiNode", url="https://x.test", body="{}"))

        assert "body" not in task
        assert task["method"] == "GET"

    def test_api_name_from_label(self, settings: Settings) -> None:
        """The secret name falls back to the node label."""
        task = single_task(
            settings, node("api", "ApiNode", label="Geo Lookup", url="https://g.test", authType="bearer"),
        )

        assert task["headers"]["Authorization"] == "Bearer {{ kv('GEO_LOOKUP_API_KEY') }}"

    def test_if_else_untagged_edges(self, settings: Settings) -> None:
        """The first untagged edge is 'then', later ones 'else'."""
        graph = graph_of(
            [node("i", "IfElseNode", condition="x > 1"), node("a", "AgentNode"), node("b", "AgentNode")],
            [edge("i", "a"), edge("i", "b")],
        )
        compiler = KestraCompiler(graph, settings)

        task = compiler.lower_node(graph.get_node("i"))

        assert task["condition"] == "{{ x > 1 }}"
        assert [t["id"] for t in task["then"]] == ["a"]
        assert [t["id"] for t in task["else"]] == ["b"]

    def test_if_else_true_false_handles(self, settings: Settings) -> None:
        """'true'/'false' handles select branches too."""
        graph = graph_of(
            [node("i", "IfElseNode"), node("a", "AgentNode"), node("b", "AgentNode")],
            [edge("i", "b", "false"), edge("i", "a", "true")],
        )
        compiler = KestraCompiler(graph, settings)

        task = compiler.lower_node(graph.get_node("i"))

        assert task["condition"] == "{{ true }}"
        assert [t["id"] for t in task["then"]] == ["a"]
        assert [t["id"] for t in task["else"]] == ["b"]

    def test_if_else_without_targets(self, settings: Settings) -> None:
        """An empty then-branch gets a placeholder log task."""
        task = single_task(settings, node("cond", "IfElseNode", ifCondition="ready"))

        assert task["then"] == [
            {"id": "cond_then_log", "type": LOG_TASK, "message": "Condition was true"}
        ]
        assert "else" not in task

    def test_while(self, settings: Settings) -> None:
        """While nodes become WaitFor tasks."""
        task = single_task(settings, node("loop", "WhileNode", whileCondition="count < 3"))

        assert task == {
            "id": "loop",
            "type": WAIT_FOR_TASK,
            "condition": "{{ count < 3 }}",
            "tasks": [{"id": "loop_loop_task", "type": LOG_TASK, "message": "Loop iteration"}],
            "checkFrequency": {"interval": "PT1S", "maxDuration": "PT60S"},
        }

    def test_user_approval(self, settings: Settings) -> None:
        """Approval nodes become Pause tasks with resume inputs."""
        task = single_task(settings, node("ok", "UserApprovalNode", message="Ship it?"))

        assert task["type"] == PAUSE_TASK
        assert task["onResume"] == [
            {"id": "approved", "type": "BOOLEAN", "defaults": "true"},
            {"id": "reason", "type": "STRING", "required": False},
        ]
        assert task["tasks"] == [{"id": "ok_approval_log", "type": LOG_TASK, "message": "Ship it?"}]

    def test_user_approval_default_message(self, settings: Settings) -> None:
        """An empty message uses the default prompt."""
        task = single_task(settings, node("ok", "UserApprovalNode"))

        assert task["tasks"][0]["message"] == "Please approve to continue"

    def test_unknown_type(self, settings: Settings) -> None:
        """Unknown node types become log tasks."""
        task = single_task(settings, node("n-1", "NoteNode", label="Sticky"))

        assert task == {"id": "n_1", "type": LOG_TASK, "message": "Executing node: Sticky"}

    def test_if_else_cycle_lowers_each_node_once(self, settings: Settings) -> None:
        """Lowering a branch that loops back stops at the repeated node."""
        graph = graph_of(
            [node("i1", "IfElseNode"), node("i2", "IfElseNode")],
            [edge("i1", "i2", "if"), edge("i2", "i1", "if")],
        )

        task = KestraCompiler(graph, settings).lower_node(graph.get_node("i1"))

        inner = task["then"][0]
        assert inner["id"] == "i2"
        assert inner["then"] == [{"id": "i2_then_log", "type": LOG_TASK, "message": "Condition was true"}]
