"""Agent service.

Stores agent workflows and hands their graphs to the compilers.
"""
from __future__ import annotations

import json
import logging
from typing import Any

from triggr.compiler.kestra import KestraFlowResult, compile_kestra_flow
from triggr.config import Settings
from triggr.errors.exceptions import AgentAlreadyExistsError, AgentRecordNotFoundError
from triggr.graph.flow_config import build_flow_config
from triggr.graph.models import WorkflowGraph
from triggr.models.agent import Agent
from triggr.repositories.interfaces import IAgentRepository

logger = logging.getLogger(__name__)


class AgentService:
    """Service layer for agent operations.

    Example:
        >>> service = AgentService(AgentRepository(session))
        >>> agent = await service.create_agent("Weather Bot", "agent-123", user.id)
        >>> await service.update_agent_detail("agent-123", nodes, edges)
        >>> result = await service.compile_kestra("agent-123")
    """

    def __init__(self, repository: IAgentRepository) -> None:
        self.repository = repository

    async def create_agent(self, name: str, agent_id: str, user_id: str) -> Agent:
        """Create an unpublished agent with an empty graph.

        Raises:
            AgentAlreadyExistsError: If ``agent_id`` is taken.
        """
        if await self.repository.get_by_agent_id(agent_id) is not None:
            raise AgentAlreadyExistsError(agent_id)

        agent = await self.repository.create(
            Agent(name=name, agent_id=agent_id, user_id=user_id, published=False)
        )
        logger.info(f"Created agent '{name}' ({agent_id}) for user {user_id}")
        return agent

    async def get_agent(self, agent_id: str) -> Agent:
        """Raises AgentRecordNotFoundError if missing."""
        agent = await self.repository.get_by_agent_id(agent_id)
        if agent is None:
            raise AgentRecordNotFoundError(agent_id)
        return agent

    async def list_user_agents(self, user_id: str) -> list[Agent]:
        return await self.repository.list_by_user(user_id)

    async def update_agent_detail(
        self,
        agent_id: str,
        nodes: list[dict[str, Any]],
        edges: list[dict[str, Any]],
        config: dict[str, Any] | None = None,
    ) -> Agent:
        """Save the canvas graph (and optionally the flow config) of an agent."""
        agent = await self.get_agent(agent_id)

        graph = WorkflowGraph.from_payload({"nodes": nodes, "edges": edges})
        payload = graph.to_payload()
        agent.nodes = json.dumps(payload["nodes"])
        agent.edges = json.dumps(payload["edges"])
        if config is not None:
            agent.config = json.dumps(config)

        return await self.repository.update(agent)

    async def update_agent_tool_config(
        self,
        agent_id: str,
        tool_config: dict[str, Any],
    ) -> Agent:
        agent = await self.get_agent(agent_id)
        agent.agent_tool_config = json.dumps(tool_config)
        return await self.repository.update(agent)

    async def get_graph(self, agent_id: str) -> WorkflowGraph:
        return _graph_of(await self.get_agent(agent_id))

    async def build_flow_config(self, agent_id: str) -> dict[str, Any]:
        """Flow config of the stored graph, as sent to the generators."""
        return build_flow_config(await self.get_graph(agent_id))

    async def compile_kestra(
        self,
        agent_id: str,
        settings: Settings | None = None,
    ) -> KestraFlowResult:
        """Lower the stored graph to a Kestra flow named after the agent."""
        agent = await self.get_agent(agent_id)
        return compile_kestra_flow(_graph_of(agent), agent_name=agent.name, settings=settings)


def _graph_of(agent: Agent) -> WorkflowGraph:
    return WorkflowGraph.from_payload({"nodes": agent.nodes_list(), "edges": agent.edges_list()})
