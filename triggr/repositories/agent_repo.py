"""Agent repository implementation."""
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from triggr.models.agent import Agent
from triggr.repositories.interfaces import IAgentRepository


class AgentRepository(IAgentRepository):
    """Agent repository."""

    def __init__(self, session: AsyncSession):
        """Initialize repository.

        Args:
            session: Database session
        """
        self.session = session

    async def create(
        self,
        agent: Agent,
    ) -> Agent:
        """Create agent.

        Args:
            agent: Agent entity

        Returns:
            Created agent
        """
        self.session.add(agent)
        await self.session.flush()
        return agent

    async def get_by_agent_id(
        self,
        agent_id: str,
    ) -> Optional[Agent]:
        """Get agent by agent_id.

        Args:
            agent_id: Public agent identifier

        Returns:
            Agent or None
        """
        stmt = select(Agent).where(
            Agent.agent_id == agent_id
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_user(
        self,
        user_id: str,
    ) -> List[Agent]:
        """List a user's agents.

        Args:
            user_id: Owner ID

        Returns:
            Agents, newest first
        """
        stmt = (
            select(Agent)
            .where(Agent.user_id == user_id)
            .order_by(Agent.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update(
        self,
        agent: Agent,
    ) -> Agent:
        """Update agent.

        Args:
            agent: Agent entity

        Returns:
            Updated agent
        """
        await self.session.merge(agent)
        await self.session.flush()
        return agent
