"""Repository interfaces."""
from abc import ABC, abstractmethod
from typing import List, Optional

from triggr.models.agent import Agent
from triggr.models.user import User


class IUserRepository(ABC):
    """User repository interface."""

    @abstractmethod
    async def get_by_email(
        self,
        email: str,
    ) -> Optional[User]:
        """Get user by email."""
        pass

    @abstractmethod
    async def create(
        self,
        user: User,
    ) -> User:
        """Create user."""
        pass


class IAgentRepository(ABC):
    """Agent repository interface."""

    @abstractmethod
    async def create(
        self,
        agent: Agent,
    ) -> Agent:
        """Create agent."""
        pass

    @abstractmethod
    async def get_by_agent_id(
        self,
        agent_id: str,
    ) -> Optional[Agent]:
        """Get agent by its public agent_id."""
        pass

    @abstractmethod
    async def list_by_user(
        self,
        user_id: str,
    ) -> List[Agent]:
        """List a user's agents, newest first."""
        pass

    @abstractmethod
    async def update(
        self,
        agent: Agent,
    ) -> Agent:
        """Update agent."""
        pass
