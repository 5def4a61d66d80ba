"""Repositories."""
from triggr.repositories.agent_repo import AgentRepository
from triggr.repositories.interfaces import IAgentRepository, IUserRepository
from triggr.repositories.user_repo import UserRepository

__all__ = [
    "AgentRepository",
    "IAgentRepository",
    "IUserRepository",
    "UserRepository",
]
