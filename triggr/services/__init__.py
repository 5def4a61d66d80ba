"""Service layer."""
from triggr.services.agent_service import AgentService
from triggr.services.user_service import UserService

__all__ = ["AgentService", "UserService"]
