"""SQLAlchemy models."""
from triggr.models.agent import Agent
from triggr.models.user import User

__all__ = [
    "Agent",
    "User",
]
