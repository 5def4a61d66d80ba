"""User service."""
from __future__ import annotations

import logging

from triggr.config import Settings, get_settings
from triggr.models.user import User
from triggr.repositories.interfaces import IUserRepository

logger = logging.getLogger(__name__)


class UserService:
    """Sign-in side of user management."""

    def __init__(
        self,
        repository: IUserRepository,
        settings: Settings | None = None,
    ) -> None:
        self.repository = repository
        self.settings = settings or get_settings()

    async def create_new_user(self, name: str, email: str) -> User:
        """Return the user with ``email``, creating it on first sign-in.

        New users start with ``settings.new_user_token`` tokens.
        """
        existing = await self.repository.get_by_email(email)
        if existing is not None:
            return existing

        user = await self.repository.create(
            User(name=name, email=email, token=self.settings.new_user_token)
        )
        logger.info(f"Created user {user.id} ({email})")
        return user
