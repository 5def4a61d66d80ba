"""Agent model.

Graph parts and generated configs are stored as JSON text.
"""
from __future__ import annotations

import json
import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from triggr.db.database import Base
from triggr.models._time import utcnow


class Agent(Base):
    """A saved agent workflow."""

    __tablename__ = "agents"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    agent_id: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    config: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    nodes: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="[]",
    )
    edges: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="[]",
    )
    published: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    agent_tool_config: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    def nodes_list(self) -> list[dict[str, Any]]:
        return json.loads(self.nodes or "[]")

    def edges_list(self) -> list[dict[str, Any]]:
        return json.loads(self.edges or "[]")

    def config_dict(self) -> dict[str, Any] | None:
        return json.loads(self.config) if self.config else None

    def tool_config_dict(self) -> dict[str, Any] | None:
        return json.loads(self.agent_tool_config) if self.agent_tool_config else None
