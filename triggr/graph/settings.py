"""Typed views over per-node ``data.settings`` payloads.

The settings forms store loosely-shaped dictionaries, so every model
accepts unknown keys and falls back to the form defaults.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from triggr.graph.models import NodeType, WorkflowNode

logger = logging.getLogger(__name__)

AuthType = Literal["none", "bearer", "query", "header"]


class _NodeSettings(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # Cleared form fields arrive as null; fall back to the defaults.
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class AgentNodeSettings(_NodeSettings):
    name: str = ""
    instruction: str = ""
    system_prompt: str = Field("", alias="systemPrompt")
    include_history: bool = Field(True, alias="includeHistory")
    model: str = ""
    output: str = "Text"
    output_schema: str = Field("", alias="schema")


class ApiNodeSettings(_NodeSettings):
    name: str = ""
    endpoint: str = ""
    url: str = ""
    method: str = "GET"
    headers: dict[str, Any] | str | None = None
    body: Any = None
    auth_type: str = Field("none", alias="authType")
    api_key: str = Field("", alias="apiKey")
    api_key_name: str = Field("key", alias="apiKeyName")

    @property
    def target_url(self) -> str:
        """Endpoint URL; either key may be used."""
        return self.endpoint or self.url

    @property
    def key_name(self) -> str:
        return self.api_key_name or "key"

    def parsed_headers(self) -> dict[str, str]:
        """Custom headers as a mapping; invalid JSON strings yield ``{}``."""
        return parse_headers(self.headers, owner=self.name or "API Call")


class IfElseNodeSettings(_NodeSettings):
    condition: str = ""
    if_condition: str = Field("", alias="ifCondition")

    @property
    def expression(self) -> str:
        return self.condition or self.if_condition or "true"


class WhileNodeSettings(_NodeSettings):
    condition: str = ""
    while_condition: str = Field("", alias="whileCondition")

    @property
    def expression(self) -> str:
        return self.condition or self.while_condition or "false"


class UserApprovalNodeSettings(_NodeSettings):
    name: str = ""
    message: str = ""


class EndNodeSettings(_NodeSettings):
    output_schema: str = Field("", alias="schema")


SETTINGS_MODELS: dict[str, type[_NodeSettings]] = {
    NodeType.AGENT.value: AgentNodeSettings,
    NodeType.API.value: ApiNodeSettings,
    NodeType.IF_ELSE.value: IfElseNodeSettings,
    NodeType.WHILE.value: WhileNodeSettings,
    NodeType.USER_APPROVAL.value: UserApprovalNodeSettings,
    NodeType.END.value: EndNodeSettings,
}


def parse_settings(node: WorkflowNode) -> _NodeSettings | None:
    """Return the typed settings of a node, or None for types without settings."""
    model = SETTINGS_MODELS.get(node.node_type or "")
    if model is None:
        return None
    return model.model_validate(node.settings)


def parse_headers(raw: Any, *, owner: str = "") -> dict[str, str]:
    """Accept headers as a mapping or a JSON object string."""
    if not raw:
        return {}
    if isinstance(raw, dict):
        return {str(k): str(v) for k, v in raw.items()}
    if isinstance(raw, str):
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to parse headers for {owner or 'node'}: {e}")
            return {}
        if isinstance(decoded, dict):
            return {str(k): str(v) for k, v in decoded.items()}
        logger.warning(f"Headers for {owner or 'node'} are not a JSON object, ignoring")
    return {}
