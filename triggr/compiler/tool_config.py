"""LLM-backed generation of the agent/tool configuration.

The flow config (see :func:`triggr.graph.build_flow_config`) is sent to the
model together with :data:`TOOL_CONFIG_PROMPT`; the JSON it answers with
is validated into an :class:`AgentToolConfig`, which is what the chat
runner executes.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from triggr.compiler.prompts import TOOL_CONFIG_PROMPT
from triggr.config import Settings, get_settings
from triggr.core.types import Message
from triggr.errors.exceptions import ConfigGenerationError
from triggr.llm.base import BaseLLMProvider
from triggr.llm.gateway import create_gateway_provider

logger = logging.getLogger(__name__)

MOCK_WARNING = "No model provider API key set. Returning mock agent tool configuration."

_LEADING_FENCE = re.compile(r"^\s*```[a-zA-Z]*\s*\n?")
_TRAILING_FENCE = re.compile(r"\n?\s*```\s*$")


class _ConfigModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")


class ToolSpec(_ConfigModel):
    """An HTTP tool the agent may call."""

    id: str = ""
    name: str
    description: str = ""
    method: str = "GET"
    url: str = ""
    headers: dict[str, Any] | str | None = None
    auth_type: str | None = Field(None, alias="authType")
    api_key: str = Field("", alias="apiKey")
    api_key_name: str = Field("", alias="apiKeyName")
    include_api_key: bool = Field(False, alias="includeApiKey")
    parameters: dict[str, Any] = Field(default_factory=dict)
    usage: list[Any] = Field(default_factory=list)
    assigned_agent: str = Field("", alias="assignedAgent")

    @property
    def resolved_auth_type(self) -> str:
        """``authType``, defaulting to bearer when ``includeApiKey`` is set."""
        if self.auth_type:
            return self.auth_type.lower()
        return "bearer" if self.include_api_key else "none"

    @property
    def key_name(self) -> str:
        return self.api_key_name or "key"


class AgentSpec(_ConfigModel):
    """One agent of the generated configuration."""

    id: str = ""
    name: str
    model: str = ""
    instruction: str = ""
    tools: list[str] | None = None
    include_history: bool = Field(False, alias="includeHistory")
    output: str = ""


class AgentToolConfig(_ConfigModel):
    """Agents and tools driving the chat execution loop."""

    system_prompt: str = Field("", alias="systemPrompt")
    primary_agent_name: str = Field("", alias="primaryAgentName")
    agents: list[AgentSpec] = Field(default_factory=list)
    tools: list[ToolSpec] = Field(default_factory=list)

    def primary_agent(self) -> AgentSpec | None:
        """The agent named ``primaryAgentName``, else the first agent."""
        if self.primary_agent_name:
            for agent in self.agents:
                if agent.name == self.primary_agent_name:
                    return agent
        return self.agents[0] if self.agents else None

    def tools_for(self, agent: AgentSpec) -> list[ToolSpec]:
        """Tools offered to ``agent``.

        A missing ``tools`` list means every tool; an empty list means none.
        """
        if agent.tools is None:
            return list(self.tools)
        return [tool for tool in self.tools if tool.id in agent.tools]


@dataclass
class ToolConfigResult:
    """Outcome of :meth:`ToolConfigGenerator.generate`."""

    config: dict[str, Any]
    mock: bool = False
    warning: str | None = None

    def parsed(self) -> AgentToolConfig:
        return AgentToolConfig.model_validate(self.config)


def strip_markdown_fences(text: str) -> str:
    """Remove a leading ```lang fence and a trailing ``` fence."""
    text = _LEADING_FENCE.sub("", text, count=1)
    text = _TRAILING_FENCE.sub("", text, count=1)
    return text.strip()


def parse_tool_config(raw_output: str) -> dict[str, Any]:
    """Parse and validate model output.

    Raises:
        ConfigGenerationError: If the output is not a valid configuration.
    """
    cleaned = strip_markdown_fences(raw_output)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ConfigGenerationError(
            f"response is not valid JSON ({e.msg})", raw_output=raw_output
        ) from e

    if not isinstance(data, dict):
        raise ConfigGenerationError("response is not a JSON object", raw_output=raw_output)

    try:
        AgentToolConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigGenerationError(
            f"response does not match the config schema ({e.error_count()} errors)",
            raw_output=raw_output,
        ) from e

    return data


class ToolConfigGenerator:
    """Turn a flow config into an agent/tool configuration via the model gateway."""

    def __init__(
        self,
        provider: BaseLLMProvider | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._provider = provider
        self._settings = settings or get_settings()

    async def generate(self, flow_config: dict[str, Any]) -> ToolConfigResult:
        """Generate the configuration for ``flow_config``.

        Without an injected provider and without any gateway key the input
        is returned unchanged as a mock result.

        Raises:
            ConfigGenerationError: If the model answer cannot be used.
        """
        provider = self._provider
        if provider is None:
            if not self._settings.has_llm_keys:
                logger.warning(MOCK_WARNING)
                return ToolConfigResult(config=flow_config, mock=True, warning=MOCK_WARNING)
            provider = create_gateway_provider(
                self._settings, self._settings.tool_config_model or None
            )

        prompt = json.dumps(flow_config) + TOOL_CONFIG_PROMPT
        response = await provider.complete([Message.user(prompt)])
        logger.info(
            f"Tool config generated by {provider.provider_name}/{response.model} "
            f"({response.usage.total_tokens} tokens)"
        )

        try:
            config = parse_tool_config(response.content)
        except ConfigGenerationError as e:
            logger.error(f"{e} | raw output: {response.content[:500]}")
            raise

        return ToolConfigResult(config=config)


async def generate_tool_config(
    flow_config: dict[str, Any],
    provider: BaseLLMProvider | None = None,
    settings: Settings | None = None,
) -> ToolConfigResult:
    """Convenience wrapper around :class:`ToolConfigGenerator`."""
    return await ToolConfigGenerator(provider, settings).generate(flow_config)
