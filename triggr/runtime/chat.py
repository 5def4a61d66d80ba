"""Chat execution loop driven by a generated agent/tool configuration."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any

from triggr.compiler.tool_config import AgentSpec, AgentToolConfig, ToolSpec
from triggr.config import Settings, get_settings
from triggr.core.types import LLMResponse, Message, ToolCall, Usage
from triggr.errors.exceptions import AgentNotFoundError
from triggr.llm.base import BaseLLMProvider
from triggr.llm.gateway import create_gateway_provider
from triggr.logging import get_logger
from triggr.runtime.http_tool import build_tool_schemas, execute_tool, sanitize_function_name

logger = logging.getLogger(__name__)


@dataclass
class ToolInvocation:
    """One tool call made during a chat run."""

    call_id: str
    tool_name: str
    arguments: dict[str, Any]
    result: Any

    @property
    def success(self) -> bool:
        return not (isinstance(self.result, dict) and "error" in self.result)


@dataclass
class ChatResult:
    """Final answer of a chat run."""

    response: str
    agent_name: str
    tool_results: list[ToolInvocation] = field(default_factory=list)
    usage: Usage = field(default_factory=Usage)
    rounds: int = 0


class AgentChatRunner:
    """Run the primary agent of a config against one user input.

    The model may request tool calls; each round executes them over HTTP
    and feeds the JSON answers back, until the model answers in plain text
    or ``max_tool_rounds`` is reached.

    Example:
        >>> runner = AgentChatRunner()
        >>> result = await runner.run(config, "What's the weather in Paris?")
        >>> print(result.response)
    """

    def __init__(
        self,
        provider: BaseLLMProvider | None = None,
        settings: Settings | None = None,
        *,
        max_tool_rounds: int | None = None,
        tool_timeout: float | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._provider = provider
        self._max_tool_rounds = (
            max_tool_rounds if max_tool_rounds is not None else self._settings.max_tool_rounds
        )
        self._tool_timeout = tool_timeout or self._settings.tool_timeout

    def _provider_for(self, agent: AgentSpec) -> BaseLLMProvider:
        if self._provider is not None:
            return self._provider
        model = agent.model or self._settings.default_agent_model or None
        return create_gateway_provider(self._settings, model)

    @staticmethod
    def build_messages(
        config: AgentToolConfig,
        agent: AgentSpec,
        input: str,
        history: list[Message] | None = None,
    ) -> list[Message]:
        messages: list[Message] = []
        if config.system_prompt:
            messages.append(Message.system(config.system_prompt))
        if agent.instruction:
            messages.append(Message.system(agent.instruction))
        if agent.include_history and history:
            messages.extend(history)
        messages.append(Message.user(input))
        return messages

    async def run(
        self,
        config: AgentToolConfig | dict[str, Any],
        input: str,
        history: list[Message] | None = None,
    ) -> ChatResult:
        """Answer ``input`` with the primary agent of ``config``.

        Raises:
            ValueError: If ``input`` is empty.
            AgentNotFoundError: If the config has no usable agent.
            MissingAPIKeyError: If no provider was injected and no key is set.
        """
        if not input:
            raise ValueError("Input is required")
        if isinstance(config, dict):
            config = AgentToolConfig.model_validate(config)

        agent = config.primary_agent()
        if agent is None:
            raise AgentNotFoundError(config.primary_agent_name or None)

        provider = self._provider_for(agent)
        tools = config.tools_for(agent)
        by_function_name = {sanitize_function_name(tool.name): tool for tool in tools}
        schemas = build_tool_schemas(tools)

        kwargs: dict[str, Any] = {}
        if schemas:
            kwargs["tools"] = schemas
            kwargs["tool_choice"] = "auto"

        messages = self.build_messages(config, agent, input, history)
        usage = Usage()
        invocations: list[ToolInvocation] = []
        response: LLMResponse | None = None
        rounds = 0

        start = time.perf_counter()
        get_logger().agent_start(agent.name, input)

        for _round in range(self._max_tool_rounds):
            response = await provider.complete(messages, **kwargs)
            usage = usage + response.usage
            rounds += 1

            if not response.tool_calls:
                break

            messages.append(Message.assistant(response.content, tool_calls=response.tool_calls))
            for tool_call in response.tool_calls:
                invocation = await self._dispatch(tool_call, by_function_name)
                invocations.append(invocation)
                messages.append(Message.tool(json.dumps(invocation.result), tool_call.id))
        else:
            # Tool budget spent: ask for a final answer without offering tools.
            previous = response.content if response else ""
            response = await provider.complete(messages)
            usage = usage + response.usage
            rounds += 1
            if not response.content:
                response = response.model_copy(update={"content": previous})

        answer = response.content if response else ""
        duration_ms = int((time.perf_counter() - start) * 1000)
        get_logger().agent_end(agent.name, duration_ms, usage.total_tokens)
        logger.info(
            f"Agent '{agent.name}' answered in {rounds} round(s) "
            f"with {len(invocations)} tool call(s)"
        )

        return ChatResult(
            response=answer,
            agent_name=agent.name,
            tool_results=invocations,
            usage=usage,
            rounds=rounds,
        )

    async def _dispatch(self, tool_call: ToolCall, tools: dict[str, ToolSpec]) -> ToolInvocation:
        tool = tools.get(tool_call.name)
        if tool is None:
            logger.warning(f"Model requested unknown tool '{tool_call.name}'")
            result: Any = {"error": f"Unknown tool: {tool_call.name}"}
            get_logger().tool_call(tool_call.name, success=False)
        else:
            result = await execute_tool(tool, tool_call.arguments, timeout=self._tool_timeout)

        return ToolInvocation(
            call_id=tool_call.id,
            tool_name=tool.name if tool else tool_call.name,
            arguments=tool_call.arguments,
            result=result,
        )


async def run_agent_chat(
    config: AgentToolConfig | dict[str, Any],
    input: str,
    history: list[Message] | None = None,
    provider: BaseLLMProvider | None = None,
    settings: Settings | None = None,
) -> ChatResult:
    """Convenience wrapper around :class:`AgentChatRunner`."""
    return await AgentChatRunner(provider, settings).run(config, input, history)
