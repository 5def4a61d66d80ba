"""Generate standalone JavaScript from a flow config."""

from __future__ import annotations

import json
import logging
from typing import Any

from triggr.compiler.prompts import CODEGEN_SYSTEM_PROMPT, CODEGEN_USER_PROMPT
from triggr.compiler.tool_config import strip_markdown_fences
from triggr.config import Settings, get_settings
from triggr.core.types import Message
from triggr.errors.exceptions import CompilationError
from triggr.llm.base import BaseLLMProvider
from triggr.llm.gateway import create_gateway_provider

logger = logging.getLogger(__name__)


class JavaScriptGenerator:
    """Ask the model gateway to write a ``runWorkflow`` module for a flow."""

    def __init__(
        self,
        provider: BaseLLMProvider | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._provider = provider

    def _get_provider(self) -> BaseLLMProvider:
        if self._provider is None:
            # The default codegen model is only served through OpenRouter.
            model = self._settings.codegen_model if self._settings.openrouter_api_key else None
            self._provider = create_gateway_provider(
                self._settings, model, prefer_openrouter=True
            )
        return self._provider

    @staticmethod
    def build_messages(flow_config: dict[str, Any]) -> list[Message]:
        prompt = CODEGEN_USER_PROMPT.format(flow_config=json.dumps(flow_config, indent=2))
        return [Message.system(CODEGEN_SYSTEM_PROMPT), Message.user(prompt)]

    async def generate(self, flow_config: dict[str, Any]) -> str:
        """Return JavaScript source with any markdown fences removed.

        Raises:
            ValueError: If ``flow_config`` is empty.
            CompilationError: If the model returns no code.
        """
        if not flow_config:
            raise ValueError("Flow configuration is required")

        provider = self._get_provider()
        response = await provider.complete(
            self.build_messages(flow_config),
            temperature=self._settings.codegen_temperature,
            max_tokens=self._settings.codegen_max_tokens,
        )

        code = strip_markdown_fences(response.content)
        if not code:
            raise CompilationError("Failed to generate code: empty model response")

        logger.info(f"Generated {len(code.splitlines())} lines of JavaScript with {response.model}")
        return code


async def generate_javascript(
    flow_config: dict[str, Any],
    provider: BaseLLMProvider | None = None,
    settings: Settings | None = None,
) -> str:
    """Convenience wrapper around :class:`JavaScriptGenerator`."""
    return await JavaScriptGenerator(provider, settings).generate(flow_config)
