"""Pick a chat-completions endpoint from the configured keys."""

from __future__ import annotations

import logging

from triggr.config import Settings, get_settings
from triggr.errors.exceptions import MissingAPIKeyError
from triggr.llm.openai import OpenAIProvider

logger = logging.getLogger(__name__)

OPENAI_DEFAULT_MODEL = "gpt-4o-mini"
OPENROUTER_DEFAULT_MODEL = "openai/gpt-4o-mini"


def create_gateway_provider(
    settings: Settings | None = None,
    model: str | None = None,
    *,
    prefer_openrouter: bool = False,
) -> OpenAIProvider:
    """Return a provider for whichever gateway has a key.

    OpenAI is used when its key is set, otherwise OpenRouter. With
    ``prefer_openrouter`` the order is reversed, which is what the code
    generator wants since its default model is only served by OpenRouter.

    Raises:
        MissingAPIKeyError: If neither key is configured.
    """
    settings = settings or get_settings()

    use_openrouter = bool(settings.openrouter_api_key) and (
        prefer_openrouter or not settings.openai_api_key
    )

    if use_openrouter:
        logger.debug(f"Using OpenRouter gateway (model={model or OPENROUTER_DEFAULT_MODEL})")
        return OpenAIProvider(
            model=model or OPENROUTER_DEFAULT_MODEL,
            api_key=settings.openrouter_api_key,
            base_url=settings.openrouter_base_url,
            timeout=settings.llm_timeout,
            provider_name="openrouter",
        )

    if settings.openai_api_key:
        logger.debug(f"Using OpenAI gateway (model={model or OPENAI_DEFAULT_MODEL})")
        return OpenAIProvider(
            model=model or OPENAI_DEFAULT_MODEL,
            api_key=settings.openai_api_key,
            timeout=settings.llm_timeout,
        )

    raise MissingAPIKeyError("openrouter")
