"""LLM providers."""

from triggr.llm.base import BaseLLMProvider
from triggr.llm.gateway import create_gateway_provider
from triggr.llm.openai import OpenAIProvider

__all__ = [
    "BaseLLMProvider",
    "OpenAIProvider",
    "create_gateway_provider",
]
