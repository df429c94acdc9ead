"""LLM provider abstraction layer."""

import os

from sharpdoc.config.models import LLMSettings
from sharpdoc.llm.base import LLMProvider
from sharpdoc.llm.claude import ClaudeProvider
from sharpdoc.llm.models import (
    ChatMessage,
    CompletionError,
    CompletionRequest,
    LLMConfig,
    LLMError,
    LLMResponse,
    TokenUsage,
)
from sharpdoc.llm.ollama import OllamaProvider
from sharpdoc.llm.openai_adapter import OpenAIProvider
from sharpdoc.llm.resilient import ResilientCompletionClient

_PROVIDER_MAP: dict[str, type[LLMProvider]] = {
    "openai": OpenAIProvider,
    "anthropic": ClaudeProvider,
    "ollama": OllamaProvider,
}


def resolve_api_key(settings: LLMSettings, api_key: str | None = None) -> str | None:
    """Explicit key wins, then the env var named in ``settings.api_key_env``."""
    return api_key or os.environ.get(settings.api_key_env) or None


def create_llm_provider(settings: LLMSettings, api_key: str | None = None) -> LLMProvider:
    """Create an LLM provider from app-level settings.

    Bridges the app-level LLMSettings to the provider-level LLMConfig.
    Hosted providers need a key, passed in or read from the environment.
    """
    cls = _PROVIDER_MAP.get(settings.provider)
    if cls is None:
        raise ValueError(
            f"Unsupported LLM provider: {settings.provider!r}. "
            f"Supported: {', '.join(_PROVIDER_MAP)}"
        )

    key = resolve_api_key(settings, api_key)
    # Ollama doesn't require an API key
    if settings.provider != "ollama" and not key:
        raise ValueError(
            f"Missing API key: pass --api-key or set environment variable "
            f"{settings.api_key_env!r}"
        )
    llm_config = LLMConfig(
        provider=settings.provider,
        model=settings.model,
        max_tokens=settings.max_tokens,
        temperature=settings.temperature,
        timeout=settings.timeout,
        api_key=key if settings.provider != "ollama" else None,
        base_url=settings.base_url,
    )
    return cls(llm_config)


__all__ = [
    "ChatMessage",
    "ClaudeProvider",
    "CompletionError",
    "CompletionRequest",
    "LLMConfig",
    "LLMError",
    "LLMProvider",
    "LLMResponse",
    "OllamaProvider",
    "OpenAIProvider",
    "ResilientCompletionClient",
    "TokenUsage",
    "create_llm_provider",
    "resolve_api_key",
]
