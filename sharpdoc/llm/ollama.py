"""Ollama adapter for sharpdoc."""

from __future__ import annotations

import logging
from urllib.parse import urlparse

import httpx

from sharpdoc.llm.base import LLMProvider
from sharpdoc.llm.models import (
    CompletionRequest,
    LLMConfig,
    LLMError,
    LLMResponse,
    TokenUsage,
)

logger = logging.getLogger(__name__)

_DEFAULT_BASE_URL = "http://localhost:11434"


def _validate_base_url(url: str) -> str:
    """Reject non-http(s) and header-injection URLs; warn on remote hosts."""
    parsed = urlparse(url)

    if parsed.scheme not in ("http", "https"):
        raise ValueError(f"Ollama base_url must be http(s), got {parsed.scheme}")

    if "\r" in url or "\n" in url:
        raise ValueError("CRLF injection detected in base_url")

    allowed_hosts = {"localhost", "127.0.0.1", "::1", "0.0.0.0"}
    if parsed.hostname not in allowed_hosts:
        logger.warning(
            "Ollama base_url %s is not localhost, ensure this is intentional",
            parsed.hostname,
        )

    return url


def _is_transient(error: httpx.HTTPError) -> bool:
    if isinstance(error, httpx.TransportError):
        return True
    if isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
        return status == 429 or status >= 500
    return False


class OllamaProvider(LLMProvider):
    """Ollama adapter using its REST API via httpx."""

    name = "ollama"

    def __init__(self, config: LLMConfig) -> None:
        super().__init__(config)
        raw_url = (config.base_url or _DEFAULT_BASE_URL).rstrip("/")
        self._base_url = _validate_base_url(raw_url)

    async def complete(self, request: CompletionRequest) -> LLMResponse:
        payload = {
            "model": self.config.model,
            "messages": [m.model_dump() for m in request.messages],
            "stream": False,
            "options": {
                "temperature": self.config.temperature,
                "num_predict": self.config.max_tokens,
            },
        }
        try:
            async with httpx.AsyncClient() as client:
                resp = await client.post(
                    f"{self._base_url}/api/chat",
                    json=payload,
                    timeout=self.config.timeout,
                )
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPError as e:
            raise LLMError("ollama", "complete", e, retryable=_is_transient(e)) from e

        content = data.get("message", {}).get("content", "")
        if not content:
            raise ValueError("No content in Ollama response")
        return LLMResponse(
            content=content,
            usage=TokenUsage(
                input_tokens=data.get("prompt_eval_count", 0),
                output_tokens=data.get("eval_count", 0),
            ),
            model=self.config.model,
        )
