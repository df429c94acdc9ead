"""Anthropic Claude adapter for sharpdoc."""

from __future__ import annotations

from anthropic import (
    APIConnectionError,
    APIError,
    AsyncAnthropic,
    InternalServerError,
    RateLimitError,
)

from sharpdoc.llm.base import LLMProvider
from sharpdoc.llm.models import (
    CompletionRequest,
    LLMConfig,
    LLMError,
    LLMResponse,
    TokenUsage,
)

_TRANSIENT = (APIConnectionError, RateLimitError, InternalServerError)


class ClaudeProvider(LLMProvider):
    """Claude adapter using the Anthropic async SDK."""

    name = "claude"

    def __init__(self, config: LLMConfig) -> None:
        super().__init__(config)
        self._client = AsyncAnthropic(
            api_key=config.api_key,  # falls back to ANTHROPIC_API_KEY env var
            base_url=config.base_url,
            timeout=config.timeout,
            max_retries=0,
        )

    async def complete(self, request: CompletionRequest) -> LLMResponse:
        try:
            message = await self._client.messages.create(
                model=self.config.model,
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
                system=request.system,
                messages=[m.model_dump() for m in request.user_messages],
            )
        except APIError as e:
            raise LLMError(
                "claude", "complete", e, retryable=isinstance(e, _TRANSIENT)
            ) from e
        if not message.content or not hasattr(message.content[0], "text"):
            raise ValueError("No text content in Claude response")
        return LLMResponse(
            content=message.content[0].text,
            usage=TokenUsage(
                input_tokens=message.usage.input_tokens,
                output_tokens=message.usage.output_tokens,
            ),
            model=message.model,
        )
