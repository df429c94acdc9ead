"""OpenAI adapter for sharpdoc."""

from __future__ import annotations

from openai import (
    APIConnectionError,
    APIError,
    AsyncOpenAI,
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

# APITimeoutError subclasses APIConnectionError.
_TRANSIENT = (APIConnectionError, RateLimitError, InternalServerError)


class OpenAIProvider(LLMProvider):
    """OpenAI adapter using the async SDK."""

    name = "openai"

    def __init__(self, config: LLMConfig) -> None:
        super().__init__(config)
        self._client = AsyncOpenAI(
            api_key=config.api_key,  # falls back to OPENAI_API_KEY env var
            base_url=config.base_url,
            timeout=config.timeout,
            max_retries=0,
        )

    async def complete(self, request: CompletionRequest) -> LLMResponse:
        try:
            response = await self._client.chat.completions.create(
                model=self.config.model,
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
                messages=[m.model_dump() for m in request.messages],
            )
        except APIError as e:
            raise LLMError(
                "openai", "complete", e, retryable=isinstance(e, _TRANSIENT)
            ) from e
        if not response.choices:
            raise ValueError("No choices in OpenAI response")
        choice = response.choices[0]
        usage = response.usage
        return LLMResponse(
            content=choice.message.content or "",
            usage=TokenUsage(
                input_tokens=usage.prompt_tokens if usage else 0,
                output_tokens=usage.completion_tokens if usage else 0,
            ),
            model=response.model,
        )
