"""Pydantic models for the LLM subsystem."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class LLMError(Exception):
    """Wraps provider-specific exceptions with context.

    ``retryable`` marks transient failures (lost connection, timeout,
    throttling) that are worth another attempt.
    """

    def __init__(
        self, provider: str, operation: str, cause: Exception, retryable: bool = False
    ) -> None:
        self.provider = provider
        self.operation = operation
        self.retryable = retryable
        super().__init__(f"{provider} {operation} failed: {cause}")
        self.__cause__ = cause


class CompletionError(Exception):
    """Terminal failure of a completion after the retry policy gave up."""

    def __init__(self, attempts: int, cause: Exception) -> None:
        self.attempts = attempts
        super().__init__(f"completion failed after {attempts} attempt(s): {cause}")
        self.__cause__ = cause


class LLMConfig(BaseModel):
    """Configuration for an LLM provider."""

    provider: Literal["openai", "anthropic", "ollama"]
    model: str
    max_tokens: int = 1024
    temperature: float = 0.2
    timeout: float = 60.0
    api_key: str | None = None
    base_url: str | None = None


class ChatMessage(BaseModel):
    role: Literal["system", "user"]
    content: str


class CompletionRequest(BaseModel):
    """Ordered chat messages sent to the generation service."""

    messages: list[ChatMessage] = Field(min_length=1)

    @property
    def system(self) -> str:
        return "\n".join(m.content for m in self.messages if m.role == "system")

    @property
    def user_messages(self) -> list[ChatMessage]:
        return [m for m in self.messages if m.role == "user"]


class TokenUsage(BaseModel):
    """Token usage stats from a single LLM call."""

    input_tokens: int
    output_tokens: int


class LLMResponse(BaseModel):
    """Structured response from an LLM provider."""

    content: str
    usage: TokenUsage
    model: str
