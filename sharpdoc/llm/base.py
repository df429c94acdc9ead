"""Abstract LLM interface for sharpdoc."""

from __future__ import annotations

from abc import ABC, abstractmethod

from sharpdoc.llm.models import CompletionRequest, LLMConfig, LLMResponse


class LLMProvider(ABC):
    """Provider-agnostic interface for one-shot chat completions.

    Adapters translate SDK failures into :class:`~sharpdoc.llm.models.LLMError`
    and flag the transient ones as retryable; retrying itself is left to
    :class:`~sharpdoc.llm.resilient.ResilientCompletionClient`.
    """

    name: str = "llm"

    def __init__(self, config: LLMConfig) -> None:
        self.config = config

    @abstractmethod
    async def complete(self, request: CompletionRequest) -> LLMResponse:
        """Return the first completion choice for *request*."""
        ...
