"""Completion client with bounded, jittered exponential-backoff retries."""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable

from sharpdoc.config.models import RetrySettings
from sharpdoc.llm.base import LLMProvider
from sharpdoc.llm.models import CompletionError, CompletionRequest, LLMError

logger = logging.getLogger(__name__)


def backoff_delay(
    retry_number: int,
    settings: RetrySettings,
    rand: Callable[[], float] = random.random,
) -> float:
    """Delay before retry *retry_number* (1-based).

    ``base_delay * 2**(n-1)`` plus up to ``jitter_ratio`` of that step.
    With ``jitter_ratio <= 1`` the sequence never decreases, and the
    optional ``max_delay`` cap keeps it that way.
    """
    step = settings.base_delay * (2 ** (retry_number - 1))
    delay = step + rand() * step * settings.jitter_ratio
    if settings.max_delay is not None:
        delay = min(delay, settings.max_delay)
    return delay


class ResilientCompletionClient:
    """Runs completions against a provider under a retry policy.

    Only :class:`LLMError` instances flagged ``retryable`` are retried;
    anything else surfaces on the first attempt. The client holds no
    per-call state, so concurrent callers can share one instance.
    """

    def __init__(
        self,
        provider: LLMProvider,
        settings: RetrySettings | None = None,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rand: Callable[[], float] = random.random,
    ) -> None:
        self.provider = provider
        self.settings = settings or RetrySettings()
        self._sleep = sleep
        self._rand = rand

    async def execute(self, request: CompletionRequest) -> str:
        """Return the generated text, or raise :class:`CompletionError`."""
        max_attempts = self.settings.max_attempts
        attempt = 0
        while True:
            attempt += 1
            try:
                response = await self.provider.complete(request)
                return response.content
            except LLMError as e:
                if not e.retryable:
                    raise CompletionError(attempt, e) from e
                if attempt >= max_attempts:
                    raise CompletionError(attempt, e) from e
                delay = backoff_delay(attempt, self.settings, self._rand)
                logger.warning(
                    "Transient %s failure (attempt %d/%d), retrying in %.2fs: %s",
                    self.provider.name,
                    attempt,
                    max_attempts,
                    delay,
                    e,
                )
                await self._sleep(delay)
