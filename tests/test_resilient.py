"""Tests for the retrying completion client."""

from unittest.mock import AsyncMock

import pytest

from sharpdoc.annotator.kinds import DeclarationKind
from sharpdoc.annotator.prompts import PromptBuilder
from sharpdoc.config.models import RetrySettings
from sharpdoc.llm.models import CompletionError, LLMError, LLMResponse, TokenUsage
from sharpdoc.llm.resilient import ResilientCompletionClient, backoff_delay


def _response(content="/// <summary>ok</summary>"):
    return LLMResponse(
        content=content,
        usage=TokenUsage(input_tokens=1, output_tokens=1),
        model="test-model",
    )


def _transient():
    return LLMError("mock", "complete", TimeoutError("timed out"), retryable=True)


@pytest.fixture
def request_():
    return PromptBuilder().build(DeclarationKind.METHOD, "void Run() { }")


class TestBackoffDelay:
    def test_doubles_without_jitter(self):
        settings = RetrySettings(base_delay=0.5)
        delays = [backoff_delay(n, settings, rand=lambda: 0.0) for n in range(1, 5)]
        assert delays == [0.5, 1.0, 2.0, 4.0]

    def test_jitter_bounded_by_ratio(self):
        settings = RetrySettings(base_delay=1.0, jitter_ratio=0.5)
        assert backoff_delay(1, settings, rand=lambda: 1.0) == 1.5

    def test_non_decreasing_with_worst_case_jitter(self):
        settings = RetrySettings(base_delay=0.5, jitter_ratio=1.0)
        # Maximum jitter on one step, none on the next.
        for n in range(1, 10):
            high = backoff_delay(n, settings, rand=lambda: 1.0)
            low_next = backoff_delay(n + 1, settings, rand=lambda: 0.0)
            assert low_next >= high

    def test_cap(self):
        settings = RetrySettings(base_delay=1.0, max_delay=3.0)
        assert backoff_delay(5, settings, rand=lambda: 0.0) == 3.0


class TestResilientCompletionClient:
    @pytest.mark.asyncio
    async def test_returns_content(self, mock_llm_provider, request_, doc_answer):
        client = ResilientCompletionClient(mock_llm_provider, sleep=AsyncMock())
        assert await client.execute(request_) == doc_answer
        mock_llm_provider.complete.assert_awaited_once_with(request_)

    @pytest.mark.asyncio
    async def test_recovers_after_transient_failures(self, mock_llm_provider, request_):
        mock_llm_provider.complete.side_effect = [_transient(), _transient(), _response("done")]
        sleep = AsyncMock()
        client = ResilientCompletionClient(mock_llm_provider, sleep=sleep, rand=lambda: 0.0)

        assert await client.execute(request_) == "done"
        assert mock_llm_provider.complete.await_count == 3
        assert [c.args[0] for c in sleep.await_args_list] == [0.5, 1.0]

    @pytest.mark.asyncio
    async def test_exhaustion_after_ten_attempts(self, mock_llm_provider, request_):
        mock_llm_provider.complete.side_effect = _transient()
        sleep = AsyncMock()
        client = ResilientCompletionClient(mock_llm_provider, sleep=sleep)

        with pytest.raises(CompletionError) as exc_info:
            await client.execute(request_)

        assert exc_info.value.attempts == 10
        assert isinstance(exc_info.value.__cause__, LLMError)
        assert mock_llm_provider.complete.await_count == 10
        delays = [c.args[0] for c in sleep.await_args_list]
        assert len(delays) == 9
        assert delays == sorted(delays)

    @pytest.mark.asyncio
    async def test_non_transient_attempted_once(self, mock_llm_provider, request_):
        mock_llm_provider.complete.side_effect = LLMError(
            "mock", "complete", ValueError("bad request"), retryable=False
        )
        sleep = AsyncMock()
        client = ResilientCompletionClient(mock_llm_provider, sleep=sleep)

        with pytest.raises(CompletionError) as exc_info:
            await client.execute(request_)

        assert exc_info.value.attempts == 1
        assert mock_llm_provider.complete.await_count == 1
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_other_exceptions_propagate(self, mock_llm_provider, request_):
        mock_llm_provider.complete.side_effect = ValueError("No choices")
        client = ResilientCompletionClient(mock_llm_provider, sleep=AsyncMock())

        with pytest.raises(ValueError, match="No choices"):
            await client.execute(request_)
        assert mock_llm_provider.complete.await_count == 1

    @pytest.mark.asyncio
    async def test_custom_attempt_budget(self, mock_llm_provider, request_):
        mock_llm_provider.complete.side_effect = _transient()
        client = ResilientCompletionClient(
            mock_llm_provider, RetrySettings(max_attempts=3), sleep=AsyncMock()
        )

        with pytest.raises(CompletionError) as exc_info:
            await client.execute(request_)
        assert exc_info.value.attempts == 3
