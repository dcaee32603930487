"""
Scriblink Backend — Gemini Summarizer Unit Tests (Mocked)
===========================================================

What:  Tests for GeminiSummarizer and its CircuitBreaker with the Google
       Generative AI SDK patched out.
Why:   Tests must not make real API calls (quota, network, keys).

What we test:
    ✅ Successful call returns the trimmed answer
    ✅ API failure surfaces as LLMServiceError after ONE attempt
    ✅ Empty answer is a failure
    ✅ Circuit breaker opens after consecutive failures and blocks calls
    ✅ Circuit breaker recovers through HALF_OPEN
    ❌ Real API calls
"""

import time

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from scriblink.exceptions import CircuitBreakerOpenError, LLMServiceError
from scriblink.services.gemini_service import SUMMARY_PROMPT, CircuitBreaker, GeminiSummarizer


class TestCircuitBreaker:
    """Tests for the CircuitBreaker resilience pattern."""

    def test_initial_state_is_closed(self):
        cb = CircuitBreaker(failure_threshold=5, recovery_timeout=60)
        assert cb.state == "closed"
        assert cb.failure_count == 0

    def test_stays_closed_under_threshold(self):
        cb = CircuitBreaker(failure_threshold=5, recovery_timeout=60)
        for _ in range(4):
            cb.record_failure()
        assert cb.state == "closed"
        assert cb.can_execute() is True

    def test_opens_at_threshold(self):
        cb = CircuitBreaker(failure_threshold=3, recovery_timeout=60)
        for _ in range(3):
            cb.record_failure()
        assert cb.state == "open"

    def test_open_circuit_rejects_calls(self):
        cb = CircuitBreaker(failure_threshold=1, recovery_timeout=60)
        cb.record_failure()

        with pytest.raises(CircuitBreakerOpenError) as exc_info:
            cb.can_execute()
        assert 0 < exc_info.value.recovery_time <= 60

    def test_half_open_after_recovery_timeout(self):
        cb = CircuitBreaker(failure_threshold=1, recovery_timeout=0)
        cb.record_failure()
        time.sleep(0.01)

        assert cb.can_execute() is True
        assert cb.state == "half_open"

    def test_failure_in_half_open_reopens(self):
        cb = CircuitBreaker(failure_threshold=3, recovery_timeout=0)
        for _ in range(3):
            cb.record_failure()
        time.sleep(0.01)
        cb.can_execute()

        cb.record_failure()
        assert cb.state == "open"

    def test_success_resets(self):
        cb = CircuitBreaker(failure_threshold=5, recovery_timeout=60)
        cb.record_failure()
        cb.record_failure()

        cb.record_success()
        assert cb.failure_count == 0
        assert cb.state == "closed"


class TestGeminiSummarizerMocked:
    """GeminiSummarizer with the SDK patched."""

    def _summarizer(self, mock_genai, response=None, error=None):
        model = MagicMock()
        if error is not None:
            model.generate_content_async = AsyncMock(side_effect=error)
        else:
            model.generate_content_async = AsyncMock(return_value=response)
        mock_genai.GenerativeModel.return_value = model
        return GeminiSummarizer(), model

    @pytest.mark.asyncio
    async def test_generate_success_trims_answer(self):
        with patch("scriblink.services.gemini_service.genai") as mock_genai:
            response = MagicMock()
            response.text = "  - Photosynthesis turns light into sugar  \n"
            summarizer, model = self._summarizer(mock_genai, response=response)

            result = await summarizer.generate("Photosynthesis notes")

            assert result == "- Photosynthesis turns light into sugar"
            prompt = model.generate_content_async.call_args.args[0]
            assert prompt.startswith(SUMMARY_PROMPT)
            assert prompt.endswith("Photosynthesis notes")

    @pytest.mark.asyncio
    async def test_api_failure_is_single_attempt(self):
        with patch("scriblink.services.gemini_service.genai") as mock_genai:
            summarizer, model = self._summarizer(mock_genai, error=RuntimeError("boom"))

            with pytest.raises(LLMServiceError) as exc_info:
                await summarizer.generate("some notes")

            assert model.generate_content_async.await_count == 1
            assert exc_info.value.context["error_type"] == "RuntimeError"
            assert summarizer.circuit_breaker.failure_count == 1

    @pytest.mark.asyncio
    async def test_empty_answer_is_failure(self):
        with patch("scriblink.services.gemini_service.genai") as mock_genai:
            response = MagicMock()
            response.text = "   "
            summarizer, _ = self._summarizer(mock_genai, response=response)

            with pytest.raises(LLMServiceError):
                await summarizer.generate("some notes")
            assert summarizer.circuit_breaker.failure_count == 1

    @pytest.mark.asyncio
    async def test_open_circuit_skips_api_call(self):
        with patch("scriblink.services.gemini_service.genai") as mock_genai:
            summarizer, model = self._summarizer(mock_genai, response=MagicMock())
            for _ in range(summarizer.circuit_breaker.failure_threshold):
                summarizer.circuit_breaker.record_failure()

            with pytest.raises(CircuitBreakerOpenError):
                await summarizer.generate("some notes")
            model.generate_content_async.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_health_check_returns_bool(self):
        with patch("scriblink.services.gemini_service.genai") as mock_genai:
            mock_genai.list_models.return_value = [MagicMock()]
            summarizer, _ = self._summarizer(mock_genai, response=MagicMock())

            assert await summarizer.health_check() is True

    @pytest.mark.asyncio
    async def test_health_check_failure_returns_false(self):
        with patch("scriblink.services.gemini_service.genai") as mock_genai:
            mock_genai.list_models.side_effect = ConnectionError("offline")
            summarizer, _ = self._summarizer(mock_genai, response=MagicMock())

            assert await summarizer.health_check() is False
