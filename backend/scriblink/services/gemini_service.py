"""
Scriblink Backend — Google Gemini Summary Generator
=====================================================

What:  Concrete SummaryGenerator backed by the Google Gemini text API.
Why:   Gemini's free tier and gemini-1.5-flash latency suit short study summaries.
How:   Sends a fixed summarization prompt plus the note text, returns the trimmed
       answer. Each call is a single attempt guarded by a circuit breaker.
Who:   Module singleton used by SummaryService.generate_and_validate().

Resilience Strategy:
    1. Circuit breaker rejects calls instantly while Gemini is failing
    2. Per-request timeout (settings.gemini_timeout)
    3. Every failure is wrapped in LLMServiceError; nothing is retried
"""

import logging
import time
import uuid
from typing import Optional

import google.generativeai as genai

from scriblink.config import settings
from scriblink.exceptions import CircuitBreakerOpenError, LLMServiceError
from scriblink.services.llm_base import SummaryGenerator

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Circuit Breaker
# ══════════════════════════════════════════════════════════════════════════

class CircuitBreaker:
    """
    Circuit breaker around the Gemini call.

    State Machine:
        CLOSED     normal operation; failures are counted
                   → failure_count >= threshold: OPEN
        OPEN       every call raises CircuitBreakerOpenError
                   → after recovery_timeout seconds: HALF_OPEN
        HALF_OPEN  one trial call is let through
                   → success: CLOSED, failure: OPEN

    Not thread-safe. Uvicorn async workers share one process, so a plain
    counter is enough here.
    """

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"

    def __init__(self, failure_threshold: int = 5, recovery_timeout: int = 60):
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.failure_count = 0
        self.state = self.CLOSED
        self.last_failure_time: Optional[float] = None

    def can_execute(self) -> bool:
        """
        Returns True when a call may proceed.

        Raises:
            CircuitBreakerOpenError: OPEN and the recovery timeout has not elapsed.
        """
        if self.state == self.CLOSED:
            return True

        if self.state == self.OPEN:
            elapsed = time.time() - (self.last_failure_time or 0)
            if elapsed >= self.recovery_timeout:
                logger.info("Circuit breaker transitioning to HALF_OPEN after %.1fs", elapsed)
                self.state = self.HALF_OPEN
                return True
            remaining = int(self.recovery_timeout - elapsed)
            raise CircuitBreakerOpenError(recovery_time=remaining)

        return True

    def record_success(self) -> None:
        if self.state == self.HALF_OPEN:
            logger.info("Circuit breaker transitioning to CLOSED (service recovered)")
        self.failure_count = 0
        self.state = self.CLOSED
        self.last_failure_time = None

    def record_failure(self) -> None:
        self.failure_count += 1
        self.last_failure_time = time.time()

        if self.state == self.HALF_OPEN:
            logger.warning("Circuit breaker returning to OPEN (trial request failed)")
            self.state = self.OPEN
        elif self.failure_count >= self.failure_threshold:
            logger.warning(
                "Circuit breaker OPENING after %d consecutive failures",
                self.failure_count,
            )
            self.state = self.OPEN


# ══════════════════════════════════════════════════════════════════════════
# Gemini Summarizer
# ══════════════════════════════════════════════════════════════════════════

SUMMARY_PROMPT = """Summarize the following notes to help a student understand the concept better.
If you detect that the notes are unclear, unrelated to any topic, or not study material, respond with:
"The summary could not be generated because the content was unclear or unrelated."

Provide only the summary itself, with no meta-language.
Do not use phrases like "the following is a summary" or "in summary".
Write the summary as bullet points, like a table of contents for the notes.
The summary must be at most 40% of the total transcript length.
Try writing 3-5 bullet points total, focused on the high level concepts.
Keep it under 180 words.

Notes:
"""


class GeminiSummarizer(SummaryGenerator):
    """
    Google Gemini implementation of SummaryGenerator.

    Error Handling Chain:
        circuit OPEN → CircuitBreakerOpenError (no API call)
        API error / timeout / empty answer → record failure → LLMServiceError
        threshold reached → circuit OPEN for cb_recovery_timeout seconds
    """

    def __init__(self, model_name: Optional[str] = None):
        # The SDK keeps auth in module-level state.
        if settings.gemini_api_key and settings.gemini_api_key != "your_gemini_api_key_here":
            genai.configure(api_key=settings.gemini_api_key)

        self.model_name = model_name or settings.gemini_model
        self.model = genai.GenerativeModel(self.model_name)
        self.circuit_breaker = CircuitBreaker(
            failure_threshold=settings.cb_failure_threshold,
            recovery_timeout=settings.cb_recovery_timeout,
        )

        logger.info(
            "GeminiSummarizer initialized with model=%s, "
            "circuit_breaker(threshold=%d, recovery=%ds)",
            self.model_name,
            settings.cb_failure_threshold,
            settings.cb_recovery_timeout,
        )

    async def generate(self, text: str) -> str:
        """
        Ask Gemini for a summary of `text`.

        Flow:
            1. Circuit breaker check (may raise CircuitBreakerOpenError)
            2. One generate_content_async call with the summary prompt
            3. Record success/failure, return the trimmed answer

        Raises:
            CircuitBreakerOpenError, LLMServiceError
        """
        call_id = str(uuid.uuid4())[:8]
        self.circuit_breaker.can_execute()

        logger.info("[%s] Requesting Gemini summary for %d chars", call_id, len(text))
        start_time = time.time()

        try:
            response = await self.model.generate_content_async(
                SUMMARY_PROMPT + text,
                request_options={"timeout": settings.gemini_timeout},
            )
            summary = (response.text or "").strip()
        except Exception as e:
            self.circuit_breaker.record_failure()
            logger.error(
                "[%s] Gemini call failed after %.0fms: %s",
                call_id,
                (time.time() - start_time) * 1000,
                str(e),
                exc_info=True,
            )
            raise LLMServiceError(
                message="AI summary generation failed. Please try again later.",
                retry_after=self.circuit_breaker.recovery_timeout,
                context={"call_id": call_id, "error_type": type(e).__name__},
            ) from e

        if not summary:
            self.circuit_breaker.record_failure()
            logger.warning("[%s] Gemini returned an empty answer", call_id)
            raise LLMServiceError(
                message="AI summary generation returned no text.",
                context={"call_id": call_id},
            )

        self.circuit_breaker.record_success()
        logger.info(
            "[%s] Gemini summary completed in %.0fms, %d chars",
            call_id,
            (time.time() - start_time) * 1000,
            len(summary),
        )
        return summary

    async def health_check(self) -> bool:
        """Lists models (no token cost) to verify key and connectivity."""
        try:
            models = genai.list_models()
            names = [m.name for m in models]
            target = f"models/{self.model_name}"
            if target not in names:
                logger.warning("Configured model %s not found in available models", target)
            return True
        except Exception as e:
            logger.warning("Gemini health check failed: %s", str(e))
            return False


# ── Singleton Instance ────────────────────────────────────────────────────
# Holds the circuit breaker state shared by all requests.
gemini_summarizer = GeminiSummarizer()
