"""
Scriblink Backend — Summary Validator
=======================================

What:  Decides whether a candidate summary is acceptable for a source text.
Why:   Model output is untrusted text. A summary has to be short, must not
       carry model boilerplate, and has to talk about the source.
How:   Three independent checks, always run in this order; the first failure
       is the reported reason:

           1. meta-language case-insensitive substring denylist
           2. length        word cap (150) and character ratio (50% of source)
           3. relevance     distinct-word overlap with the source (>= 20%)

The validator returns a verdict value and never raises. `ensure_valid()` turns
a rejection into the matching SummaryRejectedError for callers that propagate.

Meta-language matching is substring based on purpose: a genuine summary about
AI that contains "as an ai" is rejected. Token-boundary matching would change
accept/reject outcomes.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, Optional

from scriblink.config import settings
from scriblink.exceptions import (
    LengthExceededError,
    LowRelevanceError,
    MetaLanguageError,
    SummaryRejectedError,
)

# Runs of letters/digits; everything else (whitespace, punctuation) delimits.
_WORD_RE = re.compile(r"[^\W_]+", re.UNICODE)


class RejectionReason(str, Enum):
    LENGTH_EXCEEDED = "length_exceeded"
    META_LANGUAGE = "meta_language"
    LOW_RELEVANCE = "low_relevance"


_ERRORS = {
    RejectionReason.LENGTH_EXCEEDED: LengthExceededError,
    RejectionReason.META_LANGUAGE: MetaLanguageError,
    RejectionReason.LOW_RELEVANCE: LowRelevanceError,
}


@dataclass(frozen=True)
class SummaryVerdict:
    """Outcome of `SummaryValidator.validate`. `reason` is None when accepted."""

    accepted: bool
    reason: Optional[RejectionReason] = None
    message: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def accept(cls) -> "SummaryVerdict":
        return cls(accepted=True)

    @classmethod
    def reject(cls, reason: RejectionReason, message: str, **details: Any) -> "SummaryVerdict":
        return cls(accepted=False, reason=reason, message=message, details=details)


def word_count(text: str) -> int:
    """Whitespace-separated words."""
    return len(text.split())


def word_set(text: str) -> FrozenSet[str]:
    """Distinct lowercase words of `text`."""
    return frozenset(_WORD_RE.findall(text.lower()))


def overlap_ratio(source: str, candidate: str) -> float:
    """
    Share of the candidate's distinct words that also occur in the source.

    A candidate with no words at all has overlap 0.0.
    """
    candidate_words = word_set(candidate)
    if not candidate_words:
        return 0.0
    common = candidate_words & word_set(source)
    return len(common) / len(candidate_words)


class SummaryValidator:
    """
    Configurable summary acceptance rules.

    Args:
        meta_phrases:      denylisted phrases (matched lowercase, as substrings)
        max_words:         absolute word cap
        max_length_ratio:  max candidate characters as a fraction of source characters
        min_overlap_ratio: min share of candidate words found in the source
    """

    def __init__(
        self,
        meta_phrases: Iterable[str],
        max_words: int = 150,
        max_length_ratio: float = 0.5,
        min_overlap_ratio: float = 0.2,
    ):
        self.meta_phrases = tuple(p.lower() for p in meta_phrases if p.strip())
        self.max_words = max_words
        self.max_length_ratio = max_length_ratio
        self.min_overlap_ratio = min_overlap_ratio

    @classmethod
    def from_settings(cls) -> "SummaryValidator":
        return cls(
            meta_phrases=settings.summary_meta_phrases,
            max_words=settings.summary_max_words,
            max_length_ratio=settings.summary_max_length_ratio,
            min_overlap_ratio=settings.summary_min_overlap_ratio,
        )

    def validate(self, source: str, candidate: str) -> SummaryVerdict:
        """Run the three checks in order; the first rejection wins."""
        for check in (self.check_meta_language, self.check_length, self.check_relevance):
            verdict = check(source, candidate)
            if not verdict.accepted:
                return verdict
        return SummaryVerdict.accept()

    def ensure_valid(self, source: str, candidate: str) -> None:
        """
        Raise the SummaryRejectedError subclass matching the first failed check.

        Raises:
            MetaLanguageError, LengthExceededError, LowRelevanceError
        """
        verdict = self.validate(source, candidate)
        if verdict.accepted:
            return
        error_cls = _ERRORS.get(verdict.reason, SummaryRejectedError)
        raise error_cls(message=verdict.message, context=dict(verdict.details))

    # ── Individual checks ─────────────────────────────────────────────────

    def check_length(self, source: str, candidate: str) -> SummaryVerdict:
        """
        Reject when EITHER limit is exceeded:
            - more than `max_words` words
            - more characters than `max_length_ratio` of the source's characters
        """
        words = word_count(candidate)
        if words > self.max_words:
            return SummaryVerdict.reject(
                RejectionReason.LENGTH_EXCEEDED,
                f"Summary is {words} words, exceeding the limit of {self.max_words} words.",
                threshold="max_words",
                word_count=words,
                max_words=self.max_words,
            )

        limit = self.max_length_ratio * len(source)
        if len(candidate) > limit:
            ratio = len(candidate) / len(source) if source else float("inf")
            shown = "n/a" if not source else f"{ratio * 100:.1f}%"
            return SummaryVerdict.reject(
                RejectionReason.LENGTH_EXCEEDED,
                f"Summary is {len(candidate)} characters, which is {shown} of the "
                f"source text length ({len(source)} characters). "
                f"Exceeds the {self.max_length_ratio * 100:.0f}% limit.",
                threshold="max_length_ratio",
                summary_chars=len(candidate),
                source_chars=len(source),
                max_length_ratio=self.max_length_ratio,
            )

        return SummaryVerdict.accept()

    def check_meta_language(self, source: str, candidate: str) -> SummaryVerdict:
        lowered = candidate.lower()
        found = [phrase for phrase in self.meta_phrases if phrase in lowered]
        if found:
            quoted = "', '".join(found)
            return SummaryVerdict.reject(
                RejectionReason.META_LANGUAGE,
                f"Found AI meta-language or summary boilerplate: '{quoted}'",
                phrases=found,
            )
        return SummaryVerdict.accept()

    def check_relevance(self, source: str, candidate: str) -> SummaryVerdict:
        ratio = overlap_ratio(source, candidate)
        if ratio < self.min_overlap_ratio:
            return SummaryVerdict.reject(
                RejectionReason.LOW_RELEVANCE,
                f"Summary appears unrelated to source text. Only {ratio * 100:.1f}% of "
                f"summary words overlap with the original content "
                f"(min {self.min_overlap_ratio * 100:.0f}% required).",
                overlap_ratio=round(ratio, 4),
                min_overlap_ratio=self.min_overlap_ratio,
            )
        return SummaryVerdict.accept()


summary_validator = SummaryValidator.from_settings()
