"""
Scriblink Backend — Abstract Summary Generator Interface
==========================================================

What:  Contract for the external text-generation capability behind AI summaries.
Why:   SummaryService depends on "something that turns text into a summary",
       not on Gemini. Tests substitute an AsyncMock; another provider only
       needs to implement this class.
How:   Concrete implementations inherit from SummaryGenerator and implement
       generate() and health_check().
"""

from abc import ABC, abstractmethod


class SummaryGenerator(ABC):
    """
    Abstract interface for AI summary generation.

    Contract:
        - generate() takes source text and returns the raw model output
        - implementations wrap provider failures in LLMServiceError
        - output is NOT validated here; SummaryService runs the validator
    """

    @abstractmethod
    async def generate(self, text: str) -> str:
        """
        Produce a candidate summary of `text`.

        Returns:
            The model output, trimmed. Never None.

        Raises:
            LLMServiceError: the provider failed or returned nothing usable.
            CircuitBreakerOpenError: recent failures have opened the circuit.
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Lightweight reachability test that does not consume generation quota."""
        ...
