"""
Scriblink Backend — Summary Service
=====================================

What:  Stores one summary per item and produces validated AI summaries.
Why:   Model output is only stored after passing SummaryValidator; a
       human-written summary is stored as given.
How:   Composes a SummaryGenerator (Gemini by default) with a SummaryValidator.
       Both are constructor arguments so tests can pass mocks.
Who:   Called by WorkspaceService and the summary routes.

Generation Flow (generate_and_validate):
    ┌──────────────┐    ┌──────────────┐    ┌──────────────┐
    │ Blank check  │───▶│  Generator   │───▶│  Validator   │───▶ summary text
    │ (no call)    │    │ (1 attempt)  │    │ (3 checks)   │
    └──────────────┘    └──────────────┘    └──────────────┘
          │                    │                   │
    ValidationError      LLMServiceError    SummaryRejectedError
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from scriblink.exceptions import NotFoundError, SummaryRejectedError, ValidationError
from scriblink.models.summary import Summary
from scriblink.schemas.summary import SummaryResponse
from scriblink.services.llm_base import SummaryGenerator
from scriblink.services.summary_validator import SummaryValidator, summary_validator

logger = logging.getLogger(__name__)


class SummaryService:
    """
    Summary operations.

    Args:
        generator: text-generation collaborator; the Gemini singleton when None
        validator: acceptance rules; the settings-driven singleton when None
    """

    def __init__(
        self,
        generator: Optional[SummaryGenerator] = None,
        validator: Optional[SummaryValidator] = None,
    ):
        self._generator = generator
        self.validator = validator or summary_validator

    @property
    def generator(self) -> SummaryGenerator:
        # Resolved lazily so importing this module never configures Gemini.
        if self._generator is None:
            from scriblink.services.gemini_service import gemini_summarizer

            self._generator = gemini_summarizer
        return self._generator

    async def set_summary(self, db: AsyncSession, item: str, summary: str) -> SummaryResponse:
        """
        Create or overwrite the summary of `item`. Not validated.

        Raises:
            ValidationError: summary is empty or whitespace
        """
        if not summary or not summary.strip():
            raise ValidationError(message="Summary cannot be empty.", field="summary")

        existing = await db.get(Summary, item)
        if existing is None:
            db.add(Summary(item_id=item, summary=summary))
            logger.info("Summary created for item %s", item)
        else:
            existing.summary = summary
            logger.info("Summary replaced for item %s", item)
        await db.flush()
        return SummaryResponse(item=item, summary=summary)

    async def generate_and_validate(self, text: str) -> str:
        """
        Ask the generator for a summary of `text` and validate it against `text`.

        Returns:
            The accepted summary, trimmed.

        Raises:
            ValidationError: text is empty or whitespace (generator not called)
            LLMServiceError: generator failed or circuit open
            SummaryRejectedError: generator answered but the validator rejected it
        """
        if not text or not text.strip():
            raise ValidationError(
                message="Cannot generate a summary of empty text.",
                field="text",
            )

        candidate = (await self.generator.generate(text)).strip()

        try:
            self.validator.ensure_valid(text, candidate)
        except SummaryRejectedError as e:
            logger.warning("Generated summary rejected (%s): %s", e.reason, e.message)
            raise
        return candidate

    async def set_summary_with_ai(self, db: AsyncSession, item: str, text: str) -> SummaryResponse:
        """Generate, validate and store a summary of `text` for `item`."""
        summary = await self.generate_and_validate(text)
        return await self.set_summary(db, item, summary)

    async def get_summary(self, db: AsyncSession, item: str) -> SummaryResponse:
        row = await db.get(Summary, item)
        if row is None:
            raise NotFoundError(
                resource="summary",
                resource_id=item,
                message=f"No summary found for item {item}.",
            )
        return SummaryResponse(item=row.item_id, summary=row.summary)

    async def delete_summary(self, db: AsyncSession, item: str) -> None:
        row = await db.get(Summary, item)
        if row is None:
            raise NotFoundError(
                resource="summary",
                resource_id=item,
                message=f"No summary found for item {item}.",
            )
        await db.delete(row)
        await db.flush()
        logger.info("Summary deleted for item %s", item)

    async def has_summary(self, db: AsyncSession, item: str) -> bool:
        return await db.get(Summary, item) is not None


summary_service = SummaryService()
