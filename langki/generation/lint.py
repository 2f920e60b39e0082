"""
Card review (lint) cycle.

Sends a finished card back to the model for a correctness check. The model
either approves it with ``NO ERRORS`` or answers with the fields to change.
The outcome is advisory: nothing is written to the live card until the caller
passes the outcome to ``LintCycle.apply``.
"""

from __future__ import annotations

from loguru import logger

from langki.errors import LintParseError
from langki.generation.models import CardRecord, LintOutcome
from langki.generation.prompts import get_lint_prompt
from langki.generation.record_parser import RecordParser
from langki.llm.client import ModelClient, ModelConfig

NO_ERRORS = "NO ERRORS"
QUOTE_CHARS = "\"'`“”‘’"

EDITABLE_FIELDS = ("term", "meaning", "pronunciation", "note")


def normalize_verdict(response: str) -> str:
    """Strip whitespace, then any surrounding quote characters."""
    return response.strip().strip(QUOTE_CHARS).strip()


class LintCycle:
    """Reviews single cards and applies corrections on request."""

    def __init__(
        self,
        client: ModelClient,
        model_config: ModelConfig,
        native_language: str = "German",
        parser: RecordParser | None = None,
    ):
        self.client = client
        self.model_config = model_config
        self.native_language = native_language
        self.parser = parser or RecordParser()

    async def review(self, record: CardRecord, language: str) -> LintOutcome:
        """
        Ask the model to check ``record``.

        Returns:
            LintOutcome. ``completed`` is False when the call failed or the
            response had no recognizable field; ``error`` says which.
        """
        prompt = get_lint_prompt(record.to_text(), language, self.native_language)
        response = await self.client.send(prompt, self.model_config)

        if not response.ok:
            logger.warning("Review of {!r} failed: {}", record.term, response.error)
            return LintOutcome(completed=False, error=response.error)

        raw = response.value
        if normalize_verdict(raw) == NO_ERRORS:
            return LintOutcome(
                completed=True,
                errors_found=False,
                raw_response=raw,
                corrected_fields=record.copy(),
            )

        if not self.parser.scan_fields(raw):
            logger.error("Unrecognized review response for {!r}: {!r}", record.term, raw[:200])
            return LintOutcome(
                completed=False,
                raw_response=raw,
                error=LintParseError("Could not parse review response"),
            )

        corrected = self.parser.parse_partial(raw, base=record)
        logger.info("Review flagged changes for {!r}", record.term)
        return LintOutcome(
            completed=True,
            errors_found=True,
            raw_response=raw,
            corrected_fields=corrected,
        )

    @staticmethod
    def apply(record: CardRecord, outcome: LintOutcome) -> bool:
        """
        Copy the corrected fields onto the live record.

        Returns:
            True if anything changed
        """
        if not outcome.completed or outcome.corrected_fields is None:
            return False
        changed = False
        for name in EDITABLE_FIELDS:
            value = getattr(outcome.corrected_fields, name)
            if getattr(record, name) != value:
                setattr(record, name, value)
                changed = True
        return changed
