"""Data models for generated vocabulary cards."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace

from langki.errors import CardGenerationError


def _one_line(value: str) -> str:
    return " ".join(line.strip() for line in value.splitlines() if line.strip())


@dataclass
class CardRecord:
    """
    A generated language card that can be edited and selected.

    Scratch object: owned by whichever stage produced it last and handed on
    by value (see ``copy``). Only ``term``, ``meaning`` and ``pronunciation``
    decide completeness; ``note`` may stay empty.
    """

    term: str
    meaning: str = ""
    pronunciation: str = ""
    note: str = ""
    selected: bool = True
    reversed: bool = False
    rank_hint: int | None = None

    @property
    def is_complete(self) -> bool:
        return bool(self.term and self.meaning and self.pronunciation)

    def copy(self) -> CardRecord:
        return replace(self)

    def to_text(self) -> str:
        """
        Render the card in the same block format the parser reads.

        The format holds one line per field, so multi-line values are joined
        with spaces.
        """
        return "\n".join(
            [
                f"WORD: {_one_line(self.term)}",
                f"IPA: {_one_line(self.pronunciation)}",
                f"MEANING: {_one_line(self.meaning)}",
                f"USAGE: {_one_line(self.note)}",
            ]
        )


@dataclass(frozen=True)
class LookupEntry:
    """One line of a frequency list. Optional fields are None, never ""."""

    rank: int  # 1-based line number
    term: str
    pronunciation: str | None = None
    meaning: str | None = None
    note: str | None = None


LookupTable = Mapping[str, LookupEntry]


@dataclass
class LintOutcome:
    """Result of asking the model to review a finished card."""

    completed: bool
    errors_found: bool = False
    raw_response: str | None = None
    corrected_fields: CardRecord | None = None
    error: CardGenerationError | None = None


@dataclass
class PipelineResult:
    """
    Cards produced by a pipeline run.

    ``cards`` is kept even when ``error`` is set: records that were already
    complete before the failing stage are never discarded.
    """

    cards: list[CardRecord] = field(default_factory=list)
    error: CardGenerationError | None = None
    requested_terms: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None
