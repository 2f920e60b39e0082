"""
Push approved cards into an Anki deck.

Each card is added on its own; a rejected card is logged and counted, and
the rest of the batch carries on.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

import requests
from loguru import logger

from langki.anki.config import LANGUAGE_NOTE_TYPE, REVERSED_NOTE_TYPE, SOURCE_TAG
from langki.anki.note_builder import build_note_fields
from langki.errors import CardValidationError
from langki.generation.models import CardRecord


class NoteSink(Protocol):
    """Anything that can look up note fields and add notes (AnkiClient)."""

    def field_names(self, note_type: str) -> list[str]: ...

    def add_note(
        self,
        deck: str,
        note_type: str,
        fields: dict[str, str],
        tags: list[str] | None = None,
    ) -> int: ...


@dataclass
class ApprovalSummary:
    """Counts from one approval batch."""

    added: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.added + self.failed


def approve_cards(
    cards: Iterable[CardRecord],
    sink: NoteSink,
    deck: str,
    note_type: str = LANGUAGE_NOTE_TYPE,
    reversed_note_type: str = REVERSED_NOTE_TYPE,
) -> ApprovalSummary:
    """
    Add every selected card to ``deck``.

    Reversed cards go to ``reversed_note_type``, the rest to ``note_type``.

    Raises:
        CardValidationError: If no card is selected
    """
    selected = [card for card in cards if card.selected]
    if not selected:
        raise CardValidationError("No cards selected")

    summary = ApprovalSummary()
    for card in selected:
        target = reversed_note_type if card.reversed else note_type
        try:
            fields = build_note_fields(card, sink.field_names(target))
            sink.add_note(deck, target, fields, tags=[SOURCE_TAG])
            summary.added += 1
        except (RuntimeError, ValueError, requests.RequestException) as exc:
            summary.failed += 1
            logger.error("Failed to add card {} to {}: {}", card.term, deck, exc)

    logger.info("Added {} card(s) to {}, {} failed", summary.added, deck, summary.failed)
    return summary
