"""
Map cards onto Anki note fields and back.

Language note types carry Word/Meaning/Pronunciation/Mnemonic fields. Other
note types fall back to Front/Back, and anything else gets the term in its
first field and the rest packed into the second.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from langki.anki.config import (
    BACK_FIELD,
    FRONT_FIELD,
    LANGUAGE_FIELDS,
    MEANING_FIELD,
    MNEMONIC_FIELD,
    PRONUNCIATION_FIELD,
    WORD_FIELD,
)
from langki.generation.models import CardRecord


def _compose_back(card: CardRecord) -> str:
    back = f"{card.meaning}\n\nPronunciation: {card.pronunciation}"
    if card.note:
        back += f"\nMnemonic: {card.note}"
    return back


def build_note_fields(card: CardRecord, field_names: Sequence[str]) -> dict[str, str]:
    """
    Build the field dictionary for one note.

    Args:
        card: Card to store
        field_names: Fields of the target note type, in order

    Returns:
        Field name -> value for AnkiConnect ``addNote``

    Raises:
        ValueError: If the note type has fewer than two fields
    """
    names = set(field_names)

    if WORD_FIELD in names and MEANING_FIELD in names:
        fields = {WORD_FIELD: card.term, MEANING_FIELD: card.meaning}
        if PRONUNCIATION_FIELD in names:
            fields[PRONUNCIATION_FIELD] = card.pronunciation
        if MNEMONIC_FIELD in names and card.note:
            fields[MNEMONIC_FIELD] = card.note
        return fields

    if FRONT_FIELD in names and BACK_FIELD in names:
        return {FRONT_FIELD: card.term, BACK_FIELD: _compose_back(card)}

    if len(field_names) < 2:
        raise ValueError(f"Note type needs at least two fields, got {list(field_names)}")

    second = f"{card.meaning}\n{card.pronunciation}"
    if card.note:
        second += f"\n{card.note}"
    return {field_names[0]: card.term, field_names[1]: second}


def card_from_note_fields(fields: Mapping[str, str]) -> CardRecord:
    """Rebuild a card from a language note. Raises ValueError on missing fields."""
    missing = [name for name in LANGUAGE_FIELDS if name not in fields]
    if missing:
        raise ValueError(f"Note is missing required field(s): {', '.join(missing)}")

    return CardRecord(
        term=fields[WORD_FIELD],
        meaning=fields[MEANING_FIELD],
        pronunciation=fields[PRONUNCIATION_FIELD],
        note=fields[MNEMONIC_FIELD],
    )
