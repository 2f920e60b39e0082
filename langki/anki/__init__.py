"""Anki integration: AnkiConnect client and note mapping."""
from langki.anki.anki_client import AnkiClient
from langki.anki.approve import ApprovalSummary, NoteSink, approve_cards
from langki.anki.note_builder import build_note_fields, card_from_note_fields

__all__ = [
    "AnkiClient",
    "ApprovalSummary",
    "NoteSink",
    "approve_cards",
    "build_note_fields",
    "card_from_note_fields",
]
