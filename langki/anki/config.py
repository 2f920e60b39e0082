"""
Anki note type and field definitions.

Centralizes the field names used to map cards onto notes so the note
builder and the approval flow agree on them.
"""

from __future__ import annotations

# =============================================================================
# Note Types - must match your Anki note type names exactly
# =============================================================================
LANGUAGE_NOTE_TYPE = "Langki Language"
REVERSED_NOTE_TYPE = "Langki Language REVERSED"

# =============================================================================
# Fields of the language note types
# =============================================================================
WORD_FIELD = "Word"
MEANING_FIELD = "Meaning"
PRONUNCIATION_FIELD = "Pronunciation"
MNEMONIC_FIELD = "Mnemonic"

LANGUAGE_FIELDS = (WORD_FIELD, MEANING_FIELD, PRONUNCIATION_FIELD, MNEMONIC_FIELD)

# =============================================================================
# Fallback for basic note types
# =============================================================================
FRONT_FIELD = "Front"
BACK_FIELD = "Back"

# =============================================================================
# Tags
# =============================================================================
# Source tag to identify cards created by this system
SOURCE_TAG = "langki"