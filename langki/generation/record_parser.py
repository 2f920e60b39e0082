"""
Card block parser.

Reads the line-based block format the model is asked to answer in:

    WORD: ไป
    IPA: paj
    MEANING: to go
    USAGE: ไปไหน - where are you going?

Labels are matched case-insensitively at the start of a (stripped) line.
``IPA``/``PRONUNCIATION`` and ``USAGE``/``MNEMONIC`` are synonyms. Anything
else, including ``CARD 1:`` style numbering, is ignored.

Parsing is lossy: a record that never gets a term, a meaning and
a pronunciation is dropped, with only a debug log line.
"""

from __future__ import annotations

from enum import Enum

from loguru import logger

from langki.generation.models import CardRecord

# Line prefix -> CardRecord attribute
FIELD_LABELS: dict[str, str] = {
    "WORD:": "term",
    "MEANING:": "meaning",
    "IPA:": "pronunciation",
    "PRONUNCIATION:": "pronunciation",
    "USAGE:": "note",
    "MNEMONIC:": "note",
}

# Attributes that can close a record
TRAILING_FIELDS = frozenset({"note"})


def match_field(line: str) -> tuple[str, str] | None:
    """
    Match one line against the known labels.

    Returns:
        (attribute, value) with the value stripped, or None for other lines
    """
    stripped = line.strip()
    upper = stripped.upper()
    for label, attribute in FIELD_LABELS.items():
        if upper.startswith(label):
            return attribute, stripped[len(label):].strip()
    return None


class ParserState(str, Enum):
    """State of the record state machine."""

    IDLE = "idle"
    ACCUMULATING = "accumulating"


class RecordStateMachine:
    """
    Two-state machine that turns a stream of (field, value) pairs into records.

    Transitions:
    - any field in IDLE: start a new record, go to ACCUMULATING
    - ``term`` in ACCUMULATING with a term already set: emit the pending
      record if complete (drop it otherwise) and start a new one
    - ``term`` in ACCUMULATING with no term yet: store it on the pending record
    - ``note`` in ACCUMULATING: store it; emit and go IDLE if now complete
    - other fields in ACCUMULATING: store (last value wins)
    - end of input: emit the pending record if complete
    """

    def __init__(self) -> None:
        self.state = ParserState.IDLE
        self._current: CardRecord | None = None

    @property
    def pending(self) -> CardRecord | None:
        return self._current

    def feed(self, attribute: str, value: str) -> CardRecord | None:
        """Apply one field. Returns a record when this transition completes one."""
        emitted: CardRecord | None = None

        # A WORD: before any term belongs to the fields already seen
        if self.state is ParserState.ACCUMULATING and attribute == "term" and self._current.term:
            emitted = self._take_if_complete()

        if self.state is ParserState.IDLE:
            self._current = CardRecord(term="")
            self.state = ParserState.ACCUMULATING

        setattr(self._current, attribute, value)

        if attribute in TRAILING_FIELDS and self._current.is_complete:
            emitted = self._take_if_complete()

        return emitted

    def finish(self) -> CardRecord | None:
        """Flush at end of input."""
        return self._take_if_complete()

    def _take_if_complete(self) -> CardRecord | None:
        record = self._current
        self._current = None
        self.state = ParserState.IDLE
        if record is not None and record.is_complete:
            return record
        if record is not None:
            logger.debug("Dropping incomplete card block: {!r}", record.term)
        return None


class RecordParser:
    """Parses model responses into CardRecords."""

    def parse(self, text: str) -> list[CardRecord]:
        """
        Parse every complete card block in ``text``.

        Never raises. An empty list means nothing usable was found; callers
        turn that into a "could not parse" error.
        """
        machine = RecordStateMachine()
        records: list[CardRecord] = []

        for line in (text or "").splitlines():
            matched = match_field(line)
            if matched is None:
                continue
            record = machine.feed(*matched)
            if record is not None:
                records.append(record)

        last = machine.finish()
        if last is not None:
            records.append(last)

        logger.debug("Parsed {} card(s) from {} chars", len(records), len(text or ""))
        return records

    @staticmethod
    def scan_fields(text: str) -> dict[str, str]:
        """Collect every recognized field of a single-card response (last one wins)."""
        fields: dict[str, str] = {}
        for line in (text or "").splitlines():
            matched = match_field(line)
            if matched is not None:
                attribute, value = matched
                fields[attribute] = value
        return fields

    def parse_partial(self, text: str, base: CardRecord | None = None) -> CardRecord:
        """
        Read a single card with no completeness check.

        Fields absent from ``text`` keep the value from ``base`` (or stay
        empty). Used for corrections, where a blank field can be intentional.
        """
        record = base.copy() if base is not None else CardRecord(term="")
        for attribute, value in self.scan_fields(text).items():
            setattr(record, attribute, value)
        return record
