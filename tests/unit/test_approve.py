"""
Unit tests for pushing approved cards to Anki.
"""

import pytest
import requests

from langki.anki.approve import ApprovalSummary, approve_cards
from langki.errors import CardValidationError
from langki.generation.models import CardRecord


class FakeSink:
    """Records added notes; fails for terms listed in ``fail_terms``."""

    def __init__(self, fail_terms=()):
        self.fail_terms = set(fail_terms)
        self.added = []

    def field_names(self, note_type):
        return ["Word", "Meaning", "Pronunciation", "Mnemonic"]

    def add_note(self, deck, note_type, fields, tags=None):
        if fields["Word"] in self.fail_terms:
            raise RuntimeError("AnkiConnect error: cannot create note because it is a duplicate")
        self.added.append((deck, note_type, fields, tags))
        return len(self.added)


@pytest.fixture
def cards():
    return [
        CardRecord(term="ไป", meaning="gehen", pronunciation="pai"),
        CardRecord(term="มา", meaning="kommen", pronunciation="maa", reversed=True),
        CardRecord(term="กิน", meaning="essen", pronunciation="kin", selected=False),
    ]


class TestApproveCards:
    """Tests for approve_cards."""

    def test_only_selected_added(self, cards):
        """Unselected cards should be skipped."""
        sink = FakeSink()

        summary = approve_cards(cards, sink, deck="Thai")

        assert summary == ApprovalSummary(added=2, failed=0)
        assert [fields["Word"] for _, _, fields, _ in sink.added] == ["ไป", "มา"]

    def test_reversed_note_type(self, cards):
        """Reversed cards should use the reversed note type."""
        sink = FakeSink()

        approve_cards(cards, sink, deck="Thai", note_type="A", reversed_note_type="B")

        assert [note_type for _, note_type, _, _ in sink.added] == ["A", "B"]

    def test_tagged_and_deck(self, cards):
        """Notes should go to the deck with the source tag."""
        sink = FakeSink()

        approve_cards(cards, sink, deck="Thai")

        assert all(deck == "Thai" and tags == ["langki"] for deck, _, _, tags in sink.added)

    def test_failure_counted_not_fatal(self, cards):
        """A failing card should be counted and the rest still added."""
        sink = FakeSink(fail_terms={"ไป"})

        summary = approve_cards(cards, sink, deck="Thai")

        assert summary.added == 1
        assert summary.failed == 1
        assert summary.total == 2

    def test_request_error_counted(self, cards):
        """HTTP errors should be counted like rejections."""
        sink = FakeSink()

        def broken(*args, **kwargs):
            raise requests.exceptions.ConnectionError("refused")

        sink.add_note = broken

        summary = approve_cards(cards, sink, deck="Thai")

        assert summary == ApprovalSummary(added=0, failed=2)

    def test_nothing_selected(self, cards):
        """No selected cards should be a validation error."""
        for card in cards:
            card.selected = False

        with pytest.raises(CardValidationError):
            approve_cards(cards, FakeSink(), deck="Thai")
