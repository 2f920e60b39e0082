"""Ordered list of cards waiting for approval."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from langki.generation.lint import LintCycle
from langki.generation.models import CardRecord, LintOutcome


class PreviewList:
    """Cards shown to the user before they are added to a deck."""

    def __init__(self, cards: Iterable[CardRecord] = ()):
        self.cards: list[CardRecord] = list(cards)

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[CardRecord]:
        return iter(self.cards)

    def __getitem__(self, index: int) -> CardRecord:
        return self.cards[index]

    def replace_all(self, cards: Iterable[CardRecord]) -> None:
        self.cards = list(cards)

    def selected(self) -> list[CardRecord]:
        return [card for card in self.cards if card.selected]

    @property
    def selected_count(self) -> int:
        return sum(1 for card in self.cards if card.selected)

    def toggle_select_all(self) -> bool:
        """Deselect everything if all are selected, otherwise select all. Returns the new state."""
        new_state = not (self.cards and all(card.selected for card in self.cards))
        for card in self.cards:
            card.selected = new_state
        return new_state

    def toggle_reverse_all(self) -> bool:
        """Same as toggle_select_all, for the reversed flag."""
        new_state = not (self.cards and all(card.reversed for card in self.cards))
        for card in self.cards:
            card.reversed = new_state
        return new_state

    def apply_lint(self, index: int, outcome: LintOutcome) -> bool:
        return LintCycle.apply(self.cards[index], outcome)
