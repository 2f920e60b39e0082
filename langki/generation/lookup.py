"""
Frequency list lookup.

A frequency list is a tab-separated file, one word per line:

    word <TAB> ipa <TAB> meaning <TAB> example

Line order is the frequency rank. Words found here with a meaning and a
pronunciation never go to the model.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from loguru import logger

from langki.generation.models import CardRecord, LookupEntry, LookupTable


def _optional(parts: list[str], index: int) -> str | None:
    if index >= len(parts):
        return None
    value = parts[index].strip()
    return value or None


def parse_lookup_lines(lines: Iterable[str]) -> dict[str, LookupEntry]:
    """Build a table from TSV lines. A repeated word keeps its last line."""
    table: dict[str, LookupEntry] = {}
    for index, line in enumerate(lines):
        parts = line.rstrip("\r\n").split("\t")
        word = parts[0].strip()
        if not word:
            continue
        table[word] = LookupEntry(
            rank=index + 1,
            term=word,
            pronunciation=_optional(parts, 1),
            meaning=_optional(parts, 2),
            note=_optional(parts, 3),
        )
    return table


def lookup_path_for(language: str, directory: str | Path) -> Path:
    """Location of the frequency list for a language (e.g. freqLists/Thai.tsv)."""
    return Path(directory) / f"{language}.tsv"


def load_lookup_table(path: str | Path) -> dict[str, LookupEntry]:
    """
    Load a frequency list file.

    A missing or unreadable file is logged and gives an empty table, so
    generation still works (every word just goes to the model).
    """
    path = Path(path)
    try:
        with path.open(encoding="utf-8-sig") as handle:
            table = parse_lookup_lines(handle)
    except OSError as exc:
        logger.error("Error loading frequency list {}: {}", path, exc)
        return {}
    except UnicodeDecodeError as exc:
        logger.error("Frequency list {} is not valid UTF-8: {}", path, exc)
        return {}

    logger.debug("Loaded {} entries from {}", len(table), path)
    return table


class LookupReconciler:
    """Pre-fills cards from a frequency list. Pure, never calls the model."""

    def reconcile(self, terms: Iterable[str], table: LookupTable) -> list[CardRecord]:
        """
        One record per term, in input order.

        A hit copies meaning, pronunciation and note and sets ``rank_hint``;
        a miss gives a stub with only ``term`` set.
        """
        records = []
        for term in terms:
            entry = table.get(term)
            if entry is None:
                records.append(CardRecord(term=term))
                continue
            records.append(
                CardRecord(
                    term=term,
                    meaning=entry.meaning or "",
                    pronunciation=entry.pronunciation or "",
                    note=entry.note or "",
                    rank_hint=entry.rank,
                )
            )
        return records

    def classify(
        self,
        terms: Iterable[str],
        table: LookupTable,
    ) -> tuple[list[CardRecord], list[CardRecord]]:
        """
        Split reconciled records into (already complete, needs generation).

        Both lists keep the input's relative order.
        """
        complete: list[CardRecord] = []
        pending: list[CardRecord] = []
        for record in self.reconcile(terms, table):
            if record.rank_hint is not None and record.meaning and record.pronunciation:
                complete.append(record)
            else:
                pending.append(record)
        return complete, pending
