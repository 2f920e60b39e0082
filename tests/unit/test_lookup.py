"""
Unit tests for the frequency list lookup.

Tests TSV loading and the reconcile/classify pass WITHOUT any model calls.
"""

from langki.generation.lookup import (
    LookupReconciler,
    load_lookup_table,
    lookup_path_for,
    parse_lookup_lines,
)
from langki.generation.models import CardRecord, LookupEntry


class TestParseLookupLines:
    """Tests for TSV line parsing."""

    def test_full_line(self):
        """All four columns should be read."""
        table = parse_lookup_lines(["ไป\tpai\tgehen\tไปตลาด\n"])

        assert table["ไป"] == LookupEntry(
            rank=1, term="ไป", pronunciation="pai", meaning="gehen", note="ไปตลาด"
        )

    def test_rank_is_line_number(self):
        """Rank should be the 1-based line number."""
        table = parse_lookup_lines(["a\tx\ty\n", "b\tx\ty\n", "c\tx\ty\n"])

        assert [table[w].rank for w in "abc"] == [1, 2, 3]

    def test_blank_fields_become_none(self):
        """Blank or missing optional columns should be None, never ''."""
        table = parse_lookup_lines(["ไป\t\t  \n", "มา\n"])

        assert table["ไป"].pronunciation is None
        assert table["ไป"].meaning is None
        assert table["ไป"].note is None
        assert table["มา"].meaning is None

    def test_empty_word_skipped_but_line_counted(self):
        """Lines without a word should be skipped without shifting ranks."""
        table = parse_lookup_lines(["\tx\ty\n", "ไป\tpai\tgehen\n"])

        assert list(table) == ["ไป"]
        assert table["ไป"].rank == 2

    def test_last_duplicate_wins(self):
        """A repeated word should keep its last line."""
        table = parse_lookup_lines(["ไป\tpai\tgehen\n", "ไป\tpaj\tfahren\n"])

        assert table["ไป"].meaning == "fahren"
        assert table["ไป"].rank == 2


class TestLoadLookupTable:
    """Tests for loading frequency list files."""

    def test_loads_file(self, tmp_path):
        """A UTF-8 file should load into a table."""
        path = tmp_path / "Thai.tsv"
        path.write_text("ไป\tpai\tgehen\tx\nมา\tmaa\tkommen\ty\n", encoding="utf-8")

        table = load_lookup_table(path)

        assert set(table) == {"ไป", "มา"}
        assert table["มา"].meaning == "kommen"

    def test_byte_order_mark_stripped(self, tmp_path):
        """A BOM at the start of the file should not become part of the first word."""
        path = tmp_path / "Thai.tsv"
        path.write_bytes("ไป\tpai\tgehen\n".encode("utf-8-sig"))

        table = load_lookup_table(path)

        assert list(table) == ["ไป"]
        assert table["ไป"].rank == 1

    def test_missing_file_gives_empty_table(self, tmp_path):
        """A missing file should be logged and give an empty table."""
        assert load_lookup_table(tmp_path / "missing.tsv") == {}

    def test_invalid_encoding_gives_empty_table(self, tmp_path):
        """A non-UTF-8 file should give an empty table."""
        path = tmp_path / "bad.tsv"
        path.write_bytes(b"\xff\xfe\xfa\tbad\n")

        assert load_lookup_table(path) == {}

    def test_path_for_language(self, tmp_path):
        """The lookup file should be named after the language."""
        assert lookup_path_for("Thai", tmp_path) == tmp_path / "Thai.tsv"


class TestReconcile:
    """Tests for LookupReconciler.reconcile."""

    def test_hit_copies_entry(self):
        """A hit should copy meaning, pronunciation, note and rank."""
        entry = LookupEntry(rank=4, term="far", pronunciation="fɑːr", meaning="weit", note="far away")

        records = LookupReconciler().reconcile(["far"], {"far": entry})

        assert records[0].meaning == entry.meaning
        assert records[0].pronunciation == entry.pronunciation
        assert records[0].note == entry.note
        assert records[0].rank_hint == 4

    def test_miss_gives_stub(self):
        """A miss should give a record with only the term set."""
        records = LookupReconciler().reconcile(["zzz"], {})

        assert records == [CardRecord(term="zzz")]
        assert not records[0].is_complete

    def test_none_fields_become_empty_strings(self, sample_lookup_table):
        """None entry fields should map to empty record fields."""
        records = LookupReconciler().reconcile(["กิน"], sample_lookup_table)

        assert records[0].pronunciation == ""
        assert records[0].note == ""

    def test_input_order_preserved(self, sample_lookup_table):
        """Records should follow the input order, not the rank order."""
        records = LookupReconciler().reconcile(["มา", "zzz", "ไป"], sample_lookup_table)

        assert [r.term for r in records] == ["มา", "zzz", "ไป"]


class TestClassify:
    """Tests for LookupReconciler.classify."""

    def test_split(self, sample_lookup_table):
        """Complete hits and the rest should be separated in order."""
        complete, pending = LookupReconciler().classify(
            ["zzz", "มา", "กิน", "ไป"], sample_lookup_table
        )

        assert [r.term for r in complete] == ["มา", "ไป"]
        assert [r.term for r in pending] == ["zzz", "กิน"]

    def test_hit_without_pronunciation_needs_generation(self, sample_lookup_table):
        """A hit missing pronunciation should go to the model."""
        complete, pending = LookupReconciler().classify(["กิน"], sample_lookup_table)

        assert complete == []
        assert pending[0].meaning == "essen"
        assert pending[0].rank_hint == 3
