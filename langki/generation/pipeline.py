"""
Card generation pipeline.

Stages:
1. Suggest new words for a topic (optional, VocabSuggester)
2. Reconcile the word list against the frequency list (no model call)
3. Ask the model for the words that are still missing detail
4. Merge: frequency-list cards first, then the parsed model cards

A failure in stage 3 is reported on the result, but the cards finished in
stage 2 are kept. The model may skip words it was asked for, so the number of
cards returned is not tied to the number of words requested.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from langki.errors import CardParseError, CardValidationError
from langki.generation.lookup import LookupReconciler, load_lookup_table, lookup_path_for
from langki.generation.models import CardRecord, LookupTable, PipelineResult
from langki.generation.prompts import get_edit_prompt, get_generate_prompt
from langki.generation.record_parser import RecordParser
from langki.generation.vocab_suggester import DEFAULT_MAX_COUNT, VocabSuggester
from langki.llm.client import ModelClient, ModelConfig
from langki.result import Result

if TYPE_CHECKING:
    from langki.config import Settings

DEFAULT_EDIT_INSTRUCTION_MAX_CHARS = 500

LookupLoader = Callable[[str], LookupTable]


def load_lookup_for_language(language: str, directory: str | Path) -> LookupTable:
    """Default lookup loader: <directory>/<language>.tsv."""
    return load_lookup_table(lookup_path_for(language, directory))


def clean_word_list(words: Iterable[str]) -> list[str]:
    """Strip entries and drop blanks, keeping order."""
    return [word.strip() for word in words if word and word.strip()]


class CardPipeline:
    """
    Orchestrates word list → finished cards.

    One model call per operation, no shared mutable state between calls, so
    independent runs can be awaited concurrently.
    """

    def __init__(
        self,
        client: ModelClient,
        model_config: ModelConfig,
        lookup_loader: LookupLoader | None = None,
        freq_list_dir: str | Path = "freqLists",
        edit_instruction_max_chars: int = DEFAULT_EDIT_INSTRUCTION_MAX_CHARS,
        suggest_max_count: int = DEFAULT_MAX_COUNT,
        parser: RecordParser | None = None,
    ):
        """
        Initialize the pipeline.

        Args:
            client: Model call capability
            model_config: Model/effort/tier sent with every call
            lookup_loader: language -> lookup table (default reads TSV files)
            freq_list_dir: Directory used by the default lookup loader
            edit_instruction_max_chars: Longest accepted edit instruction
            suggest_max_count: Upper bound for topic suggestions
            parser: Record parser (default: new RecordParser)
        """
        self.client = client
        self.model_config = model_config
        self.lookup_loader = lookup_loader or partial(
            load_lookup_for_language, directory=freq_list_dir
        )
        self.edit_instruction_max_chars = edit_instruction_max_chars
        self.parser = parser or RecordParser()
        self.reconciler = LookupReconciler()
        self._tables: dict[str, LookupTable] = {}
        self.suggester = VocabSuggester(client, model_config, max_count=suggest_max_count)

    @classmethod
    def from_settings(cls, settings: Settings, client: ModelClient) -> CardPipeline:
        return cls(
            client=client,
            model_config=settings.model_config_value(),
            freq_list_dir=settings.freq_list_dir,
            edit_instruction_max_chars=settings.edit_instruction_max_chars,
            suggest_max_count=settings.suggest_max_count,
        )

    async def lookup_table(self, language: str) -> LookupTable:
        """Frequency list for ``language``, read once per pipeline off the event loop."""
        if language not in self._tables:
            self._tables[language] = await asyncio.to_thread(self.lookup_loader, language)
        return self._tables[language]

    # =========================================================================
    # Word list → cards
    # =========================================================================

    async def generate_for_word_list(
        self,
        words: Iterable[str],
        language: str,
        native_language: str,
    ) -> PipelineResult:
        """
        Build cards for ``words``.

        Args:
            words: Terms to build cards for (blank entries are ignored)
            language: Language of the terms, also selects the lookup table
            native_language: Language the meanings are written in

        Returns:
            PipelineResult with the merged cards. On failure ``error`` is set
            and ``cards`` still holds the frequency-list cards.
        """
        terms = clean_word_list(words)
        if not terms:
            return PipelineResult()

        # Stage 1: Reconcile against the frequency list
        table = await self.lookup_table(language)
        complete, pending = self.reconciler.classify(terms, table)
        requested = [record.term for record in pending]

        logger.info(
            "{} word(s): {} from frequency list, {} to generate",
            len(terms),
            len(complete),
            len(requested),
        )

        result = PipelineResult(cards=list(complete), requested_terms=requested)
        if not requested:
            return result

        # Stage 2: Generate the rest
        prompt = get_generate_prompt(requested, language, native_language)
        response = await self.client.send(prompt, self.model_config)
        if not response.ok:
            logger.error("Failed to generate cards: {}", response.error)
            result.error = response.error
            return result

        # Stage 3: Parse and merge
        generated = self.parser.parse(response.value)
        if not generated:
            logger.error("Could not parse any cards from model response")
            result.error = CardParseError("Could not parse any cards from model response")
            return result

        missing = set(requested) - {record.term for record in generated}
        if missing:
            logger.warning("Model skipped {} requested word(s): {}", len(missing), sorted(missing))

        result.cards.extend(generated)
        logger.info("Generated {} card(s) successfully", len(generated))
        return result

    # =========================================================================
    # Topic → cards
    # =========================================================================

    async def generate_for_topic(
        self,
        topic: str,
        count: int,
        known_terms: Iterable[str],
        language: str,
        native_language: str,
    ) -> PipelineResult:
        """Suggest ``count`` new words for ``topic``, then build their cards."""
        suggestion = await self.suggester.suggest(topic, known_terms, count, language)
        if not suggestion.ok:
            return PipelineResult(error=suggestion.error)

        words = suggestion.value
        if not words:
            return PipelineResult(error=CardParseError("Model did not suggest any new words"))

        logger.debug("Suggested words for {!r}: {}", topic, words)
        return await self.generate_for_word_list(words, language, native_language)

    # =========================================================================
    # Free-form edit
    # =========================================================================

    async def edit_card(
        self,
        record: CardRecord,
        instruction: str,
        language: str,
        native_language: str,
    ) -> Result[CardRecord]:
        """
        Ask the model to change ``record`` as described by ``instruction``.

        The instruction is checked before any call is made. The live record is
        not touched; the edited copy is returned.
        """
        instruction = (instruction or "").strip()
        if not instruction:
            return Result.failure(CardValidationError("Edit instruction must not be empty"))
        if len(instruction) > self.edit_instruction_max_chars:
            return Result.failure(
                CardValidationError(
                    f"Edit instruction is too long ({len(instruction)} > "
                    f"{self.edit_instruction_max_chars} characters)"
                )
            )

        prompt = get_edit_prompt(record.to_text(), instruction, language, native_language)
        response = await self.client.send(prompt, self.model_config)
        if not response.ok:
            logger.warning("Edit of {!r} failed: {}", record.term, response.error)
            return Result.failure(response.error)

        if not self.parser.scan_fields(response.value):
            return Result.failure(CardParseError("Could not parse edited card from model response"))

        return Result.success(self.parser.parse_partial(response.value, base=record))
