"""
Vocabulary suggestion.

Asks the model for new words on a topic and filters out anything the learner
already knows. The known-word filter is a plain substring test against the
flattened known list, so it also catches near-duplicates that appear inside
longer known entries (and can over-filter short words for the same reason).
"""

from __future__ import annotations

from collections.abc import Iterable

from loguru import logger

from langki.errors import CardValidationError
from langki.generation.prompts import get_suggest_prompt
from langki.llm.client import ModelClient, ModelConfig
from langki.result import Result

DEFAULT_MAX_COUNT = 50


def flatten_known_terms(known_terms: Iterable[str]) -> str:
    """Render the known set as one string: sorted, comma separated."""
    return ", ".join(sorted({term.strip() for term in known_terms if term.strip()}))


def filter_suggestions(lines: Iterable[str], flattened_known: str, count: int) -> list[str]:
    """Drop blank lines and lines contained in ``flattened_known``; keep at most ``count``."""
    kept: list[str] = []
    for line in lines:
        candidate = line.strip()
        if not candidate or candidate in flattened_known:
            continue
        kept.append(candidate)
        if len(kept) >= count:
            break
    return kept


class VocabSuggester:
    """Suggests vocabulary the learner does not know yet."""

    def __init__(
        self,
        client: ModelClient,
        model_config: ModelConfig,
        max_count: int = DEFAULT_MAX_COUNT,
    ):
        self.client = client
        self.model_config = model_config
        self.max_count = max_count

    async def suggest(
        self,
        topic: str,
        known_terms: Iterable[str],
        count: int,
        language: str,
    ) -> Result[list[str]]:
        """
        Suggest up to ``count`` new words for ``topic``.

        Fewer words than asked for is a normal outcome.

        Returns:
            Result with the filtered word list, a CardValidationError for a
            blank topic or out-of-range count (no model call is made), or the
            transport error unchanged
        """
        topic = (topic or "").strip()
        if not topic:
            return Result.failure(CardValidationError("Topic must not be empty"))
        if count < 1 or count > self.max_count:
            return Result.failure(
                CardValidationError(f"Count must be between 1 and {self.max_count}, got {count}")
            )

        flattened = flatten_known_terms(known_terms)
        prompt = get_suggest_prompt(topic, count, flattened, language)

        response = await self.client.send(prompt, self.model_config)
        if not response.ok:
            logger.warning("Vocabulary suggestion failed: {}", response.error)
            return Result.failure(response.error)

        words = filter_suggestions(response.value.splitlines(), flattened, count)
        logger.debug("Model suggested {} new word(s) for {!r}", len(words), topic)
        return Result.success(words)
