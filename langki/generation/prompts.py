"""
LLM prompts for vocabulary card generation.

Contains prompts for the four model calls:
- Vocabulary suggestion for a topic (plain word list)
- Card generation for a word list (WORD/IPA/MEANING/USAGE blocks)
- Card review (NO ERRORS or a corrected block)
- Free-form card edit (a corrected block)

Every card-producing prompt asks for the block format read by
``langki.generation.record_parser``.
"""
from __future__ import annotations

# =============================================================================
# Output Format (shared by every card-producing prompt)
# =============================================================================

CARD_FORMAT = """WORD: [the word, in {language} script]
IPA: [pronunciation in IPA]
MEANING: [short meaning in {native_language}]
USAGE: [one short example sentence in {language} with its {native_language} translation]"""

# =============================================================================
# Vocabulary Suggestion
# =============================================================================

SUGGEST_VOCAB_PROMPT = """Suggest {count} useful {language} words for a learner about the topic: "{topic}"

The learner already knows these words, do NOT suggest any of them:
{known_terms}

RULES:
1. One word per line
2. Only the word itself, in {language} script
3. No numbering, no bullets, no translations, no explanations
4. Prefer frequent, everyday words over rare ones
"""

# =============================================================================
# Card Generation
# =============================================================================

GENERATE_CARDS_PROMPT = """Create one language learning flashcard for each of these {language} words:
{word_list}

Respond with one block per word, exactly in this format:

{card_format}

RULES:
1. Keep the word exactly as given
2. Separate blocks with an empty line
3. Do not add any other text before or after the blocks
"""

# =============================================================================
# Card Review
# =============================================================================

LINT_PROMPT = """You are checking a {language} vocabulary flashcard for mistakes.

{card}

Check that the WORD is spelled correctly, the IPA matches the WORD, the MEANING
is correct, and the USAGE sentence is natural and uses the WORD.

If everything is correct, reply with exactly: NO ERRORS
Otherwise reply with ONLY the fields that need to change, in this format:

{card_format}
"""

# =============================================================================
# Free-form Edit
# =============================================================================

EDIT_PROMPT = """Here is a {language} vocabulary flashcard:

{card}

Change it according to this request: "{instruction}"

Reply with the complete updated card, exactly in this format and nothing else:

{card_format}
"""


def get_card_format(language: str, native_language: str) -> str:
    """Card block template for the given languages."""
    return CARD_FORMAT.format(language=language, native_language=native_language)


def get_suggest_prompt(topic: str, count: int, known_terms: str, language: str) -> str:
    """
    Build the vocabulary suggestion prompt.

    Args:
        topic: What the words should be about
        count: How many words to ask for
        known_terms: Flattened rendering of the words the learner knows
        language: Language of the words

    Returns:
        Formatted prompt string
    """
    return SUGGEST_VOCAB_PROMPT.format(
        topic=topic,
        count=count,
        known_terms=known_terms or "(none)",
        language=language,
    )


def get_generate_prompt(words: list[str], language: str, native_language: str) -> str:
    """Build the card generation prompt for exactly ``words``."""
    return GENERATE_CARDS_PROMPT.format(
        language=language,
        word_list="\n".join(words),
        card_format=get_card_format(language, native_language),
    )


def get_lint_prompt(card: str, language: str, native_language: str) -> str:
    """Build the review prompt for one rendered card."""
    return LINT_PROMPT.format(
        language=language,
        card=card,
        card_format=get_card_format(language, native_language),
    )


def get_edit_prompt(card: str, instruction: str, language: str, native_language: str) -> str:
    """Build the free-form edit prompt for one rendered card."""
    return EDIT_PROMPT.format(
        language=language,
        card=card,
        instruction=instruction,
        card_format=get_card_format(language, native_language),
    )
