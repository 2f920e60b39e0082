"""LLM-based vocabulary card generation.

Pipeline:
1. VocabSuggester proposes new words for a topic
2. LookupReconciler fills in what the frequency list already knows
3. The model writes WORD/IPA/MEANING/USAGE blocks for the rest
4. RecordParser turns those blocks into CardRecords
5. LintCycle reviews a single card and proposes corrections

Usage:
    from langki.generation import CardPipeline

    pipeline = CardPipeline(client, model_config)
    result = await pipeline.generate_for_word_list(["ไป", "มา"], "Thai", "German")
    for card in result.cards:
        print(card.to_text())
"""
from langki.generation.lint import LintCycle
from langki.generation.lookup import LookupReconciler, load_lookup_table
from langki.generation.models import CardRecord, LintOutcome, LookupEntry, PipelineResult
from langki.generation.pipeline import CardPipeline
from langki.generation.preview import PreviewList
from langki.generation.record_parser import RecordParser
from langki.generation.vocab_suggester import VocabSuggester

__all__ = [
    "CardPipeline",
    "CardRecord",
    "LintCycle",
    "LintOutcome",
    "LookupEntry",
    "LookupReconciler",
    "PipelineResult",
    "PreviewList",
    "RecordParser",
    "VocabSuggester",
    "load_lookup_table",
]
