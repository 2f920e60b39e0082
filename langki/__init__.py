"""langki - LLM vocabulary card generation for Anki."""

__version__ = "1.0.0"
