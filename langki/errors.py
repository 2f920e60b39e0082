"""Error taxonomy for card generation.

Every failure a generation operation can report is one of these. None of them
is fatal: operations hand them back inside a ``Result`` (or a
``PipelineResult``/``LintOutcome``) so the caller decides what to do.
"""

from __future__ import annotations


class CardGenerationError(Exception):
    """Base class for all generation failures."""


class TransportError(CardGenerationError):
    """The model call itself failed. The message is passed through verbatim."""


class CardParseError(CardGenerationError):
    """The model answered, but no usable card could be read from the text."""


class LintParseError(CardParseError):
    """A review response had none of the expected field labels."""


class CardValidationError(CardGenerationError):
    """A caller precondition failed before any model call was made."""
