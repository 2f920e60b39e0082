"""Model transport."""

from langki.llm.client import (
    DEFAULT_MODEL,
    ModelClient,
    ModelConfig,
    OpenAIResponsesClient,
)

__all__ = [
    "DEFAULT_MODEL",
    "ModelClient",
    "ModelConfig",
    "OpenAIResponsesClient",
]
