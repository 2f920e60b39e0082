"""
Model call capability.

Everything in ``langki.generation`` talks to the model through the
``ModelClient`` protocol: one prompt in, one ``Result`` with the response
text out. ``OpenAIResponsesClient`` is the implementation against the
OpenAI Responses API, using the official SDK.

Credentials are constructor arguments and the per-call ``ModelConfig`` is
passed explicitly; nothing here reads process-wide state during a call.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal, Protocol

import httpx
import openai
from loguru import logger
from openai import AsyncOpenAI
from openai.types.responses import Response
from pydantic import BaseModel, ConfigDict

from langki.errors import TransportError
from langki.result import Result

if TYPE_CHECKING:
    from langki.config import Settings

DEFAULT_MODEL = "gpt-5-mini"
DEFAULT_BASE_URL = "https://api.openai.com/v1"


class ModelConfig(BaseModel):
    """Per-call model selection."""

    model_config = ConfigDict(frozen=True)

    model: str = DEFAULT_MODEL
    effort: Literal["minimal", "low", "medium", "high"] | None = None
    tier: Literal["auto", "default", "flex", "priority"] | None = None


class ModelClient(Protocol):
    """Anything that can answer a prompt."""

    async def send(self, prompt: str, config: ModelConfig) -> Result[str]:
        ...


class OpenAIResponsesClient:
    """Client for the OpenAI Responses API."""

    def __init__(
        self,
        api_key: str,
        organization: str = "",
        project: str = "",
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: OpenAI API key (an empty key fails every call)
            organization: Optional organization header value
            project: Optional project header value
            base_url: API root, without the trailing /responses
            timeout_seconds: Request timeout
            transport: Optional httpx transport (tests use MockTransport)
        """
        self.api_key = api_key.strip()
        self.organization = organization.strip()
        self.project = project.strip()
        self.base_url = base_url.rstrip("/")

        http_client = None
        if transport is not None:
            http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(timeout_seconds),
                transport=transport,
            )

        # No retries: a failed call is reported to the caller as is
        self.client = AsyncOpenAI(
            api_key=self.api_key,
            organization=self.organization or None,
            project=self.project or None,
            base_url=self.base_url,
            timeout=timeout_seconds,
            max_retries=0,
            http_client=http_client,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> OpenAIResponsesClient:
        return cls(
            api_key=settings.openai_api_key,
            organization=settings.openai_organization,
            project=settings.openai_project,
            base_url=settings.openai_base_url,
            timeout_seconds=settings.ai_timeout_seconds,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.close()

    async def __aenter__(self) -> OpenAIResponsesClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @staticmethod
    def build_payload(prompt: str, config: ModelConfig) -> dict[str, Any]:
        """Keyword arguments for ``responses.create``."""
        payload: dict[str, Any] = {"model": config.model, "input": prompt}
        if config.effort:
            payload["reasoning"] = {"effort": config.effort}
        if config.tier:
            payload["service_tier"] = config.tier
        return payload

    @staticmethod
    def _field(obj: Any, name: str) -> Any:
        if isinstance(obj, dict):
            return obj.get(name)
        return getattr(obj, name, None)

    @classmethod
    def extract_text(cls, response: Response) -> str:
        """
        Concatenate every output_text part of every message item.

        Items or parts of an unexpected shape are skipped.
        """
        output = cls._field(response, "output")
        if not isinstance(output, list):
            return ""

        chunks: list[str] = []
        for item in output:
            if cls._field(item, "type") != "message":
                continue
            content = cls._field(item, "content")
            if not isinstance(content, list):
                continue
            for part in content:
                text = cls._field(part, "text")
                if cls._field(part, "type") == "output_text" and isinstance(text, str):
                    chunks.append(text)
        return "".join(chunks)

    async def send(self, prompt: str, config: ModelConfig) -> Result[str]:
        """
        Send one prompt and return the response text.

        Returns:
            Result with the stripped response text, or a TransportError for a
            missing key, connection failure, error status, unexpected payload
            or blank response
        """
        if not self.api_key:
            return Result.failure(TransportError("OpenAI API key not configured"))

        logger.debug("Sending model request: model={}, prompt_chars={}", config.model, len(prompt))

        try:
            response = await self.client.responses.create(**self.build_payload(prompt, config))
        except openai.APIStatusError as exc:
            logger.error("Model API returned {}: {}", exc.status_code, exc.message)
            return Result.failure(
                TransportError(f"Model API error {exc.status_code}: {exc.message}")
            )
        except openai.APIError as exc:
            logger.error("Error communicating with model API: {}", exc)
            return Result.failure(TransportError(str(exc) or exc.__class__.__name__))
        except ValueError as exc:
            logger.error("Model API returned invalid JSON: {}", exc)
            return Result.failure(TransportError(f"Model API returned invalid JSON: {exc}"))

        # Non-JSON or non-object bodies come back unparsed
        if not isinstance(response, Response):
            logger.error("Unexpected model API payload: {!r}", response)
            return Result.failure(TransportError("Model API returned an unexpected payload"))

        text = self.extract_text(response).strip()
        if not text:
            logger.warning("Received empty response from model")
            return Result.failure(TransportError("Received empty response from model"))

        logger.debug("Received model response with {} characters", len(text))
        return Result.success(text)
