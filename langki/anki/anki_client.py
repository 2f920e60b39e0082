"""
AnkiConnect client for langki.

Provides HTTP wrapper around AnkiConnect API for:
- Reading the words already in a deck (known vocabulary)
- Looking up the field names of a note type
- Adding approved cards as notes

Based on AnkiConnect API v6.

Hardening:
- Connection check with graceful degradation
- Configurable timeout with retry logic
- Detection of Anki modal dialogs (blocks API)
"""

from __future__ import annotations

import time
from typing import Any

import requests
from loguru import logger
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from langki.config import get_settings

# Default retry configuration for AnkiConnect
DEFAULT_RETRIES = 3
DEFAULT_BACKOFF_FACTOR = 0.5  # 0.5, 1.0, 2.0 seconds between retries
RETRY_STATUS_CODES = [500, 502, 503, 504]  # Retry on server errors


class AnkiClient:
    """
    Best-effort wrapper around the AnkiConnect API.

    AnkiConnect must be installed in Anki and running on port 8765.
    See: https://foosoft.net/projects/anki-connect/
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: int = 60,
        retries: int = DEFAULT_RETRIES,
        backoff_factor: float = DEFAULT_BACKOFF_FACTOR,
    ) -> None:
        """
        Initialize AnkiConnect client with retry logic.

        Args:
            base_url: AnkiConnect URL (default from config)
            timeout: Request timeout in seconds
            retries: Number of retry attempts for failed requests
            backoff_factor: Exponential backoff factor between retries
        """
        settings = get_settings()
        self.base_url = base_url or settings.anki_connect_url
        self.timeout = timeout
        self._last_connection_check = 0.0
        self._connection_available = False
        self._field_names_cache: dict[str, list[str]] = {}

        # Configure session with retry logic
        self.session = requests.Session()

        retry_strategy = Retry(
            total=retries,
            backoff_factor=backoff_factor,
            status_forcelist=RETRY_STATUS_CODES,
            allowed_methods=["POST"],  # AnkiConnect only uses POST
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

        logger.debug(
            "Initialized AnkiConnect client: url={}, timeout={}s, retries={}",
            self.base_url,
            self.timeout,
            retries,
        )

    # ========================================
    # Core API Methods
    # ========================================

    def _invoke(self, action: str, params: dict[str, Any] | None = None) -> Any:
        """
        Invoke an AnkiConnect API action.

        Args:
            action: AnkiConnect action name (e.g., "version", "findNotes")
            params: Action parameters

        Returns:
            Result from AnkiConnect API

        Raises:
            RuntimeError: If AnkiConnect returns an error
            requests.RequestException: If HTTP request fails
        """
        payload = {
            "action": action,
            "version": 6,
            "params": params or {},
        }

        # Truncate large params for logging to avoid verbose output
        log_params = params
        if params:
            log_params = {}
            for k, v in params.items():
                if isinstance(v, list) and len(v) > 10:
                    log_params[k] = f"[{len(v)} items]"
                else:
                    log_params[k] = v
        logger.debug("AnkiConnect request: action={}, params={}", action, log_params)

        response = self.session.post(
            self.base_url,
            json=payload,
            timeout=self.timeout,
        )
        response.raise_for_status()

        data = response.json()

        if data.get("error"):
            raise RuntimeError(f"AnkiConnect error: {data['error']}")

        return data.get("result")

    def check_connection(self, cache_seconds: float = 30.0) -> bool:
        """
        Check if AnkiConnect is running and accessible.

        Uses cached result to avoid hammering Anki on repeated checks.

        Args:
            cache_seconds: Seconds to cache the connection status

        Returns:
            True if connection successful, False otherwise
        """
        now = time.monotonic()
        if self._last_connection_check and (now - self._last_connection_check) < cache_seconds:
            return self._connection_available

        try:
            version = self._invoke("version")
            self._connection_available = True
            self._last_connection_check = now
            logger.debug("AnkiConnect version detected: {}", version)
            return True

        except requests.exceptions.ConnectionError:
            self._connection_available = False
            self._last_connection_check = now
            logger.warning(
                "Anki not running or AnkiConnect not installed. "
                "Start Anki and ensure AnkiConnect addon is enabled."
            )
            return False

        except requests.exceptions.Timeout:
            self._connection_available = False
            self._last_connection_check = now
            logger.warning(
                "AnkiConnect request timed out. "
                "Anki may have a modal dialog open (e.g., 'Check Database', 'Sync'). "
                "Close any dialogs and try again."
            )
            return False

        except (RuntimeError, requests.RequestException) as exc:
            self._connection_available = False
            self._last_connection_check = now
            logger.warning("AnkiConnect error: {}", exc)
            return False

    def require_connection(self) -> None:
        """
        Raise an exception if Anki is not available.

        Use at the start of operations that require Anki.
        """
        if not self.check_connection():
            raise RuntimeError(
                "Anki is not available. Ensure Anki is running with "
                "AnkiConnect addon enabled and no modal dialogs are open."
            )

    # ========================================
    # Note Types & Notes
    # ========================================

    def field_names(self, note_type: str) -> list[str]:
        """Field names of a note type, in order (cached per client)."""
        if note_type not in self._field_names_cache:
            names = self._invoke("modelFieldNames", {"modelName": note_type})
            if not names:
                raise RuntimeError(f"Note type not available: {note_type}")
            self._field_names_cache[note_type] = list(names)
        return self._field_names_cache[note_type]

    def add_note(
        self,
        deck: str,
        note_type: str,
        fields: dict[str, str],
        tags: list[str] | None = None,
    ) -> int:
        """
        Add one note.

        Returns:
            The new note ID

        Raises:
            RuntimeError: If AnkiConnect rejects the note
        """
        note_id = self._invoke(
            "addNote",
            {
                "note": {
                    "deckName": deck,
                    "modelName": note_type,
                    "fields": fields,
                    "tags": tags or [],
                    "options": {"allowDuplicate": False},
                }
            },
        )
        if note_id is None:
            raise RuntimeError(f"AnkiConnect did not create a note in {deck}")
        return note_id

    def known_terms(self, deck: str, field: str = "Word") -> list[str]:
        """
        Non-blank values of ``field`` across all notes in ``deck``.

        Notes without that field are skipped.
        """
        note_ids = self._invoke("findNotes", {"query": f'deck:"{deck}"'}) or []
        if not note_ids:
            return []

        notes = self._invoke("notesInfo", {"notes": note_ids}) or []
        words = []
        for note in notes:
            value = self._field_value((note.get("fields") or {}).get(field))
            if value:
                words.append(value)

        logger.debug("Found {} known word(s) in deck {}", len(words), deck)
        return words

    # ========================================
    # Helpers
    # ========================================

    @staticmethod
    def _field_value(field: dict[str, Any] | None) -> str:
        """Extract string value from Anki field dictionary."""
        if not field:
            return ""

        if isinstance(field, dict):
            if "value" in field:
                return str(field["value"]).strip()
            if "text" in field:
                return str(field["text"]).strip()

        return str(field).strip()
