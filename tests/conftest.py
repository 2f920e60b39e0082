"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import pytest
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from langki.generation.models import CardRecord, LookupEntry
from langki.llm.client import ModelConfig
from langki.result import Result


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)


class FakeModelClient:
    """
    Stand-in for the model API.

    Returns the queued responses in order (plain strings become successes,
    exceptions become failures) and records every prompt it was sent.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.prompts: list[str] = []
        self.configs: list[ModelConfig] = []
        self.closed = False

    async def send(self, prompt, config):
        self.prompts.append(prompt)
        self.configs.append(config)
        if not self.responses:
            raise AssertionError(f"Unexpected model call: {prompt[:80]!r}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            return Result.failure(response)
        return Result.success(response)

    async def close(self):
        self.closed = True

    @property
    def call_count(self) -> int:
        return len(self.prompts)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def fake_client():
    """Factory for FakeModelClient with queued responses."""
    return FakeModelClient


@pytest.fixture
def model_config():
    """Provide a model configuration for testing."""
    return ModelConfig(model="gpt-5-mini", effort="low", tier="auto")


@pytest.fixture
def sample_card():
    """Provide a complete Thai card for testing."""
    return CardRecord(
        term="ไป",
        meaning="gehen",
        pronunciation="pai",
        note="ไปตลาด - zum Markt gehen",
    )


@pytest.fixture
def sample_lookup_table():
    """Provide a small frequency-list table for testing."""
    return {
        "ไป": LookupEntry(rank=1, term="ไป", pronunciation="pai", meaning="gehen"),
        "มา": LookupEntry(rank=2, term="มา", pronunciation="maa", meaning="kommen"),
        "กิน": LookupEntry(rank=3, term="กิน", pronunciation=None, meaning="essen"),
    }


@pytest.fixture
def sample_model_response():
    """Provide a model response with two well-formed cards."""
    return (
        "WORD: กิน\n"
        "IPA: kin\n"
        "MEANING: essen\n"
        "USAGE: กินข้าว - Reis essen\n"
        "\n"
        "WORD: น้ำ\n"
        "IPA: náam\n"
        "MEANING: Wasser\n"
        "USAGE: ดื่มน้ำ - Wasser trinken\n"
    )
