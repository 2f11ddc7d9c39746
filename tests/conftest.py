"""Shared pytest fixtures for CallPrep tests.

Fixtures:
    - bare_config: No credentials at all
    - full_config: API key, secret, account id and main number set
    - fake_clock: Manually advanced clock for token expiry tests
    - call_log: Empty in-memory call log
"""

from pathlib import Path

import pytest

from callprep.core.config import Config
from callprep.engine.call_log import InMemoryCallLog

ACCOUNT_ID = "4f917f13-aae1-401d-8241-010db91da5b2"


class FakeClock:
    """Callable clock returning epoch seconds that tests advance by hand."""

    def __init__(self, start: float = 1_760_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def bare_config(tmp_path: Path) -> Config:
    """Configuration with no provider credentials."""
    return Config(log_path=tmp_path / "logs")


@pytest.fixture
def full_config(tmp_path: Path) -> Config:
    """Configuration with a complete credential set."""
    return Config(
        log_path=tmp_path / "logs",
        mightycall_api_key="test-api-key",
        mightycall_secret_key="test-secret",
        mightycall_account_id=ACCOUNT_ID,
        mightycall_main_number="(877) 840-6250",
    )


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def call_log() -> InMemoryCallLog:
    return InMemoryCallLog()


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")
