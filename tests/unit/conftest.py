"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from job_scout_core.models.run import RunConfig
from job_scout_core.models.search import SearchParams
from job_scout_core.state import RunState
from tests.mocks.mock_driver import FakeDriver
from tests.mocks.mock_settings import make_settings


@pytest.fixture
def mock_settings() -> MagicMock:
    """Return a MagicMock Settings with sensible defaults."""
    return make_settings()


@pytest.fixture
def run_state() -> RunState:
    """Return a fresh RunState for a 'react' search."""
    return RunState(config=RunConfig(search=SearchParams(keywords="react")))


@pytest.fixture
def fake_driver() -> FakeDriver:
    """Return an empty in-memory navigation driver."""
    return FakeDriver()
