"""Pytest fixtures for prompt autotuner tests."""

import pytest

from prompt_autotuner.config import AutotunerConfig
from prompt_autotuner.storage import Database, SessionRecorder
from prompt_autotuner.tests.helpers import (
    CLARITY_MARKER,
    EXAMPLES_MARKER,
    STRUCTURE_MARKER,
    DummyConnector,
    ScriptedEvaluator,
)
from prompt_autotuner.types import ModelConfig


@pytest.fixture
def temp_db_path(tmp_path):
    """Provide a temporary database path for testing."""
    db_dir = tmp_path / "test_storage"
    db_dir.mkdir(exist_ok=True)
    return db_dir / "test_sessions.db"


@pytest.fixture
def test_database(temp_db_path):
    """
    Provide a real Database instance with temporary storage.

    Uses a real SQLite file (not in-memory) so records written from worker
    threads are visible to the test.
    """
    db = Database(temp_db_path)
    yield db
    db.close()


@pytest.fixture
def recorder(test_database):
    """Provide a session recorder backed by the temporary database."""
    return SessionRecorder(test_database)


@pytest.fixture
def dummy_connector():
    """
    Provide a DummyConnector for fast, deterministic model responses.

    This replaces a real backend (e.g., OpenAI) with a fake that answers
    instantly without API calls.
    """
    return DummyConnector(seed=42)


@pytest.fixture
def config():
    """
    Provide a configuration with short budgets for fast tests.

    Budgets are generous compared to the in-memory fakes, so only tests that
    add artificial latency ever hit them.
    """
    return AutotunerConfig(
        optimization_budget_seconds=2.0,
        evaluation_budget_seconds=2.0,
        request_timeout_seconds=1.0,
        evaluator_models=(ModelConfig(name="fake-a"), ModelConfig(name="fake-b")),
        enable_session_logging=True,
    )


@pytest.fixture
def models():
    """Provide two enabled models and one disabled model."""
    return [
        ModelConfig(name="model-a"),
        ModelConfig(name="model-b"),
        ModelConfig(name="model-off", enabled=False),
    ]


@pytest.fixture
def ranked_evaluator():
    """
    Provide an evaluator that scores the first three strategies 55, 90 and 60.

    Clarity: (1 - 0) * 40 + 0.5 * 30 + 0 * 30 = 55
    Examples: (1 - 0.25) * 40 + 1 * 30 + 1 * 30 = 90
    Structure: (1 - 0.25) * 40 + 1 * 30 + 0 * 30 = 60
    """
    return ScriptedEvaluator(
        script={
            CLARITY_MARKER: (0.0, 0.5, 0.0),
            EXAMPLES_MARKER: (0.25, 1.0, 1.0),
            STRUCTURE_MARKER: (0.25, 1.0, 0.0),
        }
    )
