from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tests._fixtures.generators import FailingGenerator, RecordingGenerator
from tests._fixtures.project_builder import ProjectBuilder


@pytest.fixture
def project_builder(tmp_path: Path) -> ProjectBuilder:
    """Provide a reusable project builder rooted at the pytest tmp_path."""
    return ProjectBuilder(tmp_path)


@pytest.fixture
def recording_generator() -> RecordingGenerator:
    return RecordingGenerator()


@pytest.fixture
def failing_generator() -> FailingGenerator:
    return FailingGenerator()


@pytest.fixture(autouse=True)
def _clear_llm_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep runner environment variables from leaking into tests."""
    for key in (
        "BLOCKDOC_LLM_MODEL",
        "BLOCKDOC_LLM_BASE_URL",
        "BLOCKDOC_LLM_API_KEY",
        "MODEL_RUNNER_MODEL",
        "MODEL_RUNNER_BASE_URL",
        "MODEL_RUNNER_API_KEY",
        "OPENAI_MODEL",
        "OPENAI_BASE_URL",
        "OPENAI_API_KEY",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _reset_blockdoc_logger():
    """Drop handlers installed by CLI runs so later tests start clean."""
    yield
    logger = logging.getLogger("blockdoc")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
