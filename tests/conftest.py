"""Shared test fixtures for extrarich."""

from __future__ import annotations

import pytest

from extrarich.applier import AttributeEngine
from extrarich.config import EngineSettings
from extrarich.tracing import RecordingSink


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> EngineSettings:
    """Default settings, isolated from EXTRARICH_* variables in the environment."""
    for name in (
        "EXTRARICH_SUPPORTED_BLOCK_TYPES",
        "EXTRARICH_CONTAINER_TYPES",
        "EXTRARICH_TRACE",
        "EXTRARICH_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    return EngineSettings()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def engine(settings: EngineSettings, sink: RecordingSink) -> AttributeEngine:
    return AttributeEngine(settings=settings, sink=sink)
