"""Tests for engine settings."""

from __future__ import annotations

import pytest
from _builders import at, doc, li, p, text, ul
from pydantic import ValidationError

from extrarich.applier import AttributeEngine
from extrarich.config import (
    DEFAULT_CONTAINER_TYPES,
    DEFAULT_SUPPORTED_BLOCK_TYPES,
    EngineSettings,
    get_settings,
)
from extrarich.tracing import LoggingSink, NullSink, RecordingSink
from extrarich.types import BlockType, Scope


class TestDefaults:
    def test_defaults(self, settings: EngineSettings) -> None:
        assert settings.supported_block_types == DEFAULT_SUPPORTED_BLOCK_TYPES
        assert settings.container_types == DEFAULT_CONTAINER_TYPES
        assert settings.trace is False
        assert settings.log_level == "WARNING"
        assert BlockType.TABLE not in settings.supported_block_types

    def test_sink_follows_trace_flag(self, settings: EngineSettings) -> None:
        assert isinstance(settings.make_sink(), NullSink)
        assert isinstance(EngineSettings(trace=True).make_sink(), LoggingSink)


class TestEnvironment:
    def test_env_overrides(
        self, settings: EngineSettings, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("EXTRARICH_CONTAINER_TYPES", '["blockquote"]')
        monkeypatch.setenv("EXTRARICH_TRACE", "true")
        monkeypatch.setenv("EXTRARICH_LOG_LEVEL", "debug")

        loaded = EngineSettings()
        assert loaded.container_types == [BlockType.QUOTE]
        assert loaded.trace is True
        assert loaded.log_level == "DEBUG"

    def test_invalid_log_level(self, settings: EngineSettings) -> None:
        with pytest.raises(ValidationError):
            EngineSettings(log_level="loud")

    def test_invalid_block_type(self, settings: EngineSettings) -> None:
        with pytest.raises(ValidationError):
            EngineSettings(supported_block_types=["marquee"])

    def test_get_settings_is_cached(self, settings: EngineSettings) -> None:
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()


class TestEngineHonoursSettings:
    def test_list_item_not_a_container(self) -> None:
        settings = EngineSettings(container_types=[BlockType.QUOTE])
        engine = AttributeEngine(settings=settings, sink=RecordingSink())
        document = doc(ul(li(p(text("one"))), li(p(text("two")))))

        result = engine.apply(document, at((0, 1, 0, 0), 0), "textColor", "red")

        assert result.scope is Scope.BLOCK
        assert document.children[0].children[1].data == {}
        assert document.children[0].children[1].children[0].children[0].data == {
            "textColor": "red"
        }

    def test_paragraph_not_supported(self) -> None:
        settings = EngineSettings(supported_block_types=[BlockType.HEADING_1])
        engine = AttributeEngine(settings=settings, sink=RecordingSink())
        document = doc(p(text("one")))

        result = engine.apply(document, at((0, 0), 0), "textColor", "red")

        assert result.changed is False
        assert document.children[0].children[0].data == {}
