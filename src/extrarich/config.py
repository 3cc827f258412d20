"""Engine configuration using pydantic-settings.

Every field can be overridden through an ``EXTRARICH_``-prefixed
environment variable (list fields take JSON, e.g.
``EXTRARICH_CONTAINER_TYPES='["blockquote"]'``).
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from extrarich.tracing import EventSink, LoggingSink, NullSink
from extrarich.types import BlockType

DEFAULT_SUPPORTED_BLOCK_TYPES = [
    BlockType.PARAGRAPH,
    BlockType.QUOTE,
    BlockType.HEADING_1,
    BlockType.HEADING_2,
    BlockType.HEADING_3,
    BlockType.HEADING_4,
    BlockType.HEADING_5,
    BlockType.HEADING_6,
]

DEFAULT_CONTAINER_TYPES = [BlockType.QUOTE, BlockType.LIST_ITEM]

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class EngineSettings(BaseSettings):
    """Settings for the attribute engine.

    - supported_block_types: blocks a collapsed cursor may color as a whole
    - container_types: containers that take the write when the cursor sits
      at the start of their first paragraph
    - trace: send engine events to the log instead of dropping them
    - log_level: level used by the CLI's logging setup
    """

    model_config = SettingsConfigDict(
        env_prefix="EXTRARICH_",
        case_sensitive=False,
        extra="ignore",
    )

    supported_block_types: list[BlockType] = Field(
        default_factory=lambda: list(DEFAULT_SUPPORTED_BLOCK_TYPES)
    )
    container_types: list[BlockType] = Field(
        default_factory=lambda: list(DEFAULT_CONTAINER_TYPES)
    )
    trace: bool = False
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level: {value}")
        return level

    def make_sink(self) -> EventSink:
        """Sink matching the trace flag."""
        return LoggingSink() if self.trace else NullSink()


@lru_cache
def get_settings() -> EngineSettings:
    """Get cached settings instance."""
    return EngineSettings()
