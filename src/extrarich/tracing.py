"""Structured diagnostic events.

The engine reports every resolved context and every split or merge
decision to an injectable sink. The default sink drops everything;
correctness never depends on one being installed.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class EventSink(Protocol):
    """Receiver of engine events."""

    def emit(self, event: str, **fields: Any) -> None: ...


class NullSink:
    """Sink that ignores every event."""

    def emit(self, event: str, **fields: Any) -> None:
        pass


class LoggingSink:
    """Sink that writes one debug log line per event."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def emit(self, event: str, **fields: Any) -> None:
        if self._log.isEnabledFor(logging.DEBUG):
            self._log.debug("%s %s", event, json.dumps(fields, default=_jsonable))


@dataclass
class TraceEvent:
    """One recorded event."""

    name: str
    fields: dict[str, Any] = field(default_factory=dict)


class RecordingSink:
    """Sink that keeps events in memory."""

    def __init__(self) -> None:
        self.events: list[TraceEvent] = []

    def emit(self, event: str, **fields: Any) -> None:
        self.events.append(TraceEvent(event, dict(fields)))

    def names(self) -> list[str]:
        return [e.name for e in self.events]

    def find(self, name: str) -> list[TraceEvent]:
        return [e for e in self.events if e.name == name]


@contextmanager
def span(sink: EventSink, name: str, **fields: Any) -> Iterator[None]:
    """Emit ``<name>.start`` and ``<name>.end`` around a block."""
    sink.emit(f"{name}.start", **fields)
    started = time.perf_counter()
    try:
        yield
    finally:
        sink.emit(f"{name}.end", elapsed_ms=(time.perf_counter() - started) * 1000)


def _jsonable(value: Any) -> Any:
    # Enums and sets end up here
    if hasattr(value, "value"):
        return value.value
    if isinstance(value, set | frozenset):
        return sorted(value, key=str)
    return str(value)
