from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock

import structlog

from bbbank_api.config import get_settings


@dataclass(frozen=True)
class TelemetryEvent:
    name: str
    properties: dict[str, str]
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class TelemetryClient:
    """Process-local custom event sink.

    Events are kept in a bounded buffer (oldest dropped first) and mirrored to the
    structured log as ``telemetry_event`` lines so a log shipper can forward them.
    """

    def __init__(self, max_events: int = 1000) -> None:
        self._lock = Lock()
        self._events: deque[TelemetryEvent] = deque(maxlen=max(1, max_events))

    def track_event(self, name: str, properties: dict[str, str] | None = None) -> TelemetryEvent:
        props = {str(k): str(v) for k, v in (properties or {}).items()}
        event = TelemetryEvent(name=name, properties=props)
        with self._lock:
            self._events.append(event)

        structlog.get_logger("telemetry").info("telemetry_event", event_name=name, properties=props)
        return event

    def events(self) -> list[TelemetryEvent]:
        with self._lock:
            return list(self._events)

    def reset(self) -> None:
        with self._lock:
            self._events.clear()


_CLIENT: TelemetryClient | None = None


def get_telemetry_client() -> TelemetryClient:
    global _CLIENT
    if _CLIENT is None:
        _CLIENT = TelemetryClient(max_events=get_settings().telemetry_buffer_size)
    return _CLIENT


def reset_telemetry() -> None:
    """Drop buffered events (used by tests)."""

    get_telemetry_client().reset()
