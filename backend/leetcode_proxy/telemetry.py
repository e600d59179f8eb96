"""Structured events for cache and upstream activity.

Every event is written as one ``TELEMETRY {json}`` log line. Tests subscribe
through ``register_listener`` to assert on cache hits and upstream calls.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TelemetryEvent:
    name: str
    payload: Dict[str, Any] = field(default_factory=dict)

    def to_log_line(self) -> str:
        return json.dumps({"event": self.name, **self.payload}, default=str, sort_keys=True)


Listener = Callable[[TelemetryEvent], None]

# Listeners run on the event loop thread; no locking needed.
_listeners: List[Listener] = []


def register_listener(listener: Listener) -> None:
    _listeners.append(listener)


def clear_listeners() -> None:
    _listeners.clear()


def emit_event(name: str, **fields: Any) -> None:
    event = TelemetryEvent(name=name, payload=dict(fields))
    for listener in list(_listeners):
        try:
            listener(event)
        except Exception:  # noqa: BLE001
            logger.exception("Telemetry listener failed for %s", name)
    logger.info("TELEMETRY %s", event.to_log_line())


__all__ = ["Listener", "TelemetryEvent", "clear_listeners", "emit_event", "register_listener"]
