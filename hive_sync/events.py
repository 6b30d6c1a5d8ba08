from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .common import RUN_ID, PrintLogger


@dataclass(frozen=True)
class Event:
    kind: str
    payload: Dict[str, Any] = field(default_factory=dict)
    run_id: str = RUN_ID


Subscriber = Callable[[Event], None]


class Emitter:
    """Fan-out of synchronization events to registered subscribers."""

    def __init__(self) -> None:
        self._subscribers: List[Subscriber] = []
        self._lock = threading.Lock()

    def subscribe(self, subscriber: Subscriber) -> None:
        with self._lock:
            self._subscribers.append(subscriber)

    def emit(self, kind: str, **payload: Any) -> Event:
        event = Event(kind=kind, payload=dict(payload))
        with self._lock:
            subscribers = list(self._subscribers)
        for subscriber in subscribers:
            subscriber(event)
        return event


class StructuredLogSubscriber:
    """Mirror every event into the job logger."""

    def __init__(self, logger: PrintLogger, level: str = "DEBUG") -> None:
        self.logger = logger
        self.level = level

    def __call__(self, event: Event) -> None:
        # "log" events were already written by emit_log
        if event.kind == "log":
            return
        self.logger.log(self.level, f"event_{event.kind}", **event.payload)


def emit_log(
    emitter: Optional[Emitter],
    *,
    level: str,
    msg: str,
    logger: Optional[PrintLogger] = None,
    **fields: Any,
) -> None:
    if logger is not None:
        logger.log(level, msg, **fields)
    if emitter is not None:
        emitter.emit("log", level=level, msg=msg, **fields)


__all__ = ["Emitter", "Event", "StructuredLogSubscriber", "emit_log"]
