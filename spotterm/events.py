"""Events passed from the player and the queue to the main loop."""

import queue
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any


class QueueEvent(Enum):
    """Requests addressed to the queue."""

    PRELOAD_TRACK_REQUEST = auto()


@dataclass(frozen=True)
class SessionDied:
    """The streaming session ended and the worker must be restarted."""


class EventManager:
    """An unbounded event channel that wakes the main loop on every event."""

    def __init__(self, on_trigger: Callable[[], None] | None = None) -> None:
        self._events: queue.SimpleQueue[Any] = queue.SimpleQueue()
        self._on_trigger = on_trigger

    def send(self, event: Any) -> None:
        self._events.put(event)
        self.trigger()

    def trigger(self) -> None:
        """Wake the main loop so that it processes pending work."""
        if self._on_trigger is not None:
            self._on_trigger()

    def drain(self) -> Iterator[Any]:
        """Yield pending events until none are left, without blocking."""
        while True:
            try:
                yield self._events.get_nowait()
            except queue.Empty:
                return