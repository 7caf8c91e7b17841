"""Playback state and control of the audio worker."""

import logging
import math
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum, auto
from typing import Any

log = logging.getLogger(__name__)

MAX_VOLUME = 2**16 - 1
VOLUME_PERCENT = int(MAX_VOLUME * 1.0 / 100.0)


@dataclass(frozen=True)
class Playing:
    """Playback runs; ``since`` is the wall-clock time at which position zero was."""

    since: float


@dataclass(frozen=True)
class Paused:
    """Playback is paused at ``position``."""

    position: timedelta


@dataclass(frozen=True)
class Stopped:
    """Nothing is playing."""


@dataclass(frozen=True)
class FinishedTrack:
    """The current track ended."""


PlayerEvent = Playing | Paused | Stopped | FinishedTrack


class UriType(Enum):
    ALBUM = auto()
    ARTIST = auto()
    TRACK = auto()
    PLAYLIST = auto()
    SHOW = auto()
    EPISODE = auto()

    @classmethod
    def from_uri(cls, uri: str) -> "UriType | None":
        """Kind of object a ``spotify:`` URI names, or ``None``."""
        if uri.startswith("spotify:album:"):
            return cls.ALBUM
        if uri.startswith("spotify:artist:"):
            return cls.ARTIST
        if uri.startswith("spotify:track:"):
            return cls.TRACK
        if uri.startswith("spotify:") and ":playlist:" in uri:
            return cls.PLAYLIST
        if uri.startswith("spotify:show:"):
            return cls.SHOW
        if uri.startswith("spotify:episode:"):
            return cls.EPISODE
        return None


def log_scale(volume: int) -> int:
    """Map a linear volume onto an exponential curve, capped at the maximum."""
    a = 1.0 / 1000.0
    b = 6.908
    result = a * math.exp(b * volume / MAX_VOLUME) * MAX_VOLUME
    return MAX_VOLUME if result > MAX_VOLUME else int(result)


class Player:
    """Tracks playback state and sends commands to an audio worker.

    ``backend`` is called with one command tuple at a time:
    ``("load", item, start_playing, position_ms)``, ``("play",)``,
    ``("pause",)``, ``("stop",)``, ``("seek", position_ms)``,
    ``("set_volume", scaled_volume)``, ``("preload", item)`` or
    ``("shutdown",)``. Without a backend, commands are dropped and logged.
    """

    def __init__(self, backend: Callable[[tuple], Any] | None, config: Any) -> None:
        self._backend = backend
        self._config = config
        self._lock = threading.Lock()
        self._status: PlayerEvent = Stopped()
        self._elapsed: timedelta | None = None
        self._since: float | None = None
        self.set_volume(config.state().volume)

    def _send(self, command: tuple) -> None:
        if self._backend is None:
            log.error("no channel to worker available")
            return
        self._backend(command)

    def status(self) -> PlayerEvent:
        with self._lock:
            return self._status

    def current_progress(self) -> timedelta:
        with self._lock:
            elapsed, since = self._elapsed, self._since
        progress = elapsed or timedelta()
        if since is not None:
            progress += timedelta(seconds=max(0.0, time.time() - since))
        return progress

    def load(self, item: Any, start_playing: bool, position_ms: int) -> None:
        log.info("loading track: %r", item)
        self._send(("load", item, start_playing, position_ms))

    def update_status(self, event: PlayerEvent) -> None:
        with self._lock:
            match event:
                case Paused(position=position):
                    self._elapsed, self._since = position, None
                case Playing(since=since):
                    self._elapsed, self._since = None, since
                case _:
                    self._elapsed, self._since = None, None
            self._status = event

    def update_track(self) -> None:
        """Reset the progress for a newly loaded track."""
        with self._lock:
            self._elapsed, self._since = None, None

    def play(self) -> None:
        log.info("play()")
        self._send(("play",))

    def pause(self) -> None:
        log.info("pause()")
        self._send(("pause",))

    def stop(self) -> None:
        log.info("stop()")
        self._send(("stop",))

    def toggleplayback(self) -> None:
        match self.status():
            case Playing():
                self.pause()
            case Paused():
                self.play()

    def seek(self, position_ms: int) -> None:
        self._send(("seek", position_ms))

    def seek_relative(self, delta: int) -> None:
        progress = self.current_progress()
        current_ms = int(progress.total_seconds()) * 1000 + progress.microseconds // 1000
        self.seek(max(0, current_ms + delta))

    def volume(self) -> int:
        return self._config.state().volume

    def set_volume(self, volume: int) -> None:
        log.info("setting volume to %s", volume)
        with self._config.state_mut() as state:
            state.volume = volume
        self._send(("set_volume", log_scale(volume)))

    def preload(self, item: Any) -> None:
        self._send(("preload", item))

    def shutdown(self) -> None:
        self._send(("shutdown",))