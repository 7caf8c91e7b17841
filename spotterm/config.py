"""User configuration, persisted user state and the directories they live in."""

import logging
import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import asdict, dataclass, field, fields
from datetime import timedelta
from pathlib import Path
from typing import Any
import os

import platformdirs

from spotterm.command import RepeatSetting, SortDirection, SortKey
from spotterm.episode import Episode
from spotterm.serialization import CBOR, TOML, SerializationError

log = logging.getLogger(__name__)

APP_NAME = "spotterm"
USER_STATE_FILE = "userstate.cbor"
MAX_VOLUME = 2**16 - 1

_base_path: Path | None = None


class ConfigError(Exception):
    """The configuration or the user state could not be loaded."""


def _coerce(name: str, value: Any, kind: type) -> Any:
    if kind is float:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
    elif kind is int:
        if isinstance(value, int) and not isinstance(value, bool) and 0 <= value < 2**32:
            return value
    elif isinstance(value, kind):
        return value
    raise ConfigError(f"invalid value for {name}: {value!r}")


def _require_mapping(name: str, value: Any) -> Mapping:
    if not isinstance(value, Mapping):
        raise ConfigError(f"{name} must be a table, not {type(value).__name__}")
    return value


@dataclass
class ConfigTheme:
    """Colour names for the parts of the interface; unset parts keep defaults."""

    background: str | None = None
    primary: str | None = None
    secondary: str | None = None
    title: str | None = None
    playing: str | None = None
    playing_selected: str | None = None
    playing_bg: str | None = None
    highlight: str | None = None
    highlight_bg: str | None = None
    error: str | None = None
    error_bg: str | None = None
    statusbar_progress: str | None = None
    statusbar_progress_bg: str | None = None
    statusbar: str | None = None
    statusbar_bg: str | None = None
    cmdline: str | None = None
    cmdline_bg: str | None = None
    search_match: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ConfigTheme":
        data = _require_mapping("theme", data)
        return cls(
            **{
                f.name: _coerce(f"theme.{f.name}", data[f.name], str)
                for f in fields(cls)
                if data.get(f.name) is not None
            }
        )

    def to_dict(self) -> dict[str, str]:
        return {key: value for key, value in asdict(self).items() if value is not None}


_SIMPLE_TYPES: dict[str, type] = {
    "default_keybindings": bool,
    "use_nerdfont": bool,
    "flip_status_indicators": bool,
    "audio_cache": bool,
    "audio_cache_size": int,
    "backend": str,
    "backend_device": str,
    "volnorm": bool,
    "volnorm_pregain": float,
    "notify": bool,
    "bitrate": int,
    "album_column": bool,
    "gapless": bool,
    "shuffle": bool,
    "cover_max_scale": float,
}


@dataclass
class ConfigValues:
    """Settings read from the configuration file; ``None`` means unset."""

    command_key: str | None = None
    default_keybindings: bool | None = None
    keybindings: dict[str, str] | None = None
    theme: ConfigTheme | None = None
    use_nerdfont: bool | None = None
    flip_status_indicators: bool | None = None
    audio_cache: bool | None = None
    audio_cache_size: int | None = None
    backend: str | None = None
    backend_device: str | None = None
    volnorm: bool | None = None
    volnorm_pregain: float | None = None
    notify: bool | None = None
    bitrate: int | None = None
    album_column: bool | None = None
    gapless: bool | None = None
    shuffle: bool | None = None
    repeat: RepeatSetting | None = None
    cover_max_scale: float | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ConfigValues":
        """Build values from a parsed table; unknown keys are ignored."""
        data = _require_mapping("configuration", data)
        values: dict[str, Any] = {}
        for f in fields(cls):
            raw = data.get(f.name)
            if raw is None:
                continue
            match f.name:
                case "command_key":
                    if not isinstance(raw, str) or len(raw) != 1:
                        raise ConfigError(f"command_key must be one character: {raw!r}")
                    values[f.name] = raw
                case "keybindings":
                    table = _require_mapping("keybindings", raw)
                    values[f.name] = {
                        _coerce("keybindings", key, str): _coerce(f"keybindings.{key}", cmd, str)
                        for key, cmd in table.items()
                    }
                case "theme":
                    values[f.name] = ConfigTheme.from_dict(raw)
                case "repeat":
                    try:
                        values[f.name] = RepeatSetting(raw)
                    except ValueError as error:
                        raise ConfigError(f"invalid value for repeat: {raw!r}") from error
                case name:
                    values[name] = _coerce(name, raw, _SIMPLE_TYPES[name])
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, ConfigTheme):
                value = value.to_dict()
            elif isinstance(value, RepeatSetting):
                value = value.value
            elif isinstance(value, dict):
                value = dict(value)
            result[f.name] = value
        return result


@dataclass
class SortingOrder:
    """How a playlist is sorted."""

    key: SortKey
    direction: SortDirection


@dataclass
class QueueState:
    """The queue as it was when the program last quit."""

    current_track: int | None = None
    random_order: list[int] | None = None
    track_progress: timedelta = field(default_factory=timedelta)
    queue: list[Any] = field(default_factory=list)


@dataclass
class UserState:
    """State kept between runs."""

    volume: int = MAX_VOLUME
    shuffle: bool = False
    repeat: RepeatSetting = RepeatSetting.NONE
    queuestate: QueueState = field(default_factory=QueueState)
    playlist_orders: dict[str, SortingOrder] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserState":
        data = _require_mapping("user state", data)
        try:
            volume = data["volume"]
            if not isinstance(volume, int) or isinstance(volume, bool) or not 0 <= volume <= MAX_VOLUME:
                raise ConfigError(f"invalid volume: {volume!r}")
            orders = {
                _coerce("playlist id", playlist_id, str): SortingOrder(
                    SortKey(order["key"]), SortDirection(order["direction"])
                )
                for playlist_id, order in _require_mapping(
                    "playlist_orders", data["playlist_orders"]
                ).items()
            }
            return cls(
                volume=volume,
                shuffle=_coerce("shuffle", data["shuffle"], bool),
                repeat=RepeatSetting(data["repeat"]),
                queuestate=_decode_queue_state(data["queuestate"]),
                playlist_orders=orders,
            )
        except (KeyError, TypeError, ValueError) as error:
            raise ConfigError(f"malformed user state: {error}") from error

    def to_dict(self) -> dict[str, Any]:
        return {
            "volume": self.volume,
            "shuffle": self.shuffle,
            "repeat": self.repeat.value,
            "queuestate": _encode_queue_state(self.queuestate),
            "playlist_orders": {
                playlist_id: {"key": order.key.value, "direction": order.direction.value}
                for playlist_id, order in self.playlist_orders.items()
            },
        }


def _encode_playable(item: Any) -> dict[str, Any]:
    if isinstance(item, Episode):
        return {"type": "Episode", **asdict(item)}
    if isinstance(item, Mapping):
        return dict(item)
    raise ConfigError(f"cannot store queue item {item!r}")


def _decode_playable(data: Any) -> Any:
    data = _require_mapping("queue item", data)
    if data.get("type") == "Episode":
        return Episode(**{key: value for key, value in data.items() if key != "type"})
    return dict(data)


def _encode_queue_state(state: QueueState) -> dict[str, Any]:
    progress = state.track_progress
    return {
        "current_track": state.current_track,
        "random_order": None if state.random_order is None else list(state.random_order),
        "track_progress": {
            "secs": progress.days * 86400 + progress.seconds,
            "nanos": progress.microseconds * 1000,
        },
        "queue": [_encode_playable(item) for item in state.queue],
    }


def _decode_queue_state(data: Any) -> QueueState:
    data = _require_mapping("queuestate", data)
    progress = _require_mapping("track_progress", data["track_progress"])
    random_order = data["random_order"]
    return QueueState(
        current_track=data["current_track"],
        random_order=None if random_order is None else [int(i) for i in random_order],
        track_progress=timedelta(
            seconds=progress["secs"], microseconds=progress["nanos"] // 1000
        ),
        queue=[_decode_playable(item) for item in data["queue"]],
    )


def set_base_path(path: str | os.PathLike | None) -> None:
    """Keep configuration and cache under ``path`` instead of the user's directories."""
    global _base_path
    _base_path = None if path is None else Path(path)


def _app_dirs() -> tuple[Path, Path]:
    base = _base_path
    if base is not None:
        return base / ".config", base / ".cache"
    return (
        Path(platformdirs.user_config_dir(APP_NAME)),
        Path(platformdirs.user_cache_dir(APP_NAME)),
    )


def config_path(file: str) -> Path:
    """Path of ``file`` in the configuration directory, which is created if needed."""
    config_dir, _ = _app_dirs()
    if config_dir.exists() and not config_dir.is_dir():
        config_dir.unlink()
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir / file


def cache_path(file: str) -> Path:
    """Path of ``file`` in the cache directory, which is created if needed."""
    _, cache_dir = _app_dirs()
    cache_dir.mkdir(parents=True, exist_ok=True)
    return cache_dir / file


def _load_values(filename: str) -> ConfigValues:
    try:
        raw = TOML.load_or_generate_default(
            config_path(filename), lambda: ConfigValues().to_dict(), False
        )
    except SerializationError as error:
        raise ConfigError(str(error)) from error
    return ConfigValues.from_dict(raw)


def _load_state() -> UserState:
    path = config_path(USER_STATE_FILE)
    try:
        raw = CBOR.load_or_generate_default(path, lambda: UserState().to_dict(), True)
        try:
            return UserState.from_dict(raw)
        except ConfigError:
            state = UserState()
            CBOR.write(path, state.to_dict())
            return state
    except SerializationError as error:
        raise ConfigError(f"could not load user state: {error}") from error


class Config:
    """The configuration file's values together with the persisted user state."""

    def __init__(self, filename: str) -> None:
        self._filename = filename
        self._lock = threading.RLock()
        self._values = _load_values(filename)
        state = _load_state()
        if self._values.shuffle is not None:
            state.shuffle = self._values.shuffle
        if self._values.repeat is not None:
            state.repeat = self._values.repeat
        self._state = state

    def values(self) -> ConfigValues:
        with self._lock:
            return self._values

    def state(self) -> UserState:
        with self._lock:
            return self._state

    @contextmanager
    def state_mut(self) -> Iterator[UserState]:
        """Hold the state lock while the caller changes the user state."""
        with self._lock:
            yield self._state

    def save_state(self) -> None:
        path = config_path(USER_STATE_FILE)
        log.debug("saving user state to %s", path)
        try:
            with self._lock:
                CBOR.write(path, self._state.to_dict())
        except (SerializationError, ConfigError) as error:
            log.error("Could not save user state: %s", error)

    def reload(self) -> None:
        """Read the configuration file again."""
        values = _load_values(self._filename)
        with self._lock:
            self._values = values