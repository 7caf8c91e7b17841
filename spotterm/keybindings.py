"""Key bindings: the default table and the parsing of key descriptions."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from spotterm.command import (
    Command,
    CommandKind,
    GotoMode,
    JumpMode,
    MoveAmount,
    MoveMode,
    SeekDirection,
    ShiftMode,
    TargetMode,
    parse,
)

log = logging.getLogger(__name__)

SHIFT = "shift"
ALT = "alt"
CTRL = "ctrl"

_MODIFIERS = {"Shift": SHIFT, "Alt": ALT, "Ctrl": CTRL}


class Key(Enum):
    """Non-character keys; values are the names used in key descriptions."""

    ENTER = "Enter"
    TAB = "Tab"
    BACKSPACE = "Backspace"
    ESC = "Esc"
    LEFT = "Left"
    RIGHT = "Right"
    UP = "Up"
    DOWN = "Down"
    INS = "Ins"
    DEL = "Del"
    HOME = "Home"
    END = "End"
    PAGE_UP = "PageUp"
    PAGE_DOWN = "PageDown"
    PAUSE_BREAK = "PauseBreak"
    NUMPAD_CENTER = "NumpadCenter"
    F0 = "F0"
    F1 = "F1"
    F2 = "F2"
    F3 = "F3"
    F4 = "F4"
    F5 = "F5"
    F6 = "F6"
    F7 = "F7"
    F8 = "F8"
    F9 = "F9"
    F10 = "F10"
    F11 = "F11"
    F12 = "F12"


@dataclass(frozen=True)
class KeyEvent:
    """A key press: a special ``Key`` or a single character, with an optional modifier.

    ``modifier`` is one of ``"shift"``, ``"alt"``, ``"ctrl"`` or ``None``.
    Shifted characters are represented by their upper-case form without a
    modifier.
    """

    key: Key | str
    modifier: str | None = None

    @property
    def is_char(self) -> bool:
        return isinstance(self.key, str)


def _move(mode: MoveMode, amount: MoveAmount | None = None) -> Command:
    return Command(CommandKind.MOVE, mode, MoveAmount() if amount is None else amount)


def _seek(delta: int) -> Command:
    return Command(CommandKind.SEEK, SeekDirection(delta, relative=True))


def default_keybindings() -> dict[str, Command]:
    """The built-in table from key descriptions to commands."""
    return {
        "q": Command(CommandKind.QUIT),
        "Shift+p": Command(CommandKind.TOGGLE_PLAY),
        "Shift+u": Command(CommandKind.UPDATE_LIBRARY),
        "Shift+s": Command(CommandKind.STOP),
        "<": Command(CommandKind.PREVIOUS),
        ">": Command(CommandKind.NEXT),
        "c": Command(CommandKind.CLEAR),
        "Space": Command(CommandKind.QUEUE),
        ".": Command(CommandKind.PLAY_NEXT),
        "Enter": Command(CommandKind.PLAY),
        "n": Command(CommandKind.JUMP, JumpMode.NEXT, None),
        "Shift+n": Command(CommandKind.JUMP, JumpMode.PREVIOUS, None),
        "s": Command(CommandKind.SAVE),
        "Ctrl+s": Command(CommandKind.SAVE_QUEUE),
        "d": Command(CommandKind.DELETE),
        "f": _seek(1000),
        "b": _seek(-1000),
        "Shift+f": _seek(10000),
        "Shift+b": _seek(-10000),
        "+": Command(CommandKind.VOLUME_UP, 1),
        "]": Command(CommandKind.VOLUME_UP, 5),
        "-": Command(CommandKind.VOLUME_DOWN, 1),
        "[": Command(CommandKind.VOLUME_DOWN, 5),
        "r": Command(CommandKind.REPEAT, None),
        "z": Command(CommandKind.SHUFFLE, None),
        "x": Command(CommandKind.SHARE, TargetMode.SELECTED),
        "Shift+x": Command(CommandKind.SHARE, TargetMode.CURRENT),
        "F1": Command(CommandKind.FOCUS, "queue"),
        "F2": Command(CommandKind.FOCUS, "search"),
        "F3": Command(CommandKind.FOCUS, "library"),
        "?": Command(CommandKind.HELP),
        "Backspace": Command(CommandKind.BACK),
        "o": Command(CommandKind.OPEN, TargetMode.SELECTED),
        "Shift+o": Command(CommandKind.OPEN, TargetMode.CURRENT),
        "a": Command(CommandKind.GOTO, GotoMode.ALBUM),
        "A": Command(CommandKind.GOTO, GotoMode.ARTIST),
        "Up": _move(MoveMode.UP),
        "p": _move(MoveMode.PLAYING),
        "Down": _move(MoveMode.DOWN),
        "Left": _move(MoveMode.LEFT),
        "Right": _move(MoveMode.RIGHT),
        "PageUp": _move(MoveMode.UP, MoveAmount(5)),
        "PageDown": _move(MoveMode.DOWN, MoveAmount(5)),
        "Home": _move(MoveMode.UP, MoveAmount.extreme()),
        "End": _move(MoveMode.DOWN, MoveAmount.extreme()),
        "k": _move(MoveMode.UP),
        "j": _move(MoveMode.DOWN),
        "h": _move(MoveMode.LEFT),
        "l": _move(MoveMode.RIGHT),
        "Ctrl+p": _move(MoveMode.UP),
        "Ctrl+n": _move(MoveMode.DOWN),
        "Ctrl+a": _move(MoveMode.LEFT),
        "Ctrl+e": _move(MoveMode.RIGHT),
        "Shift+Up": Command(CommandKind.SHIFT, ShiftMode.UP, None),
        "Shift+Down": Command(CommandKind.SHIFT, ShiftMode.DOWN, None),
        "Ctrl+v": Command(CommandKind.INSERT, None),
    }


def get_bindings(values: Any) -> dict[str, Command]:
    """Bindings for the given configuration values.

    The defaults are included unless ``default_keybindings`` is false; custom
    bindings override them, and custom bindings whose command does not parse
    are logged and left out.
    """
    use_defaults = values.default_keybindings
    bindings = default_keybindings() if use_defaults is None or use_defaults else {}
    custom: Mapping[str, str] = values.keybindings or {}
    for key, text in custom.items():
        command = parse(text)
        if command is None:
            log.error("Invalid command for key %s: %s", key, text)
            continue
        log.info("Custom keybinding: %s -> %r", key, command)
        bindings[key] = command
    return bindings


def parse_key(key: str) -> KeyEvent:
    """The event for a single key name, or for the first character of ``key``."""
    if key == "Space":
        return KeyEvent(" ")
    try:
        return KeyEvent(Key(key))
    except ValueError:
        pass
    if not key:
        raise ValueError("empty key description")
    return KeyEvent(key[0])


def parse_keybinding(binding: str) -> KeyEvent | None:
    """The event for a description such as ``"Ctrl+s"``; ``None`` for an unknown modifier."""
    parts = binding.split("+")
    if binding == "+" or len(parts) != 2:
        return parse_key(binding)
    modifier_name, key_name = parts
    modifier = _MODIFIERS.get(modifier_name)
    parsed = parse_key(key_name)
    if modifier is None:
        return None
    if parsed.is_char and modifier == SHIFT:
        return KeyEvent(parsed.key.upper()[0])
    return KeyEvent(parsed.key, modifier)