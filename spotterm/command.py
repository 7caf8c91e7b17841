"""Commands typed on the command line: their model, textual form and parser."""

import re
from dataclasses import dataclass
from enum import Enum, auto


class RepeatSetting(Enum):
    """Repeat behaviour of the queue; values are the persisted names."""

    NONE = "off"
    REPEAT_PLAYLIST = "playlist"
    REPEAT_TRACK = "track"

    def __str__(self) -> str:
        match self:
            case RepeatSetting.NONE:
                return "None"
            case RepeatSetting.REPEAT_PLAYLIST:
                return "RepeatPlaylist"
            case RepeatSetting.REPEAT_TRACK:
                return "RepeatTrack"


class _LowercaseEnum(Enum):
    def __str__(self) -> str:
        return self.value


class TargetMode(_LowercaseEnum):
    CURRENT = "current"
    SELECTED = "selected"


class MoveMode(_LowercaseEnum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    PLAYING = "playing"


class SortKey(_LowercaseEnum):
    TITLE = "title"
    DURATION = "duration"
    ARTIST = "artist"
    ALBUM = "album"
    ADDED = "added"


class SortDirection(_LowercaseEnum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


class ShiftMode(_LowercaseEnum):
    UP = "up"
    DOWN = "down"


class GotoMode(_LowercaseEnum):
    ALBUM = "album"
    ARTIST = "artist"


class JumpMode(_LowercaseEnum):
    """Direction of a jump; a QUERY jump carries its search term in the command."""

    PREVIOUS = "previous"
    NEXT = "next"
    QUERY = "query"


@dataclass(frozen=True)
class SeekDirection:
    """A seek target in milliseconds, either relative or absolute."""

    value: int
    relative: bool = False

    def __str__(self) -> str:
        if self.relative and self.value > 0:
            return f"+{self.value}"
        return str(self.value)


@dataclass(frozen=True)
class MoveAmount:
    """Number of steps to move; ``None`` means all the way to the edge."""

    steps: int | None = 1

    @classmethod
    def extreme(cls) -> "MoveAmount":
        return cls(None)

    @property
    def is_extreme(self) -> bool:
        return self.steps is None


class CommandKind(Enum):
    QUIT = auto()
    TOGGLE_PLAY = auto()
    STOP = auto()
    PREVIOUS = auto()
    NEXT = auto()
    CLEAR = auto()
    QUEUE = auto()
    PLAY_NEXT = auto()
    PLAY = auto()
    UPDATE_LIBRARY = auto()
    SAVE = auto()
    SAVE_QUEUE = auto()
    DELETE = auto()
    FOCUS = auto()
    SEEK = auto()
    VOLUME_UP = auto()
    VOLUME_DOWN = auto()
    REPEAT = auto()
    SHUFFLE = auto()
    SHARE = auto()
    BACK = auto()
    OPEN = auto()
    GOTO = auto()
    MOVE = auto()
    SHIFT = auto()
    SEARCH = auto()
    JUMP = auto()
    HELP = auto()
    RELOAD_CONFIG = auto()
    NOOP = auto()
    INSERT = auto()
    NEW_PLAYLIST = auto()
    SORT = auto()
    LOGOUT = auto()


_PLAIN_NAMES = {
    CommandKind.NOOP: "noop",
    CommandKind.QUIT: "quit",
    CommandKind.TOGGLE_PLAY: "playpause",
    CommandKind.STOP: "stop",
    CommandKind.PREVIOUS: "previous",
    CommandKind.NEXT: "next",
    CommandKind.CLEAR: "clear",
    CommandKind.QUEUE: "queue",
    CommandKind.PLAY_NEXT: "playnext",
    CommandKind.PLAY: "play",
    CommandKind.UPDATE_LIBRARY: "update",
    CommandKind.SAVE: "save",
    CommandKind.SAVE_QUEUE: "save queue",
    CommandKind.DELETE: "delete",
    CommandKind.BACK: "back",
    CommandKind.HELP: "help",
    CommandKind.RELOAD_CONFIG: "reload",
    CommandKind.INSERT: "insert",
    CommandKind.LOGOUT: "logout",
}

_EXTREME_NAMES = {
    MoveMode.UP: "top",
    MoveMode.DOWN: "bottom",
    MoveMode.LEFT: "leftmost",
    MoveMode.RIGHT: "rightmost",
}


class Command:
    """A command with its kind and arguments.

    Arguments by kind: FOCUS (tab), SEEK (SeekDirection), VOLUME_UP/DOWN
    (amount), REPEAT (RepeatSetting or None), SHUFFLE (bool or None),
    SHARE/OPEN (TargetMode), GOTO (GotoMode), MOVE (MoveMode, MoveAmount),
    SHIFT (ShiftMode, int or None), SEARCH (term), JUMP (JumpMode, query or
    None), INSERT (url or None), NEW_PLAYLIST (name), SORT (SortKey,
    SortDirection).
    """

    __slots__ = ("kind", "args")

    def __init__(self, kind: CommandKind, *args) -> None:
        self.kind = kind
        self.args = tuple(args)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Command):
            return NotImplemented
        return self.kind == other.kind and self.args == other.args

    def __hash__(self) -> int:
        return hash((self.kind, self.args))

    def __repr__(self) -> str:
        inner = ", ".join([self.kind.name, *map(repr, self.args)])
        return f"Command({inner})"

    def __str__(self) -> str:
        plain = _PLAIN_NAMES.get(self.kind)
        if plain is not None:
            return plain
        args = self.args
        match self.kind:
            case CommandKind.FOCUS:
                return f"focus {args[0]}"
            case CommandKind.SEEK:
                return f"seek {args[0]}"
            case CommandKind.VOLUME_UP:
                return f"volup {args[0]}"
            case CommandKind.VOLUME_DOWN:
                return f"voldown {args[0]}"
            case CommandKind.REPEAT:
                return f"repeat {'' if args[0] is None else args[0]}"
            case CommandKind.SHUFFLE:
                state = {True: "on", False: "off", None: ""}[args[0]]
                return f"shuffle {state}"
            case CommandKind.SHARE:
                return f"share {args[0]}"
            case CommandKind.OPEN:
                return f"open {args[0]}"
            case CommandKind.GOTO:
                return f"goto {args[0]}"
            case CommandKind.MOVE:
                mode, amount = args
                if amount.is_extreme:
                    return f"move {_EXTREME_NAMES.get(mode, '')}"
                if mode is MoveMode.PLAYING:
                    return "move playing"
                return f"move {mode} {amount.steps}"
            case CommandKind.SHIFT:
                mode, amount = args
                return f"shift {mode} {1 if amount is None else amount}"
            case CommandKind.SEARCH:
                return f"search {args[0]}"
            case CommandKind.JUMP:
                return f"jump {args[0]}"
            case CommandKind.NEW_PLAYLIST:
                return f"new playlist {args[0]}"
            case CommandKind.SORT:
                return f"sort {args[0]} {args[1]}"
        raise ValueError(f"unknown command kind {self.kind!r}")


_ALIASES = {
    "q": "quit",
    "x": "quit",
    "pause": "playpause",
    "toggleplay": "playpause",
    "toggleplayback": "playpause",
    "loop": "repeat",
    "1": "foo",
    "2": "bar",
    "3": "baz",
}


def resolve_alias(name: str) -> str:
    """Follow aliases until a name that is not an alias is reached."""
    while name in _ALIASES:
        name = _ALIASES[name]
    return name


_I32 = (-(2**31), 2**31 - 1)
_U32 = (0, 2**32 - 1)
_U16 = (0, 2**16 - 1)
_INTEGER = re.compile(r"[+-]?[0-9]+")


def _parse_int(text: str | None, bounds: tuple[int, int]) -> int | None:
    low, high = bounds
    if text is None or not _INTEGER.fullmatch(text):
        return None
    if low >= 0 and text.startswith("-"):
        return None
    value = int(text)
    return value if low <= value <= high else None


_SIMPLE = {
    "quit": CommandKind.QUIT,
    "playpause": CommandKind.TOGGLE_PLAY,
    "stop": CommandKind.STOP,
    "previous": CommandKind.PREVIOUS,
    "next": CommandKind.NEXT,
    "clear": CommandKind.CLEAR,
    "playnext": CommandKind.PLAY_NEXT,
    "queue": CommandKind.QUEUE,
    "play": CommandKind.PLAY,
    "update": CommandKind.UPDATE_LIBRARY,
    "delete": CommandKind.DELETE,
    "back": CommandKind.BACK,
    "help": CommandKind.HELP,
    "reload": CommandKind.RELOAD_CONFIG,
    "logout": CommandKind.LOGOUT,
    "noop": CommandKind.NOOP,
}

_TARGETS = {"selected": TargetMode.SELECTED, "current": TargetMode.CURRENT}
_SHIFTS = {"up": ShiftMode.UP, "down": ShiftMode.DOWN}
_GOTOS = {"album": GotoMode.ALBUM, "artist": GotoMode.ARTIST}
_DIRECTIONS = {
    "up": MoveMode.UP,
    "down": MoveMode.DOWN,
    "left": MoveMode.LEFT,
    "right": MoveMode.RIGHT,
}
_EXTREMES = {
    "top": MoveMode.UP,
    "bottom": MoveMode.DOWN,
    "leftmost": MoveMode.LEFT,
    "rightmost": MoveMode.RIGHT,
}
_SHUFFLE = {"on": True, "off": False}
_REPEAT = {
    "list": RepeatSetting.REPEAT_PLAYLIST,
    "playlist": RepeatSetting.REPEAT_PLAYLIST,
    "queue": RepeatSetting.REPEAT_PLAYLIST,
    "track": RepeatSetting.REPEAT_TRACK,
    "once": RepeatSetting.REPEAT_TRACK,
    "none": RepeatSetting.NONE,
    "off": RepeatSetting.NONE,
}
_SORT_KEYS = {
    "title": SortKey.TITLE,
    "duration": SortKey.DURATION,
    "album": SortKey.ALBUM,
    "added": SortKey.ADDED,
    "artist": SortKey.ARTIST,
}
_SORT_DESCENDING = {"d", "desc", "descending"}


def _parse_seek(arg: str | None) -> Command | None:
    if arg is None:
        return None
    if arg[:1] in ("-", "+"):
        amount = _parse_int(arg[1:], _I32)
        if amount is None:
            return None
        sign = -1 if arg[0] == "-" else 1
        return Command(CommandKind.SEEK, SeekDirection(amount * sign, relative=True))
    position = _parse_int(arg, _U32)
    if position is None:
        return None
    return Command(CommandKind.SEEK, SeekDirection(position, relative=False))


def _parse_move(first: str | None, second: str | None) -> Command | None:
    if first == "playing":
        return Command(CommandKind.MOVE, MoveMode.PLAYING, MoveAmount())
    if first in _EXTREMES:
        return Command(CommandKind.MOVE, _EXTREMES[first], MoveAmount.extreme())
    mode = _DIRECTIONS.get(first)
    if mode is None:
        return None
    steps = _parse_int(second, _I32)
    amount = MoveAmount() if steps is None else MoveAmount(steps)
    return Command(CommandKind.MOVE, mode, amount)


def _parse_sort(first: str | None, second: str | None) -> Command | None:
    key = _SORT_KEYS.get(first)
    if key is None:
        return None
    direction = (
        SortDirection.DESCENDING if second in _SORT_DESCENDING else SortDirection.ASCENDING
    )
    return Command(CommandKind.SORT, key, direction)


def parse(text: str) -> Command | None:
    """Parse a command line; return ``None`` when it names no valid command."""
    name, *args = text.strip().split(" ")
    name = resolve_alias(name)
    first = args[0] if args else None
    second = args[1] if len(args) > 1 else None

    kind = _SIMPLE.get(name)
    if kind is not None:
        return Command(kind)

    match name:
        case "open" | "share":
            target = _TARGETS.get(first)
            if target is None:
                return None
            return Command(CommandKind.OPEN if name == "open" else CommandKind.SHARE, target)
        case "jump":
            return Command(CommandKind.JUMP, JumpMode.QUERY, " ".join(args))
        case "search":
            return Command(CommandKind.SEARCH, " ".join(args))
        case "shift":
            mode = _SHIFTS.get(first)
            if mode is None:
                return None
            return Command(CommandKind.SHIFT, mode, _parse_int(second, _I32))
        case "move":
            return _parse_move(first, second)
        case "goto":
            mode = _GOTOS.get(first)
            return None if mode is None else Command(CommandKind.GOTO, mode)
        case "shuffle":
            return Command(CommandKind.SHUFFLE, _SHUFFLE.get(first))
        case "repeat":
            return Command(CommandKind.REPEAT, _REPEAT.get(first))
        case "seek":
            return _parse_seek(first)
        case "focus":
            return None if first is None else Command(CommandKind.FOCUS, first)
        case "save":
            return Command(CommandKind.SAVE_QUEUE if first == "queue" else CommandKind.SAVE)
        case "volup" | "voldown":
            amount = _parse_int(first, _U16)
            kind = CommandKind.VOLUME_UP if name == "volup" else CommandKind.VOLUME_DOWN
            return Command(kind, 1 if amount is None else amount)
        case "insert":
            return Command(CommandKind.INSERT, first)
        case "newplaylist":
            return Command(CommandKind.NEW_PLAYLIST, " ".join(args)) if args else None
        case "sort":
            return _parse_sort(first, second)
    return None