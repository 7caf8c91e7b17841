import pytest

from spotterm.command import (
    Command,
    CommandKind,
    MoveAmount,
    MoveMode,
    SeekDirection,
    TargetMode,
)
from spotterm.config import ConfigValues
from spotterm.keybindings import (
    Key,
    KeyEvent,
    default_keybindings,
    get_bindings,
    parse_key,
    parse_keybinding,
)


@pytest.mark.parametrize(
    "name, key",
    [
        ("Enter", Key.ENTER),
        ("Backspace", Key.BACKSPACE),
        ("PageDown", Key.PAGE_DOWN),
        ("F12", Key.F12),
        ("NumpadCenter", Key.NUMPAD_CENTER),
    ],
)
def test_parse_key_special(name, key):
    assert parse_key(name) == KeyEvent(key)


def test_parse_key_space_is_character():
    assert parse_key("Space") == KeyEvent(" ")


def test_parse_key_uses_first_character():
    assert parse_key("abc") == KeyEvent("a")
    assert parse_key("?") == KeyEvent("?")


def test_parse_key_empty_raises():
    with pytest.raises(ValueError):
        parse_key("")


def test_shift_character_becomes_uppercase():
    assert parse_keybinding("Shift+p") == KeyEvent("P")


def test_ctrl_and_alt_characters():
    assert parse_keybinding("Ctrl+s") == KeyEvent("s", "ctrl")
    assert parse_keybinding("Alt+x") == KeyEvent("x", "alt")


def test_modified_special_keys():
    assert parse_keybinding("Shift+Up") == KeyEvent(Key.UP, "shift")
    assert parse_keybinding("Ctrl+Enter") == KeyEvent(Key.ENTER, "ctrl")
    assert parse_keybinding("Alt+F1") == KeyEvent(Key.F1, "alt")


def test_unknown_modifier_gives_none():
    assert parse_keybinding("Meta+a") is None
    assert parse_keybinding("Meta+Up") is None


def test_plus_alone_is_a_character():
    assert parse_keybinding("+") == KeyEvent("+")


def test_plain_binding_matches_parse_key():
    for name in ("q", "Space", "Home", "F3"):
        assert parse_keybinding(name) == parse_key(name)


def test_every_default_binding_parses_to_a_distinct_event():
    events = {description: parse_keybinding(description) for description in default_keybindings()}
    parsed = list(events.values())
    assert None not in parsed
    assert all(parsed.count(event) == 1 for event in parsed)
    assert events["Shift+p"] == KeyEvent("P")
    assert events["Ctrl+s"] == KeyEvent("s", "ctrl")
    assert events["Shift+Down"] == KeyEvent(Key.DOWN, "shift")
    assert events["Space"] == KeyEvent(" ")


def test_default_table_contents():
    bindings = default_keybindings()
    assert bindings["q"] == Command(CommandKind.QUIT)
    assert bindings["f"] == Command(CommandKind.SEEK, SeekDirection(1000, relative=True))
    assert bindings["Shift+b"] == Command(
        CommandKind.SEEK, SeekDirection(-10000, relative=True)
    )
    assert bindings["Home"] == Command(CommandKind.MOVE, MoveMode.UP, MoveAmount.extreme())
    assert bindings["Shift+x"] == Command(CommandKind.SHARE, TargetMode.CURRENT)
    assert str(bindings["PageDown"]) == "move down 5"
    assert str(bindings["]"]) == "volup 5"
    assert "F8" not in bindings


def test_get_bindings_defaults_when_unset():
    assert get_bindings(ConfigValues()) == default_keybindings()


def test_get_bindings_without_defaults():
    values = ConfigValues(default_keybindings=False, keybindings={"y": "quit"})
    assert get_bindings(values) == {"y": Command(CommandKind.QUIT)}


def test_get_bindings_custom_overrides_default():
    values = ConfigValues(keybindings={"q": "noop"})
    bindings = get_bindings(values)
    assert bindings["q"] == Command(CommandKind.NOOP)
    assert len(bindings) == len(default_keybindings())


def test_get_bindings_skips_invalid_commands():
    values = ConfigValues(default_keybindings=False, keybindings={"y": "nonsense", "u": "stop"})
    assert get_bindings(values) == {"u": Command(CommandKind.STOP)}