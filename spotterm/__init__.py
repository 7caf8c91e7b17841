"""Command language, key bindings, play queue, player state and saved configuration for a terminal music player."""

__version__ = "0.1.0"

__all__ = [
    "command",
    "config",
    "episode",
    "events",
    "keybindings",
    "player",
    "queue",
    "serialization",
    "show",
]