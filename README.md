# spotterm

The engine behind a keyboard-driven terminal music and podcast player.
It has no user interface of its own. It provides the parts that such an
interface is built on.

- **A command language.** `spotterm.command.parse` turns a line such as
  `seek +5000`, `move top`, `sort title desc` or `repeat track` into a
  `Command`, or returns `None`. `str(command)` gives back the canonical
  text. `resolve_alias` resolves aliases such as `q`, `pause` and `loop`.
- **Key bindings.** `spotterm.keybindings.default_keybindings` returns the
  built-in key map. `get_bindings` merges in the bindings from the
  configuration values. `parse_key` and `parse_keybinding` turn strings
  such as `Shift+p`, `Ctrl+s` or `PageDown` into `KeyEvent` values.
- **A play queue.** `spotterm.queue.Queue` supports these operations:
  `insert_after_current`, `append`, `append_next`, `remove`, `shift`,
  `clear`, `play`, `next`, `previous` and `toggleplayback`. It also
  provides shuffle with a kept random order (`set_shuffle`,
  `random_order`) and the repeat modes of `RepeatSetting`: off, playlist
  and track.
- **Player state.** `spotterm.player.Player` does these things:
  - keeps the playback status (`Playing`, `Paused`, `Stopped`,
    `FinishedTrack`) and the elapsed progress;
  - seeks to an absolute position or relative to the current one;
  - stores the volume in the user state.

  It does no audio work itself. Every request goes as a tuple to a
  backend callable that you supply, for example `("load", item,
  start_playing, position_ms)`, `("seek", ms)` or `("set_volume",
  scaled)`. The volume is scaled with `log_scale`. Without a backend,
  requests are logged and dropped. `UriType.from_uri` classifies
  `spotify:` URIs.
- **Configuration and saved state.** `spotterm.config.Config` reads a TOML
  configuration file into `ConfigValues`. It keeps a `UserState` in a
  CBOR file. The user state holds the volume, shuffle, repeat, the saved
  queue and the playlist sort orders.
- **File formats.** `spotterm.serialization` holds the `TOML` and `CBOR`
  serializers that the configuration uses. Errors are raised as
  `SerializationError`.
- **Events.** `spotterm.events.EventManager` is a thread-safe, unbounded
  event channel. `send` queues an event and calls an optional wake-up
  callback. `drain` yields the pending events without blocking.
  `Queue.handle_event` answers `QueueEvent.PRELOAD_TRACK_REQUEST` by
  asking the player to preload the next item.
- **Podcasts.** `spotterm.episode.Episode` and `spotterm.show.Show` are
  built from web API objects with `from_api`. They provide display
  strings and share URLs. `Show.play`, `Show.play_next` and `Show.queue`
  put a show's episodes into a `Queue`. They take a function that returns
  the episodes for a show id.

## Parsing commands

```python
from spotterm.command import parse, resolve_alias

print(parse("seek -1000"))      # seek -1000
print(parse("sort artist d"))   # sort artist descending
print(parse("nonsense"))        # None
print(resolve_alias("q"))       # quit
```

## Key bindings

```python
from spotterm.keybindings import default_keybindings, parse_keybinding

bindings = default_keybindings()
print(bindings["Shift+p"])          # playpause

event = parse_keybinding("Ctrl+s")  # KeyEvent(key='s', modifier='ctrl')
```

Custom bindings come from the `keybindings` table of the configuration
file. Set `default_keybindings = false` to start from an empty map.

```toml
default_keybindings = true
use_nerdfont = false
shuffle = false
repeat = "off"

[keybindings]
"Shift+q" = "quit"
"g" = "move top"
"G" = "move bottom"
```

A custom binding whose command does not parse is logged and left out.

## Queue and player together

```python
from spotterm.config import Config, set_base_path
from spotterm.episode import Episode
from spotterm.player import Player
from spotterm.queue import Queue

set_base_path("/tmp/spotterm-demo")
config = Config("config.toml")

requests = []
player = Player(requests.append, config)
queue = Queue(player, config)

queue.append(Episode("e1", "spotify:episode:e1", 90_000, "Pilot", "", "2020-01-01"))
queue.play(0, False, False)
print(requests[-1][0])              # load
```

## Configuration files

`Config("config.toml")` reads `config.toml` from the platform's user
configuration directory. If you have called `set_base_path(path)`, it
reads from `path/.config` instead. If the file is missing, an empty
default file is written first. A `shuffle` or `repeat` setting in the
file overrides the one in the saved state.

The user state is loaded from `userstate.cbor` in the same directory. If
that file is missing or cannot be read, it is regenerated with defaults.
`Config.save_state()` writes the current state.
`Config.reload()` reads the configuration file again.
`cache_path(name)` gives a path in the cache directory, and creates that
directory if needed.

## What this package does not do

- It does not stream or decode audio.
- It does not log in to a music service.
- It does not call any web API.
- It does not draw a terminal interface.
- It has no track, album, artist or playlist library. Queue items are
  whatever objects you put in. Only `Episode` objects and plain mappings
  can be stored in the saved queue.
- It does not act on parsed commands. It provides no program to run.
  Wiring commands and key events to the queue and the player is up to
  the application that uses it.