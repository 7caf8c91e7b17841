"""The play queue: ordering, shuffling, repeating and stepping through items."""

import logging
import random
import threading
from collections.abc import Iterable, Iterator
from datetime import timedelta
from typing import Any

from spotterm.command import RepeatSetting
from spotterm.events import QueueEvent
from spotterm.player import Paused, Playing, Stopped

log = logging.getLogger(__name__)


class Queue:
    """Items waiting to be played, the current position and an optional shuffle order.

    ``player`` receives the load, stop, pause, seek and preload requests;
    ``config`` provides the user state holding the repeat and shuffle
    settings and the queue restored from the last run.
    """

    def __init__(self, player: Any, config: Any) -> None:
        self._player = player
        self._config = config
        self._lock = threading.RLock()
        state = config.state().queuestate
        self._items: list[Any] = list(state.queue)
        self._current: int | None = state.current_track
        self._order: list[int] | None = (
            None if state.random_order is None else list(state.random_order)
        )

        item = self.current()
        if item is not None:
            progress_ms = state.track_progress // timedelta(milliseconds=1)
            player.load(item, False, progress_ms)
            player.update_track()
            player.pause()
            player.seek(progress_ms)

    @property
    def player(self) -> Any:
        return self._player

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __iter__(self) -> Iterator[Any]:
        with self._lock:
            return iter(list(self._items))

    def __getitem__(self, index: int) -> Any:
        with self._lock:
            return self._items[index]

    def next_index(self) -> int | None:
        """Index of the item that follows the current one in play order."""
        with self._lock:
            if self._current is None:
                return None
            position = self._current
            if self._order is not None:
                position = self._order.index(position)
            following = position + 1
            if following >= len(self._items):
                return None
            return self._order[following] if self._order is not None else following

    def previous_index(self) -> int | None:
        """Index of the item before the current one in play order."""
        with self._lock:
            if self._current is None:
                return None
            position = self._current
            if self._order is not None:
                position = self._order.index(position)
            if position == 0:
                return None
            preceding = position - 1
            return self._order[preceding] if self._order is not None else preceding

    def current(self) -> Any | None:
        with self._lock:
            if self._current is None:
                return None
            return self._items[self._current]

    def current_index(self) -> int | None:
        with self._lock:
            return self._current

    def insert_after_current(self, item: Any) -> None:
        """Put ``item`` right after the current one, or at the end if nothing plays."""
        with self._lock:
            index = self._current
            if index is None:
                self.append(item)
                return
            if self._order is not None:
                position = self._order.index(index)
                self._order = [i + 1 if i > index else i for i in self._order]
                self._order.insert(position + 1, index + 1)
            self._items.insert(index + 1, item)

    def append(self, item: Any) -> None:
        with self._lock:
            if self._order is not None:
                self._order.append(max(len(self._order) - 1, 0))
            self._items.append(item)

    def append_next(self, items: Iterable[Any]) -> int:
        """Insert ``items`` after the current item and return the index of the first."""
        items = list(items)
        with self._lock:
            length = len(self._items)
            if self._order is not None:
                self._order.extend(range(max(length - 1, 0), length + len(items)))
            first = length if self._current is None else self._current + 1
            self._items[first:first] = items
            return first

    def remove(self, index: int) -> None:
        """Remove the item at ``index``, keeping playback consistent."""
        with self._lock:
            if not self._items:
                log.info("queue is empty")
                return
            del self._items[index]

            length = len(self._items)
            if length == 0:
                self.stop()
                return

            current = self._current
            if current is not None:
                if current == index:
                    if current == length:
                        if self.repeat() is RepeatSetting.REPEAT_PLAYLIST:
                            self.next(False)
                        else:
                            self.stop()
                    else:
                        self.play(index, False, False)
                elif current > index:
                    self._current = current - 1

            if self.shuffle():
                self._generate_random_order()

    def clear(self) -> None:
        with self._lock:
            self.stop()
            self._items.clear()
            if self._order is not None:
                self._order.clear()

    def shift(self, from_index: int, to_index: int) -> None:
        """Move the item at ``from_index`` to ``to_index``."""
        with self._lock:
            item = self._items.pop(from_index)
            self._items.insert(to_index, item)
            current = self._current
            if current is None:
                return
            if current == from_index:
                self._current = to_index
            elif current == to_index and from_index > current:
                self._current = to_index + 1
            elif current == to_index and from_index < current:
                self._current = to_index - 1

    def play(self, index: int, reshuffle: bool, shuffle_index: bool) -> None:
        """Start playing the item at ``index``.

        With ``shuffle_index`` and shuffle on, a random item is chosen instead;
        with ``reshuffle`` and shuffle on, a new random order is drawn.
        """
        with self._lock:
            if shuffle_index and self.shuffle():
                index = random.randrange(len(self._items))
            if 0 <= index < len(self._items):
                self._player.load(self._items[index], True, 0)
                self._current = index
                self._player.update_track()
            if reshuffle and self.shuffle():
                self._generate_random_order()

    def toggleplayback(self) -> None:
        match self._player.status():
            case Playing() | Paused():
                self._player.toggleplayback()
            case Stopped():
                if self.next_index() is not None:
                    self.next(False)
                else:
                    self.play(0, False, False)

    def stop(self) -> None:
        with self._lock:
            self._current = None
        self._player.stop()

    def next(self, manual: bool) -> None:
        """Advance to the next item; ``manual`` is true when the user asked for it."""
        with self._lock:
            current = self._current
            repeat = self.repeat()
            if repeat is RepeatSetting.REPEAT_TRACK and not manual:
                if current is not None:
                    self.play(current, False, False)
                return
            following = self.next_index()
            if following is not None:
                self.play(following, False, False)
                if repeat is RepeatSetting.REPEAT_TRACK and manual:
                    self.set_repeat(RepeatSetting.REPEAT_PLAYLIST)
            elif repeat is RepeatSetting.REPEAT_PLAYLIST and self._items:
                first = self._order[0] if self._order is not None else 0
                self.play(first, False, False)
            else:
                self._player.stop()

    def previous(self) -> None:
        """Go back to the previous item, wrapping around when repeating the list."""
        with self._lock:
            current = self._current
            preceding = self.previous_index()
            if preceding is not None:
                self.play(preceding, False, False)
            elif self.repeat() is RepeatSetting.REPEAT_PLAYLIST and self._items:
                last = len(self._items) - 1
                if self.shuffle():
                    last = self._order[last] if self._order is not None else 0
                self.play(last, False, False)
            elif current is not None:
                self.play(current, False, False)

    def repeat(self) -> RepeatSetting:
        return self._config.state().repeat

    def set_repeat(self, setting: RepeatSetting) -> None:
        with self._config.state_mut() as state:
            state.repeat = setting

    def shuffle(self) -> bool:
        return self._config.state().shuffle

    def set_shuffle(self, enabled: bool) -> None:
        with self._config.state_mut() as state:
            state.shuffle = enabled
        with self._lock:
            if enabled:
                self._generate_random_order()
            else:
                self._order = None

    def random_order(self) -> list[int] | None:
        with self._lock:
            return None if self._order is None else list(self._order)

    def _generate_random_order(self) -> None:
        with self._lock:
            remaining = list(range(len(self._items)))
            order: list[int] = []
            if self._current is not None:
                order.append(self._current)
                remaining.remove(self._current)
            random.shuffle(remaining)
            order.extend(remaining)
            self._order = order

    def handle_event(self, event: QueueEvent) -> None:
        if event is QueueEvent.PRELOAD_TRACK_REQUEST:
            with self._lock:
                following = self.next_index()
                if following is None:
                    return
                item = self._items[following]
            log.debug("Preloading track %s as requested by the player", item)
            self._player.preload(item)