from contextlib import contextmanager
from datetime import timedelta

import pytest

from spotterm.command import RepeatSetting
from spotterm.config import QueueState, UserState
from spotterm.episode import Episode
from spotterm.events import QueueEvent
from spotterm.player import Paused, Player, Playing, Stopped
from spotterm.queue import Queue


class FakeConfig:
    def __init__(self, state):
        self._state = state

    def state(self):
        return self._state

    @contextmanager
    def state_mut(self):
        yield self._state


def episode(i):
    return Episode(
        id=f"e{i}",
        uri=f"spotify:episode:e{i}",
        duration=1000,
        name=f"ep{i}",
        description="",
        release_date="2020-01-01",
    )


def make_queue(count=0, current=None, repeat=RepeatSetting.NONE, shuffle=False, progress=None):
    items = [episode(i) for i in range(count)]
    state = UserState(
        repeat=repeat,
        shuffle=shuffle,
        queuestate=QueueState(
            current_track=current,
            queue=list(items),
            track_progress=progress or timedelta(),
        ),
    )
    config = FakeConfig(state)
    commands = []
    player = Player(commands.append, config)
    queue = Queue(player, config)
    return queue, commands, config, player, items


def test_restores_state_and_seeks_to_progress():
    queue, commands, _, _, items = make_queue(3, current=1, progress=timedelta(seconds=2.5))
    assert queue.current() == items[1]
    assert ("load", items[1], False, 2500) in commands
    assert commands[-2:] == [("pause",), ("seek", 2500)]


def test_append_next_without_current_appends_at_end():
    queue, _, _, _, items = make_queue(2)
    new = [episode(10), episode(11)]
    first = queue.append_next(new)
    assert first == 2
    assert list(queue) == items + new


def test_append_next_inserts_after_current():
    queue, _, _, _, items = make_queue(3, current=0)
    new = [episode(10), episode(11)]
    first = queue.append_next(new)
    assert first == 1
    assert list(queue) == [items[0], *new, items[1], items[2]]


def test_next_and_previous_index_without_shuffle():
    queue, _, _, _, _ = make_queue(3, current=1)
    assert queue.next_index() == 2
    assert queue.previous_index() == 0


def test_indices_at_edges_are_none():
    queue, _, _, _, _ = make_queue(3, current=2)
    assert queue.next_index() is None
    queue.play(0, False, False)
    assert queue.previous_index() is None
    empty, _, _, _, _ = make_queue(0)
    assert empty.next_index() is None


def test_play_loads_item_and_sets_current():
    queue, commands, _, _, items = make_queue(3)
    commands.clear()
    queue.play(2, False, False)
    assert queue.current_index() == 2
    assert commands == [("load", items[2], True, 0)]


def test_play_out_of_range_does_nothing():
    queue, commands, _, _, _ = make_queue(2)
    commands.clear()
    queue.play(5, False, False)
    assert queue.current_index() is None
    assert commands == []


def test_next_at_end_without_repeat_stops():
    queue, commands, _, _, _ = make_queue(2, current=1)
    commands.clear()
    queue.next(False)
    assert commands == [("stop",)]


def test_next_with_repeat_playlist_wraps():
    queue, commands, _, _, items = make_queue(2, current=1, repeat=RepeatSetting.REPEAT_PLAYLIST)
    commands.clear()
    queue.next(False)
    assert queue.current_index() == 0
    assert commands == [("load", items[0], True, 0)]


def test_next_with_repeat_track_replays_current():
    queue, commands, _, _, items = make_queue(3, current=1, repeat=RepeatSetting.REPEAT_TRACK)
    commands.clear()
    queue.next(False)
    assert queue.current_index() == 1
    assert commands == [("load", items[1], True, 0)]


def test_manual_next_with_repeat_track_switches_to_playlist():
    queue, _, _, _, _ = make_queue(3, current=1, repeat=RepeatSetting.REPEAT_TRACK)
    queue.next(True)
    assert queue.current_index() == 2
    assert queue.repeat() is RepeatSetting.REPEAT_PLAYLIST


def test_previous_at_start_replays_current():
    queue, _, _, _, _ = make_queue(3, current=0)
    queue.previous()
    assert queue.current_index() == 0


def test_previous_at_start_with_repeat_playlist_goes_to_last():
    queue, _, _, _, _ = make_queue(3, current=0, repeat=RepeatSetting.REPEAT_PLAYLIST)
    queue.previous()
    assert queue.current_index() == 2


def test_remove_current_plays_item_now_at_same_index():
    queue, _, _, _, items = make_queue(3, current=1)
    queue.remove(1)
    assert len(queue) == 2
    assert queue.current() == items[2]


def test_remove_before_current_shifts_current():
    queue, _, _, _, items = make_queue(3, current=2)
    queue.remove(0)
    assert queue.current_index() == 1
    assert queue.current() == items[2]


def test_remove_last_playing_stops():
    queue, commands, _, _, _ = make_queue(3, current=2)
    commands.clear()
    queue.remove(2)
    assert queue.current_index() is None
    assert commands == [("stop",)]


def test_remove_last_playing_with_repeat_playlist_wraps():
    queue, _, _, _, items = make_queue(3, current=2, repeat=RepeatSetting.REPEAT_PLAYLIST)
    queue.remove(2)
    assert queue.current() == items[0]


def test_remove_from_empty_queue_is_ignored():
    queue, commands, _, _, _ = make_queue(0)
    commands.clear()
    queue.remove(0)
    assert len(queue) == 0
    assert commands == []


def test_shift_moves_current_item():
    queue, _, _, _, items = make_queue(4, current=0)
    queue.shift(0, 2)
    assert queue.current_index() == 2
    assert list(queue) == [items[1], items[2], items[0], items[3]]


def test_shift_onto_current_from_below_moves_current_up():
    queue, _, _, _, items = make_queue(4, current=1)
    queue.shift(3, 1)
    assert queue.current() == items[1]


def test_set_shuffle_draws_permutation_starting_at_current():
    queue, _, config, _, _ = make_queue(5, current=3)
    queue.set_shuffle(True)
    order = queue.random_order()
    assert config.state().shuffle is True
    assert sorted(order) == list(range(5))
    assert order[0] == 3
    assert queue.next_index() == order[1]
    queue.set_shuffle(False)
    assert queue.random_order() is None


def test_insert_after_current_with_shuffle_keeps_order_consistent():
    queue, _, _, _, items = make_queue(3, current=0)
    queue.set_shuffle(True)
    new = episode(9)
    queue.insert_after_current(new)
    order = queue.random_order()
    assert queue[1] == new
    assert sorted(order) == list(range(4))
    assert order[:2] == [0, 1]


def test_insert_after_current_without_current_appends():
    queue, _, _, _, items = make_queue(2)
    new = episode(9)
    queue.insert_after_current(new)
    assert list(queue) == [*items, new]


def test_clear_stops_and_empties():
    queue, commands, _, _, _ = make_queue(3, current=1)
    queue.set_shuffle(True)
    commands.clear()
    queue.clear()
    assert len(queue) == 0
    assert queue.current_index() is None
    assert queue.random_order() == []
    assert commands == [("stop",)]


def test_toggleplayback_when_stopped_starts_first_item():
    queue, _, _, player, items = make_queue(2)
    player.update_status(Stopped())
    queue.toggleplayback()
    assert queue.current() == items[0]


@pytest.mark.parametrize("status,expected", [(Playing(0.0), ("pause",)), (Paused(timedelta()), ("play",))])
def test_toggleplayback_while_active_toggles_player(status, expected):
    queue, commands, _, player, _ = make_queue(2, current=0)
    player.update_status(status)
    commands.clear()
    queue.toggleplayback()
    assert commands == [expected]


def test_preload_request_preloads_next_item():
    queue, commands, _, _, items = make_queue(3, current=0)
    commands.clear()
    queue.handle_event(QueueEvent.PRELOAD_TRACK_REQUEST)
    assert commands == [("preload", items[1])]


def test_play_with_shuffle_index_rejects_empty_queue():
    queue, _, _, _, _ = make_queue(0, shuffle=True)
    with pytest.raises(ValueError):
        queue.play(0, False, True)