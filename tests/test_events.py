from spotterm.events import EventManager, QueueEvent, SessionDied


def test_drain_yields_in_order():
    events = EventManager()
    events.send(QueueEvent.PRELOAD_TRACK_REQUEST)
    events.send(SessionDied())
    assert list(events.drain()) == [QueueEvent.PRELOAD_TRACK_REQUEST, SessionDied()]


def test_drain_empties_channel():
    events = EventManager()
    events.send(SessionDied())
    list(events.drain())
    assert list(events.drain()) == []


def test_send_triggers_callback():
    calls = []
    events = EventManager(lambda: calls.append(True))
    events.send(SessionDied())
    events.send(SessionDied())
    events.trigger()
    assert len(calls) == 3


def test_events_sent_while_draining_are_seen():
    events = EventManager()
    events.send("first")
    seen = []
    for event in events.drain():
        seen.append(event)
        if event == "first":
            events.send("second")
    assert seen == ["first", "second"]