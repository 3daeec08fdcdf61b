# tests/test_debounce.py

import threading

from core.debounce import DebouncedWriter


def _make_writer(timer_factory, sink=None, delay_ms=500):
    writes = []

    def record(key, payload):
        writes.append((key, payload))

    return DebouncedWriter(sink or record, delay_ms, timer_factory), writes


def test_three_rapid_edits_produce_one_write_with_latest_value(timer_factory):
    writer, writes = _make_writer(timer_factory)
    state = {"Math": None}

    for value in (12, 14, 17):
        state["Math"] = value
        writer.schedule("marks/s1", lambda: dict(state))

    assert writes == []
    assert len(timer_factory.live) == 1

    timer_factory.fire_all()

    assert writes == [("marks/s1", {"Math": 17})]
    assert not writer.has_pending()


def test_superseded_timer_does_not_write(timer_factory):
    writer, writes = _make_writer(timer_factory)

    writer.schedule("marks/s1", lambda: 1)
    writer.schedule("marks/s1", lambda: 2)

    stale = timer_factory.timers[0]
    assert stale.cancelled

    # a timer that slipped past cancel must not write the old payload
    stale.callback()

    assert writes == []
    assert writer.has_pending("marks/s1")


def test_keys_are_debounced_independently(timer_factory):
    writer, writes = _make_writer(timer_factory)

    writer.schedule("marks/s1", lambda: "a")
    writer.schedule("marks/s2", lambda: "b")

    assert sorted(writer.pending_keys()) == ["marks/s1", "marks/s2"]

    timer_factory.fire_all()

    assert sorted(writes) == [("marks/s1", "a"), ("marks/s2", "b")]


def test_delay_is_passed_to_timer_in_seconds(timer_factory):
    writer, _ = _make_writer(timer_factory, delay_ms=250)

    writer.schedule("k", lambda: None)
    writer.schedule("j", lambda: None, delay_ms=1000)

    assert [t.delay for t in timer_factory.timers] == [0.25, 1.0]


def test_flush_writes_pending_immediately(timer_factory):
    writer, writes = _make_writer(timer_factory)

    writer.schedule("marks/s1", lambda: "a")
    writer.schedule("marks/s2", lambda: "b")

    assert writer.flush("marks/s1") == 1
    assert writes == [("marks/s1", "a")]

    assert writer.flush() == 1
    assert writes[-1] == ("marks/s2", "b")
    assert timer_factory.live == []


def test_cancel_all_drops_pending_writes(timer_factory):
    writer, writes = _make_writer(timer_factory)

    writer.schedule("marks/s1", lambda: "a")
    writer.schedule("comments/s1", lambda: "b")

    assert writer.cancel_all() == 2
    assert timer_factory.fire_all() == 0
    assert writes == []


def test_cancel_single_key(timer_factory):
    writer, writes = _make_writer(timer_factory)

    writer.schedule("marks/s1", lambda: "a")

    assert writer.cancel("marks/s1")
    assert not writer.cancel("marks/s1")


def test_failed_write_is_logged_and_swallowed(timer_factory, caplog):
    def failing_sink(key, payload):
        raise OSError("disk full")

    writer, _ = _make_writer(timer_factory, sink=failing_sink)

    writer.schedule("marks/s1", lambda: "a")
    timer_factory.fire_all()

    assert "marks/s1" in caplog.text
    assert not writer.has_pending()


def test_close_flushes_and_ignores_later_schedules(timer_factory):
    writer, writes = _make_writer(timer_factory)

    writer.schedule("marks/s1", lambda: "a")
    writer.close(flush=True)
    writer.schedule("marks/s1", lambda: "b")

    assert writer.is_closed
    assert writes == [("marks/s1", "a")]
    assert not writer.has_pending()


def test_close_without_flush_discards(timer_factory):
    writer, writes = _make_writer(timer_factory)

    writer.schedule("marks/s1", lambda: "a")
    writer.close()
    timer_factory.fire_all()

    assert writes == []


def test_default_timer_factory_writes_after_delay():
    done = threading.Event()
    writes = []

    def sink(key, payload):
        writes.append((key, payload))
        done.set()

    writer = DebouncedWriter(sink, delay_ms=200)
    writer.schedule("marks/s1", lambda: 1)
    writer.schedule("marks/s1", lambda: 2)

    assert done.wait(timeout=5)
    assert writes == [("marks/s1", 2)]
