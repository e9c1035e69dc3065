import pytest

from cognitypin.scheduler import ManualClock, Scheduler


def test_call_later_fires_once_when_due(scheduler):
    calls = []
    scheduler.call_later(0.3, lambda: calls.append("x"))
    assert scheduler.advance(0.2) == 0
    assert scheduler.advance(0.1) == 1
    assert scheduler.advance(5) == 0
    assert calls == ["x"]


def test_cancelled_task_never_fires(scheduler):
    calls = []
    handle = scheduler.call_later(1, lambda: calls.append("x"))
    handle.cancel()
    handle.cancel()  # idempotent
    scheduler.advance(2)
    assert calls == []
    assert scheduler.pending == 0


def test_call_every_repeats(scheduler):
    calls = []
    scheduler.call_every(1.0, lambda: calls.append(scheduler.now()))
    for _ in range(3):
        scheduler.advance(1.0)
    assert calls == [1.0, 2.0, 3.0]


def test_missed_periods_fire_once_and_keep_cadence(scheduler):
    calls = []
    scheduler.call_every(1.0, lambda: calls.append(scheduler.now()))
    scheduler.advance(10.5)
    assert calls == [10.5]
    scheduler.advance(0.5)
    assert calls == [10.5, 11.0]


def test_periodic_task_can_cancel_itself(scheduler):
    calls = []

    def tick():
        calls.append(1)
        handle.cancel()

    handle = scheduler.call_every(1.0, tick)
    scheduler.advance(1)
    scheduler.advance(1)
    assert calls == [1]


def test_due_order(scheduler):
    calls = []
    scheduler.call_later(2, lambda: calls.append("late"))
    scheduler.call_later(1, lambda: calls.append("early"))
    scheduler.advance(3)
    assert calls == ["early", "late"]


def test_call_every_rejects_non_positive_interval(scheduler):
    with pytest.raises(ValueError):
        scheduler.call_every(0, lambda: None)


def test_manual_clock():
    clock = ManualClock(start=5.0)
    clock.advance(1.5)
    assert clock() == 6.5
    assert Scheduler(clock).now() == 6.5


def test_periodic_task_survives_a_failing_callback(scheduler):
    calls = []

    def tick():
        calls.append(scheduler.now())
        if len(calls) == 1:
            raise RuntimeError("boom")

    scheduler.call_every(1.0, tick)
    with pytest.raises(RuntimeError):
        scheduler.advance(1.0)
    assert scheduler.pending == 1
    scheduler.advance(1.0)
    assert calls == [1.0, 2.0]
