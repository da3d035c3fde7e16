import pytest

from neet_mock_test.services.countdown_timer import CountdownTimer, TimerState


def _timer(scheduler, calls):
    return CountdownTimer(lambda: calls.append("submit"), scheduler=scheduler)


def test_expires_after_duration_ticks(scheduler):
    calls = []
    timer = _timer(scheduler, calls)
    timer.start(3)
    assert timer.state is TimerState.RUNNING
    assert scheduler.interval == 1.0

    scheduler.fire(2)
    assert timer.remaining == 1
    assert calls == []

    scheduler.fire()
    assert timer.state is TimerState.EXPIRED
    assert timer.remaining == 0
    assert calls == ["submit"]
    assert scheduler.handle.cancelled


def test_extra_ticks_after_expiry_do_nothing(scheduler):
    calls = []
    timer = _timer(scheduler, calls)
    timer.start(2)
    scheduler.fire(5)
    assert calls == ["submit"]
    assert timer.remaining == 0


def test_cancel_prevents_expiry(scheduler):
    calls = []
    timer = _timer(scheduler, calls)
    timer.start(3)
    scheduler.fire()
    timer.cancel()
    assert timer.state is TimerState.CANCELLED
    assert scheduler.handle.cancelled

    scheduler.fire(10)
    assert calls == []
    assert timer.remaining == 2


def test_cancel_is_idempotent(scheduler):
    calls = []
    timer = _timer(scheduler, calls)
    timer.cancel()
    assert timer.state is TimerState.IDLE

    timer.start(1)
    scheduler.fire()
    timer.cancel()
    assert timer.state is TimerState.EXPIRED
    assert timer.is_terminal


def test_start_only_from_idle(scheduler):
    timer = _timer(scheduler, [])
    timer.start(10)
    with pytest.raises(RuntimeError):
        timer.start(10)


def test_start_rejects_non_positive_duration(scheduler):
    timer = _timer(scheduler, [])
    with pytest.raises(ValueError):
        timer.start(0)
    assert timer.state is TimerState.IDLE


def test_records_start_instant(scheduler, clock):
    timer = CountdownTimer(lambda: None, scheduler=scheduler, clock=clock)
    timer.start(60)
    assert timer.started_at == clock.now
