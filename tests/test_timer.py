import pytest

from d3_svg_math.errors import ConfigurationError
from d3_svg_math.timer import TimerQueue, Transition, transition


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def queue(clock):
    return TimerQueue(clock)


def test_timer_fires_once_due(clock, queue):
    calls = []
    t = queue.timer(calls.append, delay=10)
    assert t.time == 10
    clock.now = 5
    assert queue.flush() == 0
    clock.now = 15
    assert queue.flush() == 1
    assert calls == [5]
    t.stop()
    assert len(queue) == 0
    clock.now = 20
    assert queue.flush() == 0


def test_timeout_runs_once_with_total_elapsed(clock, queue):
    calls = []
    queue.timeout(calls.append, delay=10)
    clock.now = 12
    queue.flush()
    clock.now = 30
    queue.flush()
    assert calls == [12]
    assert len(queue) == 0


def test_interval_repeats(clock, queue):
    calls = []
    queue.interval(calls.append, delay=10)
    for now in (10, 25):
        clock.now = now
        queue.flush()
    assert calls == [10, 25]
    assert len(queue) == 1


def test_timer_requires_callable(queue):
    with pytest.raises(ConfigurationError):
        queue.timer("not callable")


def test_transition_value_at_clamps():
    tr = transition(0, 100, duration=100, ease="linear")
    assert tr.value_at(-10) == 0
    assert tr.value_at(50) == pytest.approx(50)
    assert tr.value_at(500) == 100
    assert tr.done(100)
    assert not tr.done(99)


def test_transition_delay_shifts_progress():
    tr = transition(0, 10, duration=100, delay=50, ease="linear")
    assert tr.progress(50) == 0
    assert tr.progress(100) == pytest.approx(0.5)


def test_named_tweens():
    tr = Transition(duration=100, ease="linear").attr("x", 0, 10).attr("opacity", 1, 0)
    assert tr.value_at(50) == pytest.approx({"x": 5, "opacity": 0.5})
    assert "x" not in tr.tween("x", None).value_at(50)


def test_transition_is_copy_on_configure():
    base = Transition()
    slow = base.duration(1000)
    assert base.duration() == 250
    assert slow.duration() == 1000
    assert slow.delay(10).delay() == 10
    with pytest.raises(ConfigurationError):
        Transition(duration=-1)


def test_schedule_drives_transition(clock, queue):
    values = []
    transition(0, 100, duration=100, ease="linear").schedule(queue, values.append)
    for now in (50, 150, 200):
        clock.now = now
        queue.flush()
    assert values == [pytest.approx(50), 100]
    assert len(queue) == 0
