"""Frame timers and value transitions driven by an injectable clock.

There is no event loop here: a host calls :meth:`TimerQueue.flush` once per
frame, and every timer whose start time has passed is invoked with its
elapsed milliseconds. Tests inject a fake clock to step time deterministically.
"""

import time as _time

import structlog

from . import ease as _ease
from .errors import ConfigurationError
from .interpolate import interpolate as _interpolate

logger = structlog.get_logger(__name__)

_UNSET = object()


def _monotonic_ms():
    return _time.perf_counter() * 1000


class Timer:
    """A scheduled callback; ``callback(elapsed)`` runs on every flush once due."""

    def __init__(self, queue):
        self._queue = queue
        self._callback = None
        self._time = 0.0
        self.active = False

    def restart(self, callback, delay=0.0, time=None):
        if not callable(callback):
            raise ConfigurationError("timer callback must be callable")
        start = self._queue.now() if time is None else float(time)
        self._callback = callback
        self._time = start + float(delay or 0.0)
        if not self.active:
            self.active = True
            self._queue._timers.append(self)
        return self

    def stop(self):
        if self.active:
            self.active = False
            self._callback = None
        return self

    @property
    def time(self):
        """Clock time at which the timer becomes due."""
        return self._time


class TimerQueue:
    """Ordered collection of timers sharing one clock (milliseconds)."""

    def __init__(self, clock=None):
        self._clock = clock or _monotonic_ms
        self._timers = []

    def now(self):
        return float(self._clock())

    def __len__(self):
        return sum(1 for t in self._timers if t.active)

    def timer(self, callback, delay=0.0, time=None):
        return Timer(self).restart(callback, delay, time)

    def timeout(self, callback, delay=0.0, time=None):
        """Invoke ``callback`` once, ``delay`` ms after ``time``; elapsed counts from ``time``."""
        delay = float(delay or 0.0)
        t = Timer(self)

        def once(elapsed):
            t.stop()
            callback(elapsed + delay)

        return t.restart(once, delay, time)

    def interval(self, callback, delay=0.0, time=None):
        """Invoke ``callback`` every ``delay`` ms; a zero delay behaves like :meth:`timer`."""
        delay = float(delay or 0.0)
        t = Timer(self)
        if not delay:
            return t.restart(callback, 0.0, time)
        start = self.now() if time is None else float(time)
        state = {"total": delay}

        def tick(elapsed):
            elapsed += state["total"]
            state["total"] += delay
            t.restart(tick, state["total"], start)
            callback(elapsed)

        return t.restart(tick, delay, start)

    def flush(self):
        """Run every due timer once; returns the number of callbacks invoked."""
        now = self.now()
        fired = 0
        for t in list(self._timers):
            if t.active and now >= t._time:
                fired += 1
                t._callback(now - t._time)
        self._timers = [t for t in self._timers if t.active]
        return fired


class Transition:
    """Eased interpolation of one or more named values over time.

    Configuration methods return a modified copy. ``value_at(elapsed)``
    evaluates the transition at ``elapsed`` ms after its start, clamping to
    the end values once ``delay + duration`` has passed.
    """

    def __init__(self, duration=250.0, delay=0.0, ease=_ease.ease_cubic_in_out, tweens=None):
        if duration < 0 or delay < 0:
            raise ConfigurationError("transition duration and delay must be non-negative")
        self._duration = float(duration)
        self._delay = float(delay)
        self._ease = _ease.get_ease(ease) if isinstance(ease, str) else ease
        self._tweens = dict(tweens or {})

    def _derive(self, **changes):
        params = {
            "duration": self._duration,
            "delay": self._delay,
            "ease": self._ease,
            "tweens": self._tweens,
        }
        params.update(changes)
        return Transition(**params)

    def duration(self, value=_UNSET):
        if value is _UNSET:
            return self._duration
        return self._derive(duration=value)

    def delay(self, value=_UNSET):
        if value is _UNSET:
            return self._delay
        return self._derive(delay=value)

    def ease(self, value=_UNSET):
        if value is _UNSET:
            return self._ease
        return self._derive(ease=value)

    def tween(self, name, interpolator=_UNSET):
        """Read or set the interpolator for ``name``; None removes it."""
        if interpolator is _UNSET:
            return self._tweens.get(name)
        tweens = dict(self._tweens)
        if interpolator is None:
            tweens.pop(name, None)
        else:
            tweens[name] = interpolator
        return self._derive(tweens=tweens)

    def attr(self, name, start, end):
        """Tween ``name`` from ``start`` to ``end`` with the generic value interpolator."""
        return self.tween(name, _interpolate(start, end))

    def progress(self, elapsed):
        """Eased progress in [0, 1] (or beyond for overshooting easings)."""
        local = elapsed - self._delay
        if local <= 0:
            return self._ease(0.0)
        if not self._duration or local >= self._duration:
            return self._ease(1.0)
        return self._ease(local / self._duration)

    def value_at(self, elapsed):
        """Tweened values at ``elapsed``; a single unnamed tween yields a bare value."""
        t = self.progress(elapsed)
        values = {name: fn(t) for name, fn in self._tweens.items()}
        if list(values) == [None]:
            return values[None]
        return values

    def done(self, elapsed):
        return elapsed >= self._delay + self._duration

    def schedule(self, queue, callback, time=None):
        """Drive the transition from ``queue``; ``callback(values)`` runs every frame until the end."""
        t = Timer(queue)
        total = self._delay + self._duration

        def frame(elapsed):
            if elapsed >= total:
                t.stop()
                callback(self.value_at(total))
                logger.debug("transition ended", duration=self._duration, delay=self._delay)
            else:
                callback(self.value_at(elapsed))

        return t.restart(frame, 0.0, time)


def transition(start=None, end=None, duration=250.0, delay=0.0, ease=_ease.ease_cubic_in_out):
    """Transition of a single value; use :meth:`Transition.attr` for named values."""
    tr = Transition(duration, delay, ease)
    if start is not None or end is not None:
        tr = tr.tween(None, _interpolate(0.0 if start is None else start, 1.0 if end is None else end))
    return tr
