# piechart/animation.py
"""
Minimal animation timeline: animated values with listeners, linear timing
animations, in-order sequences, and the schedulers that drive them.

Time is in milliseconds. A scheduler only needs two things:
  now() -> float
  call_later(delay_ms, callback) -> handle with .cancel()
VirtualClock advances explicitly (tests, static export); AsyncioScheduler
runs on a real event loop.
"""
from __future__ import annotations
import asyncio
import heapq
import itertools
from typing import Any, Callable, Dict, List, Optional, Sequence

from piechart.logging import get_logger

FRAME_MS = 16.0

_log = get_logger("anim")

Listener = Callable[[float], None]
DoneCallback = Callable[[bool], None]


# ----------------------------
# Schedulers
# ----------------------------

class ScheduledTask:
    __slots__ = ("due", "seq", "callback", "cancelled")

    def __init__(self, due: float, seq: int, callback: Callable[[], Any]):
        self.due = due
        self.seq = seq
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def __lt__(self, other: "ScheduledTask") -> bool:
        return (self.due, self.seq) < (other.due, other.seq)


class VirtualClock:
    """Deterministic scheduler: callbacks run only inside advance()/run_until_idle()."""

    def __init__(self, start: float = 0.0):
        self._now = float(start)
        self._queue: List[ScheduledTask] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay_ms: float, callback: Callable[[], Any]) -> ScheduledTask:
        task = ScheduledTask(self._now + max(0.0, float(delay_ms)), next(self._seq), callback)
        heapq.heappush(self._queue, task)
        return task

    @property
    def pending(self) -> int:
        return sum(1 for t in self._queue if not t.cancelled)

    def advance(self, ms: float) -> int:
        """Move time forward by ms, running every task due on the way. Returns tasks run."""
        target = self._now + max(0.0, float(ms))
        ran = 0
        while self._queue and self._queue[0].due <= target:
            task = heapq.heappop(self._queue)
            if task.cancelled:
                continue
            self._now = max(self._now, task.due)
            task.callback()
            ran += 1
        self._now = target
        return ran

    def run_until_idle(self, limit_ms: float = 600_000.0) -> float:
        """
        Run queued tasks (and whatever they schedule) until none are left; returns elapsed ms.
        Tasks due more than limit_ms from now stay queued and a warning is logged.
        """
        start = self._now
        while self.pending:
            nxt = min(t.due for t in self._queue if not t.cancelled)
            if nxt - start > limit_ms:
                _log.warning(f"run_until_idle: stopped after {limit_ms:g} ms with {self.pending} task(s) pending")
                break
            self.advance(nxt - self._now)
        return self._now - start


class AsyncioScheduler:
    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop or asyncio.get_running_loop()

    def now(self) -> float:
        return self._loop.time() * 1000.0

    def call_later(self, delay_ms: float, callback: Callable[[], Any]) -> asyncio.TimerHandle:
        return self._loop.call_later(max(0.0, float(delay_ms)) / 1000.0, callback)


# ----------------------------
# Values
# ----------------------------

def interpolate_value(
    x: float,
    input_range: Sequence[float],
    output_range: Sequence[float],
    extrapolate: str = "clamp",
) -> float:
    """Piecewise-linear map of x; outside the input range either clamp or extend the end segment."""
    if len(input_range) < 2 or len(input_range) != len(output_range):
        raise ValueError("input_range and output_range need the same length (>= 2)")

    if extrapolate == "clamp":
        if x <= input_range[0]:
            return float(output_range[0])
        if x >= input_range[-1]:
            return float(output_range[-1])

    seg = len(input_range) - 2
    for k in range(1, len(input_range) - 1):
        if x < input_range[k]:
            seg = k - 1
            break

    in0, in1 = input_range[seg], input_range[seg + 1]
    out0, out1 = output_range[seg], output_range[seg + 1]
    if in1 == in0:
        return float(out1)
    t = (x - in0) / (in1 - in0)
    return out0 + t * (out1 - out0)


class Interpolation:
    def __init__(self, parent: "AnimatedValue", input_range: Sequence[float],
                 output_range: Sequence[float], extrapolate: str = "clamp"):
        self._parent = parent
        self.input_range = list(input_range)
        self.output_range = list(output_range)
        self.extrapolate = extrapolate

    def get_value(self) -> float:
        return interpolate_value(self._parent.get_value(), self.input_range,
                                 self.output_range, self.extrapolate)


class AnimatedValue:
    def __init__(self, value: float = 0.0):
        self._value = float(value)
        self._listeners: Dict[str, Listener] = {}
        self._ids = itertools.count()

    def get_value(self) -> float:
        return self._value

    def set_value(self, value: float) -> None:
        self._value = float(value)
        # listeners may remove themselves (or others) while being notified
        for cb in list(self._listeners.values()):
            cb(self._value)

    def add_listener(self, callback: Listener) -> str:
        key = str(next(self._ids))
        self._listeners[key] = callback
        return key

    def remove_listener(self, key: str) -> None:
        self._listeners.pop(key, None)

    def remove_all_listeners(self) -> None:
        self._listeners.clear()

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def interpolate(self, input_range: Sequence[float], output_range: Sequence[float],
                    extrapolate: str = "clamp") -> Interpolation:
        return Interpolation(self, input_range, output_range, extrapolate)


# ----------------------------
# Animations
# ----------------------------

def linear(t: float) -> float:
    return t


class Animation:
    def __init__(self):
        self._scheduler: Any = None
        self._on_done: Optional[DoneCallback] = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self, scheduler: Any, on_done: Optional[DoneCallback] = None) -> None:
        if self._running:
            return
        self._scheduler = scheduler
        self._on_done = on_done
        self._running = True
        self._begin()

    def stop(self) -> None:
        if self._running:
            self._halt()
            self._finish(False)

    def _begin(self) -> None:
        raise NotImplementedError

    def _halt(self) -> None:
        pass

    def _finish(self, finished: bool) -> None:
        if not self._running:
            return
        self._running = False
        cb, self._on_done = self._on_done, None
        if cb is not None:
            cb(finished)


class TimingAnimation(Animation):
    """Drive a value from its current value to to_value over duration ms, one tick per frame."""

    def __init__(self, value: AnimatedValue, *, to_value: float, duration: float,
                 easing: Callable[[float], float] = linear):
        super().__init__()
        self.value = value
        self.to_value = float(to_value)
        self.duration = max(0.0, float(duration))
        self.easing = easing
        self._from = 0.0
        self._t0 = 0.0
        self._task: Any = None

    def _begin(self) -> None:
        self._from = self.value.get_value()
        self._t0 = self._scheduler.now()
        self._tick()

    def _halt(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    def _tick(self) -> None:
        self._task = None
        if not self._running:
            return
        elapsed = self._scheduler.now() - self._t0
        if self.duration <= 0 or elapsed >= self.duration:
            self.value.set_value(self.to_value)
            self._finish(True)
            return

        frac = self.easing(elapsed / self.duration)
        self.value.set_value(self._from + (self.to_value - self._from) * frac)
        if not self._running:
            return
        # last frame lands exactly on the end of the duration
        step = min(FRAME_MS, self.duration - elapsed)
        self._task = self._scheduler.call_later(step, self._tick)


class SequenceAnimation(Animation):
    """Run animations strictly one after another; stopping one stops the whole sequence."""

    def __init__(self, animations: Sequence[Animation]):
        super().__init__()
        self.animations = list(animations)
        self._index = 0
        self._starting = False

    def _begin(self) -> None:
        self._index = 0
        self._run_current()

    def _run_current(self) -> None:
        # children that finish inside start() are stepped over here, not recursively
        while self._running and self._index < len(self.animations):
            child = self.animations[self._index]
            _log.debug(f"sequence step {self._index + 1}/{len(self.animations)}")
            self._starting = True
            try:
                child.start(self._scheduler, self._child_done)
            finally:
                self._starting = False
            if child.running or not self._running:
                return
            self._index += 1
        if self._running:
            self._finish(True)

    def _child_done(self, finished: bool) -> None:
        if not self._running:
            return
        if not finished:
            self._finish(False)
            return
        if self._starting:
            return
        self._index += 1
        self._run_current()

    def _halt(self) -> None:
        if self._index < len(self.animations):
            current = self.animations[self._index]
            # detach first so the child's stop does not re-enter _child_done
            current._on_done = None
            current.stop()


def timing(value: AnimatedValue, *, to_value: float, duration: float,
           easing: Callable[[float], float] = linear) -> TimingAnimation:
    return TimingAnimation(value, to_value=to_value, duration=duration, easing=easing)


def sequence(animations: Sequence[Animation]) -> SequenceAnimation:
    return SequenceAnimation(animations)
