"""Tick counting and one-shot timers ordered by their timeout."""

from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

TIMER_FREQ = 100
TASK_TIMER_PERIOD = int(TIMER_FREQ * 0.02)
TASK_TIMER_VALUE = -(2**31)

_SENTINEL_TIMEOUT = 2**64 - 1


@dataclass(frozen=True)
class Timer:
    """A timer that expires once the tick count reaches timeout."""

    timeout: int
    value: int


class TimerManager:
    """Counts ticks and reports expired timers.

    Timers carrying TASK_TIMER_VALUE are task-switch timers: they are
    rescheduled automatically and make tick() return True instead of
    being reported to on_timeout.
    """

    def __init__(self, on_timeout: Optional[Callable[[Timer], object]] = None) -> None:
        self._on_timeout = on_timeout
        self._tick = 0
        self._order = itertools.count()
        self._timers: List[Tuple[int, int, Timer]] = []
        self.add_timer(Timer(_SENTINEL_TIMEOUT, -1))

    def add_timer(self, timer: Timer) -> None:
        """Schedule a timer."""
        heapq.heappush(self._timers, (timer.timeout, next(self._order), timer))

    def tick(self) -> bool:
        """Advance one tick; return True when a task-switch timer expired."""
        self._tick += 1
        task_timer_timeout = False
        while self._timers[0][0] <= self._tick:
            _, _, timer = heapq.heappop(self._timers)
            if timer.value == TASK_TIMER_VALUE:
                task_timer_timeout = True
                self.add_timer(Timer(self._tick + TASK_TIMER_PERIOD, TASK_TIMER_VALUE))
                continue
            if self._on_timeout is not None:
                self._on_timeout(timer)
        return task_timer_timeout

    def current_tick(self) -> int:
        """Number of ticks counted so far."""
        return self._tick