import heapq
import itertools
from typing import Callable, List, Optional, Tuple


class TimerHandle:
    """Отменяемый отложенный вызов."""

    __slots__ = ("deadline", "callback", "cancelled")

    def __init__(self, deadline: float, callback: Callable[[], None]):
        self.deadline = deadline
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class Scheduler:
    """
    Виртуальные часы с отменяемыми таймерами.

    Время двигается только через advance_to(), поэтому поведение полностью
    определяется тиками хоста (GLib-таймер в виджете, ручные вызовы в тестах).
    """

    def __init__(self):
        self.now: float = 0.0
        self._queue: List[Tuple[float, int, TimerHandle]] = []
        self._counter = itertools.count()

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        if delay_ms < 0:
            raise ValueError("delay must not be negative")
        handle = TimerHandle(self.now + delay_ms, callback)
        heapq.heappush(self._queue, (handle.deadline, next(self._counter), handle))
        return handle

    def _drop_cancelled(self):
        while self._queue and self._queue[0][2].cancelled:
            heapq.heappop(self._queue)

    def next_deadline(self) -> Optional[float]:
        self._drop_cancelled()
        return self._queue[0][0] if self._queue else None

    @property
    def pending(self) -> bool:
        return self.next_deadline() is not None

    def advance_to(self, when: float):
        """Сдвинуть часы на when, по порядку вызвав всё, что наступило."""
        if when < self.now:
            raise ValueError("scheduler time cannot go backwards")
        while True:
            self._drop_cancelled()
            if not self._queue or self._queue[0][0] > when:
                break
            deadline, _, handle = heapq.heappop(self._queue)
            self.now = deadline
            handle.cancelled = True
            handle.callback()
        self.now = when

    def cancel_all(self):
        for _, _, handle in self._queue:
            handle.cancel()
        self._queue.clear()
