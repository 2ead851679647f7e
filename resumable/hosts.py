"""Deferred-execution primitives that a Driver schedules resumptions on.

A primitive has the shape of ``loop.call_soon``: ``defer(fn, *args)`` runs
``fn(*args)`` later, never on the caller's stack, in FIFO order relative to
other deferrals.
"""

from __future__ import annotations

import asyncio
import heapq
import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from resumable.config import Defer

logger = logging.getLogger(__name__)

ExceptionHandler = Callable[[BaseException], None]


def asyncio_defer(loop: asyncio.AbstractEventLoop | None = None) -> Defer:
    """Return ``call_soon`` of ``loop``, or of the running loop when omitted.

    Raises ``RuntimeError`` when ``loop`` is omitted and no loop is running.
    """

    if loop is None:
        loop = asyncio.get_running_loop()
    return loop.call_soon


def threadsafe_defer(loop: asyncio.AbstractEventLoop) -> Defer:
    """Return ``call_soon_threadsafe`` of ``loop``.

    Use this when completions fire on worker threads; steps still run on the
    loop's own thread.
    """

    return loop.call_soon_threadsafe


def _coerce_delay(value: float) -> float:
    if not isinstance(value, int | float):
        raise TypeError(f"delay must be float, got {type(value).__name__}")
    delay = float(value)
    if math.isnan(delay) or math.isinf(delay):
        raise ValueError(f"delay must be finite, got {value!r}")
    if delay < 0.0:
        raise ValueError("delay must be >= 0.0")
    return delay


@dataclass(order=True)
class TickHandle:
    when: float
    sequence: int
    callback: Callable[..., Any] = field(compare=False)
    args: tuple[Any, ...] = field(compare=False, default=())
    cancelled: bool = field(compare=False, default=False)

    def cancel(self) -> None:
        self.cancelled = True


class TickLoop:
    """Deterministic single-threaded host with a virtual clock.

    ``call_soon`` and ``call_later`` enqueue callbacks; ``run`` drains them in
    time order, FIFO among callbacks due at the same time, advancing the clock
    to each callback's due time without sleeping. An exception raised by a
    callback propagates out of ``run`` unless an ``exception_handler`` is set.
    """

    def __init__(
        self,
        *,
        start_time: float = 0.0,
        exception_handler: ExceptionHandler | None = None,
    ) -> None:
        self._now = float(start_time)
        self._sequence = 0
        self._items: list[TickHandle] = []
        self._exception_handler = exception_handler
        self.ticks = 0

    def time(self) -> float:
        return self._now

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> TickHandle:
        return self._push(self._now, callback, args)

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TickHandle:
        return self._push(self._now + _coerce_delay(delay), callback, args)

    def _push(self, when: float, callback: Callable[..., Any], args: tuple[Any, ...]) -> TickHandle:
        self._sequence += 1
        handle = TickHandle(when=when, sequence=self._sequence, callback=callback, args=args)
        heapq.heappush(self._items, handle)
        return handle

    def empty(self) -> bool:
        return not any(not item.cancelled for item in self._items)

    def __len__(self) -> int:
        return sum(1 for item in self._items if not item.cancelled)

    def run_once(self) -> bool:
        """Run the next due callback. Return ``False`` when nothing is queued."""

        while self._items:
            handle = heapq.heappop(self._items)
            if handle.cancelled:
                continue
            if handle.when > self._now:
                self._now = handle.when
            self.ticks += 1
            try:
                handle.callback(*handle.args)
            except Exception as exc:
                if self._exception_handler is None:
                    raise
                logger.debug(f"tick callback raised {exc!r}, passing to exception handler")
                self._exception_handler(exc)
            return True
        return False

    def run(self) -> None:
        """Run callbacks until the queue is empty."""

        while self.run_once():
            pass

    def run_until(self, predicate: Callable[[], bool]) -> bool:
        """Run callbacks until ``predicate()`` holds. Return whether it did."""

        while not predicate():
            if not self.run_once():
                return predicate()
        return True


__all__ = [
    "ExceptionHandler",
    "TickHandle",
    "TickLoop",
    "asyncio_defer",
    "threadsafe_defer",
]
