"""
Driver that steps a generator-based coroutine to completion.

The coroutine is a generator function taking its arguments followed by a
``resume`` token factory. Each ``yield`` is a suspension point; the driver
resumes the generator once per fired completion, always on a later turn of the
host loop::

    def fetch_both(url_a, url_b, resume):
        client.get(url_a, resume())
        client.get(url_b, resume())
        first = yield
        second = yield
        return first, second

    dispatch(fetch_both, "a", "b", lambda err, value: print(value))

Results of operations issued back to back, as above, arrive in completion order.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator, Mapping
from typing import Any

from resumable.config import Defer, load_config, resolve_defer
from resumable.errors import ResumedAfterEndError, UsageError
from resumable.result import Err, Ok, Result
from resumable.step import StepResult, advance, throw
from resumable.token import ResumeTokenFactory

logger = logging.getLogger(__name__)

CompletionCallback = Callable[[BaseException | None, Any], Any]
StepObserver = Callable[["Driver", StepResult], Any]

_INITIAL: Result[Any] = Ok(None)


def _to_generator(produced: Any, job: Any) -> Generator[Any, Any, Any]:
    if isinstance(produced, Generator):
        return produced
    raise TypeError(
        f"job {getattr(job, '__qualname__', job)!r} did not return a generator, "
        f"got {type(produced).__name__}"
    )


class Driver:
    """Owns one coroutine instance and translates completions into steps.

    ``state`` moves from ``"pending"`` to ``"suspended"`` and ends in either
    ``"done"`` or ``"failed"``.
    """

    def __init__(
        self,
        job: Callable[..., Any],
        args: tuple[Any, ...] = (),
        *,
        callback: CompletionCallback | None = None,
        defer: Defer | None = None,
        on_step: StepObserver | None = None,
        config: Mapping[str, Any] | None = None,
    ) -> None:
        if not callable(job):
            raise TypeError(f"job must be callable, got {type(job).__name__}")
        self.job = job
        self.args = tuple(args)
        self.callback = callback
        self.defer = resolve_defer(defer)
        self.on_step = on_step
        self.config = load_config() if config is None else config
        self.resume = ResumeTokenFactory(self)
        self.steps = 0
        self.state = "pending"
        self._gen: Generator[Any, Any, Any] | None = None

    @property
    def name(self) -> str:
        return getattr(self.job, "__qualname__", repr(self.job))

    def start(self) -> StepResult:
        """Create the coroutine and run it to its first suspension point."""

        if self._gen is not None:
            raise UsageError(f"coroutine {self.name} was already started")
        logger.debug(f"starting coroutine {self.name}")
        self._gen = _to_generator(self.job(*self.args, self.resume), self.job)
        return self.step(_INITIAL)

    def step(self, result: Result[Any]) -> StepResult:
        """Resume the coroutine with ``result``.

        ``Err`` is thrown in at the suspension point, ``Ok`` and ``OkMany`` are
        sent as the value of the pending ``yield``. Exceptions escaping the
        coroutine propagate to the caller, which is normally the host loop.
        """

        if self._gen is None:
            raise UsageError(f"coroutine {self.name} was resumed before it was started")
        if self.state == "done":
            raise ResumedAfterEndError(f"coroutine {self.name} was resumed after it finished")
        if self.state == "failed":
            raise ResumedAfterEndError(f"coroutine {self.name} was resumed after it failed")

        self.steps += 1
        if self.config.get("debug"):
            logger.debug(f"step {self.steps} of {self.name}: {result!r}")

        try:
            if isinstance(result, Err):
                step_result = throw(self._gen, result.error)
            else:
                step_result = advance(self._gen, result.unwrap())
        except BaseException as exc:
            self.state = "failed"
            logger.debug(f"coroutine {self.name} raised {exc!r} at step {self.steps}")
            raise

        self.state = "done" if step_result.done else "suspended"
        self._notify(step_result)

        if step_result.done:
            logger.debug(f"coroutine {self.name} finished after {self.steps} steps")
            if self.callback is not None:
                self.callback(None, step_result.value)
        return step_result

    def _notify(self, step_result: StepResult) -> None:
        if self.on_step is None:
            return
        try:
            self.on_step(self, step_result)
        except Exception:
            logger.exception(f"on_step observer failed for {self.name}")

    def __repr__(self) -> str:
        return f"Driver({self.name}, state={self.state}, steps={self.steps})"


def dispatch(
    job: Callable[..., Any],
    *args: Any,
    on_complete: CompletionCallback | None = None,
    defer: Defer | None = None,
    on_step: StepObserver | None = None,
) -> None:
    """Start ``job`` as a coroutine.

    ``job`` is called as ``job(*args, resume)``. If ``on_complete`` is not given
    and the last positional argument is callable, that argument is taken as the
    completion callback instead of being forwarded. The callback is called once
    as ``callback(None, return_value)`` when the coroutine finishes.

    Passing a completion function as the callback nests coroutines::

        total = yield dispatch(child, a, b, resume())
    """

    if on_complete is None and args and callable(args[-1]):
        *forwarded, on_complete = args
        args = tuple(forwarded)
    Driver(job, args, callback=on_complete, defer=defer, on_step=on_step).start()


__all__ = ["CompletionCallback", "Driver", "StepObserver", "dispatch"]
