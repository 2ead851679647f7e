"""Single-use resume tokens.

A coroutine receives a :class:`ResumeTokenFactory` as its last argument,
conventionally named ``resume``. Calling ``resume()`` issues one token and
returns its :class:`Completion`, which is what gets handed to an asynchronous
operation as its completion handler::

    def job(resume):
        loop.call_later(1.0, resume(), None, "tick")
        value = yield
        return value
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from resumable.errors import UsageError
from resumable.result import Result

if TYPE_CHECKING:
    from resumable.driver import Driver

logger = logging.getLogger(__name__)


class Completion:
    """Completion function of one resume token.

    Fires at most once. Firing converts the received arguments to a
    :class:`~resumable.result.Result` and defers a step of the owning driver.
    """

    __slots__ = ("_driver", "_fired", "token_id")

    def __init__(self, driver: Driver, token_id: int) -> None:
        self._driver = driver
        self._fired = False
        self.token_id = token_id

    @property
    def fired(self) -> bool:
        return self._fired

    def __call__(self, *args: Any) -> None:
        self.resolve(Result.from_callback_args(*args))

    def resolve(self, result: Result[Any]) -> None:
        """Deliver an already tagged result."""

        if self._fired:
            raise UsageError(
                f"completion function of resume token #{self.token_id} invoked more than once"
            )
        self._fired = True
        logger.debug(f"token #{self.token_id} fired, deferring step")
        self._driver.defer(self._driver.step, result)

    def __repr__(self) -> str:
        state = "fired" if self._fired else "pending"
        return f"Completion(token_id={self.token_id}, {state})"


class ResumeTokenFactory:
    """Issues resume tokens bound to one driver."""

    __slots__ = ("_driver", "issued")

    def __init__(self, driver: Driver) -> None:
        self._driver = driver
        self.issued = 0

    def __call__(self, *args: Any) -> Completion:
        if args:
            raise UsageError(
                "use resume() to create a completion function, do not pass resume itself "
                "as the completion function (e.g. loop.call_later(1, resume()) instead of "
                "loop.call_later(1, resume))"
            )
        self.issued += 1
        logger.debug(f"issued resume token #{self.issued}")
        return Completion(self._driver, self.issued)


__all__ = ["Completion", "ResumeTokenFactory"]
