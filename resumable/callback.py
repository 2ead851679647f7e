"""Adapter exposing a coroutine job as a plain callback."""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from typing import Any

from resumable.config import Defer
from resumable.driver import Driver, dispatch

logger = logging.getLogger(__name__)


def callback(job: Callable[..., Any], *, defer: Defer | None = None) -> Callable[..., None]:
    """Wrap ``job`` so that every call starts a fresh, independent coroutine.

    All received arguments are forwarded to ``job`` followed by ``resume``. No
    completion callback is attached, so a callable last argument is forwarded
    too. Usable wherever a plain callback is expected::

        loop.call_later(1.0, callback(on_timer), "payload")
    """

    @functools.wraps(job)
    def plain_callback(*args: Any) -> None:
        logger.debug(f"callback adapter starting {getattr(job, '__qualname__', job)!r}")
        Driver(job, args, defer=defer).start()

    return plain_callback


dispatch.callback = callback  # type: ignore[attr-defined]

__all__ = ["callback"]
