from __future__ import annotations

from typing import Any


class ResumableError(Exception):
    """Base class for errors raised by resumable itself."""


class UsageError(ResumableError):
    """Raised synchronously at the call site when the resume API is misused."""


class ResumedAfterEndError(UsageError):
    """Raised when a completion fires after its coroutine finished or failed.

    Unlike other usage errors this one surfaces from the deferred step, inside
    the host loop, not at the call site of the extra completion.
    """


class InjectedError(ResumableError):
    """Raised inside a coroutine when a completion delivers a non-exception error value."""

    def __init__(self, reason: Any) -> None:
        self.reason = reason
        super().__init__(str(reason))


class HostUnavailableError(ResumableError, RuntimeError):
    """Raised when no deferred-execution primitive can be found."""

    def __init__(self) -> None:
        super().__init__(
            "No running asyncio event loop to schedule resumptions on.\n"
            "Hint: call dispatch() from inside a running loop, or pass one explicitly via "
            "`defer=asyncio_defer(loop)` or `defer=TickLoop().call_soon`"
        )


__all__ = [
    "HostUnavailableError",
    "InjectedError",
    "ResumableError",
    "ResumedAfterEndError",
    "UsageError",
]
