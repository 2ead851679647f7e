"""
resumable - sequential-looking asynchronous code on plain generators.

A coroutine is a generator function whose last argument is ``resume``. Before
each wait it hands ``resume()`` to an asynchronous operation as that
operation's completion function, then suspends with ``yield``. The driver
resumes it with the delivered result on a later turn of the host loop.

Example:
    >>> import asyncio
    >>> from resumable import dispatch
    >>>
    >>> def greet(name, resume):
    ...     loop = asyncio.get_running_loop()
    ...     loop.call_later(0.1, resume(), None, f"hello {name}")
    ...     greeting = yield
    ...     return greeting.upper()
    >>>
    >>> async def main():
    ...     done = asyncio.get_running_loop().create_future()
    ...     dispatch(greet, "world", lambda err, value: done.set_result(value))
    ...     return await done
"""

from resumable.callback import callback
from resumable.config import DEFAULT_CONFIG, Defer, load_config, resolve_defer
from resumable.driver import CompletionCallback, Driver, StepObserver, dispatch
from resumable.errors import (
    HostUnavailableError,
    InjectedError,
    ResumableError,
    ResumedAfterEndError,
    UsageError,
)
from resumable.hosts import TickHandle, TickLoop, asyncio_defer, threadsafe_defer
from resumable.result import Err, Ok, OkMany, Result
from resumable.step import StepResult
from resumable.token import Completion, ResumeTokenFactory

__version__ = "0.1.0"

__all__ = [
    # Driver
    "dispatch",
    "callback",
    "Driver",
    "StepResult",
    "CompletionCallback",
    "StepObserver",
    # Tokens
    "Completion",
    "ResumeTokenFactory",
    # Results
    "Result",
    "Ok",
    "OkMany",
    "Err",
    # Hosts
    "Defer",
    "TickHandle",
    "TickLoop",
    "asyncio_defer",
    "threadsafe_defer",
    # Config
    "DEFAULT_CONFIG",
    "load_config",
    "resolve_defer",
    # Errors
    "ResumableError",
    "ResumedAfterEndError",
    "UsageError",
    "InjectedError",
    "HostUnavailableError",
]
