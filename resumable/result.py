"""
Tagged completion payloads delivered to a suspended coroutine.

A completion either succeeds with one value (``Ok``), succeeds with an ordered
sequence of values (``OkMany``), or fails (``Err``). Producers that speak the
error-first callback convention are adapted through
:meth:`Result.from_callback_args`.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Generic, NoReturn, TypeVar, cast

from resumable.errors import InjectedError

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class Result(Generic[T_co]):
    """Sum type representing either a successful payload or an error."""

    __slots__ = ()

    def unwrap(self) -> T_co:
        """Return the payload or raise the stored error."""

        if isinstance(self, Ok):
            return self.value
        if isinstance(self, OkMany):
            return cast(T_co, self.values)
        raise cast(Err, self).error

    @staticmethod
    def from_callback_args(*args: Any) -> Result[Any]:
        """Adapt error-first callback arguments to a tagged result.

        ``(error, *values)``: a non-``None`` error becomes ``Err``, even a falsy
        one such as ``0`` or ``""``. Otherwise exactly one value gives
        ``Ok(value)``, and no value or several values give ``OkMany`` in the
        order received. A single argument that is already a ``Result`` is
        returned unchanged.
        """

        if len(args) == 1 and isinstance(args[0], Result):
            return args[0]
        if not args:
            return OkMany(())

        error, *values = args
        if error is not None:
            return Err.of(error)
        if len(values) == 1:
            return Ok(values[0])
        return OkMany(values)


@dataclass(frozen=True)
class Ok(Result[T], Generic[T]):
    """Success with a single value."""

    value: T


@dataclass(frozen=True)
class OkMany(Result[tuple[Any, ...]]):
    """Success with zero or more values, kept in the order they were produced."""

    values: tuple[Any, ...]

    def __init__(self, values: Iterable[Any]) -> None:
        object.__setattr__(self, "values", tuple(values))


@dataclass(frozen=True)
class Err(Result[NoReturn]):
    """Failure."""

    error: BaseException

    @classmethod
    def of(cls, error: Any) -> Err:
        """Build an ``Err`` from any error value, wrapping non-exceptions."""

        if isinstance(error, BaseException):
            return cls(error)
        return cls(InjectedError(error))


__all__ = ["Err", "Ok", "OkMany", "Result"]
