from __future__ import annotations

from collections.abc import Generator
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class StepResult:
    done: bool
    value: Any


def advance(gen: Generator[Any, Any, Any], value: Any) -> StepResult:
    try:
        yielded = gen.send(value)
    except StopIteration as e:
        return StepResult(done=True, value=e.value)
    return StepResult(done=False, value=yielded)


def throw(gen: Generator[Any, Any, Any], error: BaseException) -> StepResult:
    try:
        yielded = gen.throw(error)
    except StopIteration as e:
        return StepResult(done=True, value=e.value)
    return StepResult(done=False, value=yielded)


__all__ = ["StepResult", "advance", "throw"]
