"""
Pytest configuration for resumable tests.

Provides a deterministic virtual-time host and a recorder for completion
callbacks.
"""

from typing import Any

import pytest

from resumable import TickLoop


class Completed:
    """Records ``(error, value)`` completion callback invocations."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, Any]] = []

    def __call__(self, error: Any, value: Any) -> None:
        self.calls.append((error, value))

    @property
    def value(self) -> Any:
        assert len(self.calls) == 1, f"expected exactly one completion, got {self.calls}"
        error, value = self.calls[0]
        assert error is None
        return value


@pytest.fixture
def loop() -> TickLoop:
    return TickLoop()


@pytest.fixture
def done() -> Completed:
    return Completed()
