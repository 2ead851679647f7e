"""Configuration defaults and environment overrides."""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from typing import Any

from frozendict import frozendict

from resumable.errors import HostUnavailableError

Defer = Callable[..., Any]

DEFAULT_CONFIG: frozendict[str, Any] = frozendict(
    {
        "debug": False,
    }
)

_TRUTHY = ("1", "true", "yes")


def load_config(environ: Mapping[str, str] | None = None) -> frozendict[str, Any]:
    """Return ``DEFAULT_CONFIG`` with ``RESUMABLE_*`` environment overrides applied."""

    if environ is None:
        environ = os.environ
    overrides: dict[str, Any] = {}
    debug = environ.get("RESUMABLE_DEBUG")
    if debug is not None:
        overrides["debug"] = debug.lower() in _TRUTHY
    return frozendict({**DEFAULT_CONFIG, **overrides})


def resolve_defer(defer: Defer | None) -> Defer:
    """Return ``defer`` or fall back to ``call_soon`` of the running asyncio loop."""

    if defer is not None:
        return defer

    from resumable.hosts import asyncio_defer

    try:
        return asyncio_defer()
    except RuntimeError as exc:
        raise HostUnavailableError() from exc


__all__ = ["DEFAULT_CONFIG", "Defer", "load_config", "resolve_defer"]
