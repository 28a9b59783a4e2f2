"""Runtime settings sourced from environment variables.

Settings are read on every call to :func:`current` so scripts can adjust the
environment before creating sessions.  Tests can pin values temporarily via
the :func:`override` context manager; overrides stack, the innermost wins.

Usage::

    from scythebidder.core import settings

    cap = settings.current().max_attempts

Recognised variables:

``SCYTHEBIDDER_MAX_ATTEMPTS``
    Cap on rejected combination batches before setup gives up.
``SCYTHEBIDDER_VARIANT``
    Catalog used when a session does not name one (``base`` or ``ifa``).
``BIND`` / ``PORT``
    Address used by ``scythebidder serve``.
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from dataclasses import dataclass, fields, replace
from typing import Any, Final

__all__ = ["Settings", "current", "override"]

logger = logging.getLogger(__name__)

_PREFIX: Final = "SCYTHEBIDDER_"
_DEFAULT_MAX_ATTEMPTS: Final = 10_000


@dataclass(frozen=True)
class Settings:
    max_attempts: int = _DEFAULT_MAX_ATTEMPTS
    variant: str = "ifa"
    bind: str = "0.0.0.0"
    port: int = 8000


_OVERRIDE_STACK: list[dict[str, Any]] = []


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r; using %s", name, raw, default)
        return default


def _from_env() -> Settings:
    return Settings(
        max_attempts=_int_env(f"{_PREFIX}MAX_ATTEMPTS", _DEFAULT_MAX_ATTEMPTS),
        variant=(os.getenv(f"{_PREFIX}VARIANT") or "ifa").strip().lower(),
        bind=os.getenv("BIND", "0.0.0.0"),
        port=_int_env("PORT", 8000),
    )


def current() -> Settings:
    """Return the effective settings: environment first, then overrides."""

    resolved = _from_env()
    for values in _OVERRIDE_STACK:
        resolved = replace(resolved, **values)
    return resolved


@contextmanager
def override(**values: Any):
    """Temporarily replace settings fields within the context."""

    known = {f.name for f in fields(Settings)}
    unknown = set(values) - known
    if unknown:
        raise TypeError(f"unknown settings: {sorted(unknown)}")
    _OVERRIDE_STACK.append(dict(values))
    try:
        yield
    finally:
        _OVERRIDE_STACK.pop()
