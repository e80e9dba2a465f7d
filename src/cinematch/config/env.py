"""Reading configuration from environment variables."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from .errors import ConfigurationError, MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable


def _read(name: str) -> str | None:
    """Blank values count as unset."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value


def require_env_vars(names: Iterable[str]) -> dict[str, str]:
    """Return every named variable, or raise naming all of the missing ones at once."""

    found = {name: _read(name) for name in names}
    missing = [name for name, value in found.items() if value is None]
    if missing:
        raise MissingConfigurationError(missing)
    return {name: value for name, value in found.items() if value is not None}


def require_env_var(name: str) -> str:
    return require_env_vars((name,))[name]


def _parsed[T](name: str, default: T, parse: Callable[[str], T], expected: str) -> T:
    raw = _read(name)
    if raw is None:
        return default
    try:
        return parse(raw.strip())
    except ValueError as exc:
        raise ConfigurationError(f"Expected {expected} for {name}, got {raw!r}") from exc


def env_int(name: str, default: int) -> int:
    return _parsed(name, default, int, "an integer")


def env_float(name: str, default: float) -> float:
    return _parsed(name, default, float, "a number")
