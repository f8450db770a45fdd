"""Coercion of task options given either in config or in a task string."""

from __future__ import annotations

from typing import Any

TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})
FALSE_STRINGS = frozenset({"0", "false", "no", "off"})


def as_list(value: Any) -> list[str]:
    """Return ``value`` as a list of strings; a single string is split on commas."""

    if value is None:
        return []
    if isinstance(value, str):
        return [item for item in (part.strip() for part in value.split(",")) if item]
    return [str(item) for item in value]


def as_bool(value: Any, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in TRUE_STRINGS:
            return True
        if lowered in FALSE_STRINGS:
            return False
        raise ValueError(f"not a boolean option value: {value!r}")
    return bool(value)
