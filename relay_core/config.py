"""Locate and read the TOML configuration keyed by plugin and task identifiers."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import tomllib

from .paths import UserDirs

DEFAULT_CONFIG_NAME = "relay.toml"
CONFIG_ENV_VAR = "RELAY_CONFIG"

logger = logging.getLogger(__name__)


def locate_config(
    name: str | Path | None = None,
    *,
    user_dirs: UserDirs | None = None,
) -> Path | None:
    """Return the first existing config file, or ``None``.

    Looks at ``name`` (falling back to ``$RELAY_CONFIG`` and then
    ``relay.toml``) and, for relative names, at the same file under the user
    config directory.
    """

    candidate = Path(name or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_NAME)
    if candidate.is_file():
        return candidate
    if candidate.is_absolute():
        return None
    user_candidate = (user_dirs or UserDirs()).config_dir() / candidate
    if user_candidate.is_file():
        return user_candidate
    return None


def load_config(
    name: str | Path | None = None,
    *,
    user_dirs: UserDirs | None = None,
) -> dict[str, Any] | None:
    """Read the configuration mapping, or ``None`` when missing or malformed."""

    path = locate_config(name, user_dirs=user_dirs)
    if path is None:
        return None
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.error("unable to read configuration %s: %s", path, exc)
        return None
    logger.debug("configuration loaded from %s", path)
    return data
