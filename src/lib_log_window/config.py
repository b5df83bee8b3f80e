"""Optional ``.env`` loading for the CLI and host applications.

Purpose
-------
Let operators keep ``LOG_WINDOW_*`` settings in a project-local ``.env``
file. Values already present in the environment always win.

Contents
--------
* :data:`DOTENV_ENV_VAR` – environment toggle consulted by the CLI.
* :func:`should_use_dotenv` – precedence rules (explicit flag beats env).
* :func:`enable_dotenv` – locate and load the nearest ``.env`` once.
"""

from __future__ import annotations

import logging
from pathlib import Path

from dotenv import load_dotenv

LOGGER = logging.getLogger(__name__)

DOTENV_ENV_VAR = "LOG_WINDOW_USE_DOTENV"
_TRUTHY = {"1", "true", "yes", "on"}

_loaded_path: Path | None = None
_attempted = False


def should_use_dotenv(*, explicit: bool | None, env_value: str | None) -> bool:
    """Decide whether ``.env`` should be loaded.

    Examples
    --------
    >>> should_use_dotenv(explicit=None, env_value="1")
    True
    >>> should_use_dotenv(explicit=False, env_value="1")
    False
    >>> should_use_dotenv(explicit=None, env_value=None)
    False
    """
    if explicit is not None:
        return explicit
    if env_value is None:
        return False
    return env_value.strip().lower() in _TRUTHY


def enable_dotenv(search_from: Path | None = None) -> Path | None:
    """Load the nearest ``.env`` walking up from ``search_from`` (default: cwd).

    Returns the resolved path that was loaded, or ``None`` when no file was
    found. Repeated calls return the first result without reloading.
    """
    global _loaded_path, _attempted
    if _attempted:
        return _loaded_path
    _attempted = True
    start = Path(search_from) if search_from is not None else Path.cwd()
    found = _find_upwards(start)
    if found is None:
        LOGGER.debug("No .env file found above %s", start)
        return None
    load_dotenv(found, override=False)
    _loaded_path = found
    return found


def _find_upwards(start: Path) -> Path | None:
    for directory in (start.resolve(), *start.resolve().parents):
        candidate = directory / ".env"
        if candidate.is_file():
            return candidate
    return None


def _reset_dotenv_state_for_testing() -> None:
    global _loaded_path, _attempted
    _loaded_path = None
    _attempted = False


__all__ = ["DOTENV_ENV_VAR", "enable_dotenv", "should_use_dotenv"]
