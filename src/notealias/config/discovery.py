"""Locate the ``notealias.toml`` that governs a workspace.

The directory holding the file is the workspace root; the database lives
under its ``.notealias/`` folder. ``NOTEALIAS_CONFIG`` pins one file and
disables the search.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "notealias.toml"
CONFIG_ENV_VAR = "NOTEALIAS_CONFIG"


def _pinned_config() -> Path | None:
    """The file named by ``NOTEALIAS_CONFIG``, or None if unset or missing."""
    pinned = os.environ.get(CONFIG_ENV_VAR)
    if not pinned:
        return None
    path = Path(pinned)
    return path if path.is_file() else None


def find_config(start: Path | None = None) -> Path | None:
    """Return the nearest ``notealias.toml`` at or above *start* (default: cwd).

    A set ``NOTEALIAS_CONFIG`` wins outright, even when it points nowhere.
    """
    if os.environ.get(CONFIG_ENV_VAR):
        return _pinned_config()

    origin = (start or Path.cwd()).resolve()
    for directory in (origin, *origin.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
