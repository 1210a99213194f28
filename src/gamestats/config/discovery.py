"""Locate ``gamestats.toml``.

The nearest file at or above the working directory wins, the way git finds
``.git/``. ``GAMESTATS_CONFIG`` names a file explicitly and disables the
search; ``--config`` is handled by :meth:`GameStatsSettings.from_cli`.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "gamestats.toml"
CONFIG_ENV_VAR = "GAMESTATS_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file for *start* (default: cwd), or ``None``.

    A ``GAMESTATS_CONFIG`` pointing at a missing file yields ``None``
    rather than falling back to the walk-up search.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        explicit = Path(override)
        return explicit if explicit.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
