"""Locate and read ``stepdoc.toml``.

Lookup order: the ``STEPDOC_CONFIG`` environment variable, then the
nearest ``stepdoc.toml`` in the start directory or any of its parents.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path

from stepdoc.config.models import StepdocConfig

CONFIG_FILENAME = "stepdoc.toml"
CONFIG_ENV_VAR = "STEPDOC_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file that applies to *start* (default: cwd), if any.

    A ``STEPDOC_CONFIG`` that points at a missing file disables discovery
    rather than falling back to the walk-up search.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    directory = (start or Path.cwd()).resolve()
    for candidate_dir in (directory, *directory.parents):
        candidate = candidate_dir / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | None = None, cwd: Path | None = None) -> StepdocConfig:
    """Validate the config at *path* (discovered from *cwd* when omitted).

    No file at all yields the code defaults.
    """
    path = path or find_config(cwd)
    if path is None:
        return StepdocConfig()
    with path.open("rb") as fh:
        return StepdocConfig.model_validate(tomllib.load(fh))
