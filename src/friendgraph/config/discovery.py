"""Locating and reading ``friendgraph.toml``.

Lookup order: the ``FRIENDGRAPH_CONFIG`` environment variable, then the
nearest ``friendgraph.toml`` in the start directory or any of its parents.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path

from friendgraph.config.models import FriendgraphConfig

CONFIG_FILENAME = "friendgraph.toml"
CONFIG_ENV_VAR = "FRIENDGRAPH_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file in effect for *start* (default: CWD), or None.

    A ``FRIENDGRAPH_CONFIG`` value that does not name a file disables the
    directory search entirely.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        candidate = Path(override).expanduser()
        return candidate if candidate.is_file() else None

    origin = (start or Path.cwd()).resolve()
    for directory in (origin, *origin.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | None = None, cwd: Path | None = None) -> FriendgraphConfig:
    """Parse and validate the config file, falling back to built-in defaults.

    Raises:
        tomllib.TOMLDecodeError: The file is not valid TOML.
        pydantic.ValidationError: A section holds an invalid value.
    """
    source = path or find_config(cwd)
    if source is None:
        return FriendgraphConfig()
    with source.open("rb") as fh:
        return FriendgraphConfig.model_validate(tomllib.load(fh))
