"""Locating and reading ``tasktrack.toml``.

The file is found like git finds ``.git/``: walk up from the working
directory. ``TASKTRACK_CONFIG`` (or ``--config``) points at a file directly.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

import click

from tasktrack.config.models import TaskTrackConfig

CONFIG_FILENAME = "tasktrack.toml"
CONFIG_ENV_VAR = "TASKTRACK_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file in effect for *start* (default: cwd), or None.

    A set ``TASKTRACK_CONFIG`` is authoritative: when it names a missing
    file, no walk-up happens.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def read_toml(path: Path) -> dict[str, Any]:
    """Parse *path*; a missing file reads as empty.

    Raises:
        click.ClickException: The file is not valid TOML.
    """
    if not path.is_file():
        return {}
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise click.ClickException(msg) from exc


def load_config(path: Path | None = None, cwd: Path | None = None) -> TaskTrackConfig:
    """Validate the config file at *path* (discovered from *cwd* if None).

    No file at all yields the code defaults.
    """
    if path is None:
        path = find_config(cwd)
    if path is None:
        return TaskTrackConfig()
    return TaskTrackConfig.model_validate(read_toml(path))
