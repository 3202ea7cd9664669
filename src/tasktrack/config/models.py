"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, tasktrack.toml only contains
overrides. An empty (or absent) tasktrack.toml is a valid configuration.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class StorageConfig(BaseModel):
    """[storage] section."""

    model_config = {"frozen": True}

    backend: Literal["sqlite", "memory"] = "sqlite"
    filename: str = "tasktrack.db"
    key: str = "tasktrack.v1"


class DisplayConfig(BaseModel):
    """[display] section."""

    model_config = {"frozen": True}

    show_ids: bool = True
    hide_done: bool = False


class TaskTrackConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    storage: StorageConfig = Field(default_factory=StorageConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)
