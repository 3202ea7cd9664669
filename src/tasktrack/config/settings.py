"""Unified settings: CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs: CLI flags passed by Click
  2. Env vars: ``TASKTRACK_*`` prefix, ``__`` for nested sections
  3. TOML file: ``tasktrack.toml`` discovered via walk-up
  4. Code defaults: baked into the section models
"""

from __future__ import annotations

from contextvars import ContextVar
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from tasktrack.config.discovery import find_config, read_toml
from tasktrack.config.models import DisplayConfig, StorageConfig

# Set only while from_cli() constructs an instance.
_active_toml: ContextVar[Path | None] = ContextVar("tasktrack_active_toml", default=None)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Settings source backed by one parsed ``tasktrack.toml``."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = read_toml(toml_path) if toml_path else {}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return dict(self._data)


class TaskTrackSettings(BaseSettings):
    """Everything a tasktrack invocation is configured with.

    Attributes:
        data_root: Directory holding ``.tasktrack/`` (parent of
            ``tasktrack.toml``, or CWD if no config found).
        config_path: The config file in use, or None.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "TASKTRACK_",
        "env_nested_delimiter": "__",
    }

    data_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    no_interact: bool = False

    # --- TOML sections ---
    storage: StorageConfig = Field(default_factory=StorageConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """CLI kwargs, then env vars, then the TOML file. No dotenv or secrets."""
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, _active_toml.get()),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        data_root: Path | None = None,
        **cli_flags: Any,
    ) -> TaskTrackSettings:
        """Build settings for one CLI invocation.

        An explicit *data_root* wins; otherwise the directory of the config
        file in use; otherwise the ``data_root`` env var or the CWD.
        """
        toml_path = _resolve_toml(config_path, data_root)

        overrides: dict[str, Any] = {**cli_flags, "config_path": toml_path}
        root = data_root if data_root is not None else (toml_path and toml_path.parent)
        if root is not None:
            overrides["data_root"] = root

        token = _active_toml.set(toml_path)
        try:
            return cls(**overrides)
        finally:
            _active_toml.reset(token)


def _resolve_toml(config_path: str | None, start: Path | None) -> Path | None:
    """An explicit ``--config`` file if it exists, else walk-up discovery."""
    if config_path:
        explicit = Path(config_path)
        return explicit if explicit.is_file() else None
    return find_config(start)
