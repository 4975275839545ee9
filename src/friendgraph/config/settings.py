"""FriendgraphSettings — one frozen object for CLI flags, env vars, and TOML.

Precedence, highest first:

1. keyword arguments (the CLI flags Click parsed)
2. ``FRIENDGRAPH_*`` environment variables, nested with ``__``
   (``FRIENDGRAPH_QUERY__MAX_DISTANCE=8``)
3. the discovered ``friendgraph.toml``
4. defaults baked into :mod:`friendgraph.config.models`
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from friendgraph.config.discovery import find_config
from friendgraph.config.models import NetworkConfig, QueryConfig

# TOML file chosen by from_cli(), read while the settings object is built.
_active_toml: ContextVar[Path | None] = ContextVar("_active_toml", default=None)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Settings source backed by a single ``friendgraph.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._path = toml_path
        self._data = self._read(toml_path) if toml_path else {}

    @staticmethod
    def _read(path: Path) -> dict[str, Any]:
        if not path.is_file():
            return {}
        try:
            with path.open("rb") as fh:
                return tomllib.load(fh)
        except tomllib.TOMLDecodeError as exc:
            raise click.ClickException(f"Invalid TOML in {path}: {exc}") from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        # Only configuration sections; resolved paths and flags never come from TOML.
        return {k: v for k, v in self._data.items() if k in ("network", "query")}


class FriendgraphSettings(BaseSettings):
    """Resolved settings for one CLI invocation.

    Attributes:
        workspace_root: Base for a relative ``network.data_file``; the
            directory holding ``friendgraph.toml``, else the CWD.
        config_path: The TOML file that was read, if any.
        data_file: Absolute ``--data`` override, if given.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "FRIENDGRAPH_",
        "env_nested_delimiter": "__",
    }

    workspace_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None
    data_file: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    network: NetworkConfig = Field(default_factory=NetworkConfig)
    query: QueryConfig = Field(default_factory=QueryConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Kwargs, then env, then TOML; dotenv and secrets files are not used."""
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
        workspace_root: Path | None = None,
        data_file: str | None = None,
        **cli_flags: Any,
    ) -> FriendgraphSettings:
        """Build settings for a CLI run.

        An explicit *config_path* that does not exist is ignored rather
        than searched around. *data_file* is made absolute against the CWD
        so it means what the user typed.
        """
        if config_path:
            candidate = Path(config_path)
            toml_path = candidate if candidate.is_file() else None
        else:
            toml_path = find_config(workspace_root)

        if workspace_root is None:
            workspace_root = toml_path.parent if toml_path else Path.cwd()
        if data_file:
            cli_flags["data_file"] = Path(data_file).absolute()

        token = _active_toml.set(toml_path)
        try:
            return cls(workspace_root=workspace_root, config_path=toml_path, **cli_flags)
        finally:
            _active_toml.reset(token)
