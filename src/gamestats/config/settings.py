"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``GAMESTATS_*`` prefix, ``__`` for nested sections
  3. TOML file    — ``gamestats.toml`` discovered via walk-up
  4. Code defaults — baked into the section models
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from gamestats.config.discovery import find_config
from gamestats.config.models import ContentConfig, ExportConfig, ParserConfig, TeamsConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``gamestats.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# TOML path handed to settings_customise_sources during construction.
_tls = threading.local()


class GameStatsSettings(BaseSettings):
    """Unified settings for the gamestats CLI and library.

    Attributes:
        content_root: Directory the ``[content]`` paths are relative to
            (parent of ``gamestats.toml``, or CWD if no config found).
        config_path: The TOML file in effect, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "GAMESTATS_",
        "env_nested_delimiter": "__",
    }

    content_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    content: ContentConfig = Field(default_factory=ContentConfig)
    parser: ParserConfig = Field(default_factory=ParserConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    teams: TeamsConfig = Field(default_factory=TeamsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        content_root: Path | None = None,
        **cli_flags: Any,
    ) -> GameStatsSettings:
        """Construct settings from a CLI invocation.

        Discovers ``gamestats.toml`` via walk-up (or explicit *config_path*),
        resolves *content_root* from the config file's parent directory,
        and merges CLI flags as highest-priority overrides.

        Raises:
            click.ClickException: If an explicit *config_path* does not
                exist or the TOML is invalid.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if not p.is_file():
                msg = f"Config file not found: {config_path}"
                raise click.ClickException(msg)
            toml_path = p
        else:
            toml_path = find_config(content_root)

        resolved_root = content_root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(
                content_root=resolved_root,
                config_path=toml_path,
                **cli_flags,
            )
        finally:
            _tls.toml_path = None

    def resolve_dir(self, relative: str) -> Path:
        """Resolve a ``[content]`` directory against the content root."""
        path = Path(relative)
        return path if path.is_absolute() else self.content_root / path

    @property
    def games_path(self) -> Path:
        return self.resolve_dir(self.content.games_dir)

    @property
    def evaluations_path(self) -> Path:
        return self.resolve_dir(self.content.evaluations_dir)

    @property
    def templates_path(self) -> Path:
        return self.resolve_dir(self.content.templates_dir)
