"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, gamestats.toml only contains
overrides. A content root needs no config file at all when it follows the
default ``content/games`` layout.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ContentConfig(BaseModel):
    """[content] section. Directories are relative to the content root."""

    model_config = {"frozen": True}

    games_dir: str = "content/games"
    evaluations_dir: str = "content/evaluations"
    templates_dir: str = "content/templates"


class ParserConfig(BaseModel):
    """[parser] section."""

    model_config = {"frozen": True}

    generate_excerpt: bool = True
    excerpt_length: int = Field(default=200, gt=0)


class ExportConfig(BaseModel):
    """[export] section."""

    model_config = {"frozen": True}

    delimiter: str = Field(default=",", min_length=1)
    line_ending: str = "\n"
    include_headers: bool = True


class TeamsConfig(BaseModel):
    """[teams] section: bold marker labels of per-team table sections."""

    model_config = {"frozen": True}

    own_label: str = "Clemson"
    rival_label: str = "Opponent"
