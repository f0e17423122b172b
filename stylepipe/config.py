"""Build settings for the stylesheet pipeline."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_BROWSERS = ["last 2 versions"]


def _parse_list(value: str | list[str] | None) -> list[str]:
    """Normalize list-valued env input (JSON list or comma separated)."""
    if isinstance(value, list):
        return value
    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            return []
        if raw.startswith("["):
            try:
                parsed = json.loads(raw)
                if isinstance(parsed, list):
                    return [str(item) for item in parsed]
            except json.JSONDecodeError:
                pass
        return [item.strip() for item in raw.split(",") if item.strip()]
    return []


class Settings(BaseSettings):
    """Central configuration entrypoint for the `sass` and `watch` actions."""

    model_config = SettingsConfigDict(
        env_prefix="STYLEPIPE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Sources
    source_dir: Path = Path("sass")
    source_glob: str = "**/*.scss"
    include_paths: Annotated[list[str], NoDecode] = []
    skip_partials: bool = True

    # Output
    dest_dir: Path = Path("static")
    output_style: Literal["nested", "expanded", "compact", "compressed"] = "compressed"

    # Post-processing
    browsers: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_BROWSERS)
    )
    prefixer: Literal["builtin", "postcss", "none"] = "builtin"
    postcss_command: str = "npx --no-install postcss --use autoprefixer --no-map"

    # Watch
    watch_debounce: float = Field(default=0.2, ge=0)
    build_on_start: bool = False

    # Observability
    log_level: str = "INFO"
    log_format: Literal["text", "json"] = "text"

    @field_validator("browsers", "include_paths", mode="before")
    @classmethod
    def parse_list_values(cls, value: str | list[str] | None) -> list[str]:
        """Accept JSON or comma separated lists from the environment."""
        return _parse_list(value)

    @field_validator("source_glob")
    @classmethod
    def require_glob(cls, value: str) -> str:
        value = value.strip().lstrip("/")
        if not value:
            raise ValueError("source_glob must not be empty")
        return value

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level: {value!r}")
        return level

    @property
    def import_paths(self) -> list[str]:
        """libsass include paths: the source root first, then extras."""
        return [str(self.source_dir), *self.include_paths]


settings = Settings()
