"""Tests for stylepipe/config.py."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from stylepipe.config import Settings


class TestDefaults:
    """Out-of-the-box configuration."""

    def test_defaults(self, monkeypatch):
        """Defaults mirror the sass/ -> static/ layout."""
        for key in ("SOURCE_DIR", "DEST_DIR", "BROWSERS", "PREFIXER"):
            monkeypatch.delenv(f"STYLEPIPE_{key}", raising=False)
        settings = Settings(_env_file=None)

        assert settings.source_dir == Path("sass")
        assert settings.source_glob == "**/*.scss"
        assert settings.dest_dir == Path("static")
        assert settings.output_style == "compressed"
        assert settings.browsers == ["last 2 versions"]
        assert settings.prefixer == "builtin"
        assert settings.skip_partials is True

    def test_import_paths_start_with_source_dir(self):
        """The source root is always searched for imports first."""
        settings = Settings(_env_file=None, source_dir="src", include_paths=["vendor"])
        assert settings.import_paths == ["src", "vendor"]


class TestEnvironment:
    """Values read from STYLEPIPE_* variables."""

    def test_comma_separated_browsers(self, monkeypatch):
        monkeypatch.setenv("STYLEPIPE_BROWSERS", "last 2 versions, > 1%")
        settings = Settings(_env_file=None)
        assert settings.browsers == ["last 2 versions", "> 1%"]

    def test_json_browsers(self, monkeypatch):
        monkeypatch.setenv("STYLEPIPE_BROWSERS", '["defaults", "not dead"]')
        settings = Settings(_env_file=None)
        assert settings.browsers == ["defaults", "not dead"]

    def test_paths_and_style(self, monkeypatch):
        monkeypatch.setenv("STYLEPIPE_SOURCE_DIR", "assets/scss")
        monkeypatch.setenv("STYLEPIPE_OUTPUT_STYLE", "expanded")
        settings = Settings(_env_file=None)
        assert settings.source_dir == Path("assets/scss")
        assert settings.output_style == "expanded"

    def test_log_level_is_upper_cased(self, monkeypatch):
        monkeypatch.setenv("STYLEPIPE_LOG_LEVEL", "debug")
        assert Settings(_env_file=None).log_level == "DEBUG"

    def test_unknown_log_level_rejected(self, monkeypatch):
        monkeypatch.setenv("STYLEPIPE_LOG_LEVEL", "chatty")
        with pytest.raises(ValidationError, match="unknown log level"):
            Settings(_env_file=None)


class TestValidation:
    """Rejected configuration."""

    def test_empty_glob_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, source_glob="  ")

    def test_negative_debounce_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, watch_debounce=-1)

    def test_unknown_output_style_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, output_style="tiny")

    def test_leading_slash_stripped_from_glob(self):
        assert Settings(_env_file=None, source_glob="/**/*.scss").source_glob == (
            "**/*.scss"
        )
