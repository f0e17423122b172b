"""Tests for stylepipe/discovery.py."""

from __future__ import annotations

import pytest

from stylepipe.discovery import compile_glob, discover, is_partial, matches

from .conftest import write


class TestCompileGlob:
    """Glob to regex translation."""

    @pytest.mark.parametrize(
        ("pattern", "path", "expected"),
        [
            ("**/*.scss", "main.scss", True),
            ("**/*.scss", "pages/home/main.scss", True),
            ("**/*.scss", "main.css", False),
            ("*.scss", "main.scss", True),
            ("*.scss", "pages/main.scss", False),
            ("pages/**/*.scss", "pages/a/b.scss", True),
            ("pages/**/*.scss", "pages/b.scss", True),
            ("pages/**/*.scss", "other/b.scss", False),
            ("theme-?.scss", "theme-a.scss", True),
            ("theme-?.scss", "theme-ab.scss", False),
            ("site.scss", "site.scss", True),
            ("site.scss", "siteXscss", False),
            ("**/*.scss", ".hidden.scss", False),
            ("**/*.scss", "pages/.#site.scss", False),
            ("**/*.scss", ".cache/site.scss", False),
            ("*.scss", ".#site.scss", False),
            ("?theme.scss", ".theme.scss", False),
            ("pages/**", "pages/.git/HEAD", False),
            ("pages/**", "pages/a/b.scss", True),
            (".theme.scss", ".theme.scss", True),
            (".cache/*.scss", ".cache/site.scss", True),
            ("**/.*.scss", "pages/.hidden.scss", True),
            ("site*.scss", "site.min.scss", True),
        ],
    )
    def test_patterns(self, pattern, path, expected):
        assert (compile_glob(pattern).match(path) is not None) is expected


class TestDiscover:
    """File discovery under the base directory."""

    def test_finds_nested_sources_sorted(self, project):
        base = project / "sass"
        write(base / "site.scss", "")
        write(base / "pages" / "home.scss", "")
        write(base / "pages" / "notes.txt", "")
        write(base / "_vars.scss", "")

        found = discover(base, "**/*.scss")

        assert [p.relative_to(base).as_posix() for p in found] == [
            "_vars.scss",
            "pages/home.scss",
            "site.scss",
        ]

    def test_empty_match_set(self, project):
        """No matches is an empty list, not an error."""
        assert discover(project / "sass", "**/*.scss") == []

    def test_hidden_files_skipped(self, project):
        """Dotfiles and editor lock files are not picked up by wildcards."""
        base = project / "sass"
        write(base / "site.scss", "")
        write(base / ".hidden.scss", "")
        write(base / ".sass-cache" / "site.scss", "")

        assert discover(base, "**/*.scss") == [base / "site.scss"]

    def test_directories_are_not_files(self, project):
        (project / "sass" / "odd.scss").mkdir()
        assert discover(project / "sass", "**/*.scss") == []

    def test_missing_source_dir(self, project):
        with pytest.raises(FileNotFoundError, match="Missing SCSS source directory"):
            discover(project / "nope", "**/*.scss")


class TestMatches:
    """Path membership checks used by the watcher."""

    def test_deleted_file_still_matches(self, project):
        base = project / "sass"
        assert matches(base / "gone" / "old.scss", base, "**/*.scss")

    def test_path_outside_base(self, project):
        assert not matches(project / "other.scss", project / "sass", "**/*.scss")

    def test_base_itself(self, project):
        assert not matches(project / "sass", project / "sass", "**")

    def test_editor_lock_file_ignored(self, project):
        base = project / "sass"
        assert not matches(base / ".#site.scss", base, "**/*.scss")

    def test_string_paths(self, project):
        base = project / "sass"
        assert matches(str(base / "a.scss"), base, "*.scss")
        assert not matches(str(base / "a.css"), base, "*.scss")


def test_is_partial(tmp_path):
    assert is_partial(tmp_path / "_mixins.scss")
    assert not is_partial(tmp_path / "site.scss")
