"""Locate the stylesheet sources selected by a glob rooted at a base directory."""

from __future__ import annotations

import os
import re
from functools import lru_cache
from pathlib import Path


_VISIBLE = r"(?!\.)[^/]+"


@lru_cache(maxsize=32)
def compile_glob(pattern: str) -> re.Pattern[str]:
    """Translate a glob into a regex over POSIX-style relative paths.

    ``*`` and ``?`` never cross a ``/``; ``**/`` matches zero or more
    directories and a trailing ``**`` matches everything below. Wildcards do
    not match a leading ``.`` in a path segment (hidden files, editor locks);
    name the dot in the pattern to select those.
    """
    parts: list[str] = []
    i = 0
    while i < len(pattern):
        segment_start = i == 0 or pattern[i - 1] == "/"
        if pattern.startswith("**/", i):
            parts.append(rf"(?:{_VISIBLE}/)*")
            i += 3
        elif pattern.startswith("**", i):
            parts.append(rf"(?:{_VISIBLE}(?:/{_VISIBLE})*)?")
            i += 2
        elif pattern[i] == "*":
            parts.append(r"(?!\.)[^/]*" if segment_start else "[^/]*")
            i += 1
        elif pattern[i] == "?":
            parts.append(r"[^/.]" if segment_start else "[^/]")
            i += 1
        else:
            parts.append(re.escape(pattern[i]))
            i += 1
    return re.compile("".join(parts) + r"\Z")


def is_partial(path: Path) -> bool:
    return path.name.startswith("_")


def relative_to_base(path: Path | str, source_dir: Path) -> str | None:
    """Return ``path`` relative to ``source_dir`` in POSIX form, or None."""
    try:
        rel = Path(os.path.abspath(path)).relative_to(os.path.abspath(source_dir))
    except ValueError:
        return None
    return rel.as_posix()


def matches(path: Path | str, source_dir: Path, pattern: str) -> bool:
    """Whether ``path`` falls inside the glob; the file need not exist."""
    rel = relative_to_base(path, source_dir)
    if not rel or rel == ".":
        return False
    return compile_glob(pattern).match(rel) is not None


def discover(source_dir: Path, pattern: str) -> list[Path]:
    """Return every regular file under ``source_dir`` matching ``pattern``.

    An empty match set is not an error. A missing base directory is.
    """
    if not source_dir.is_dir():
        raise FileNotFoundError(f"Missing SCSS source directory: {source_dir}")

    regex = compile_glob(pattern)
    found = [
        path
        for path in source_dir.rglob("*")
        if path.is_file() and regex.match(path.relative_to(source_dir).as_posix())
    ]
    return sorted(found)
