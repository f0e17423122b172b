"""Shared fixtures: a throwaway project tree and settings pointing at it."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path

import pytest

from stylepipe.config import Settings


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def wait_for(predicate: Callable[[], bool], timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.02)
    return predicate()


@pytest.fixture
def project(tmp_path: Path) -> Path:
    (tmp_path / "sass").mkdir()
    return tmp_path


@pytest.fixture
def make_settings(project: Path) -> Callable[..., Settings]:
    def factory(**overrides) -> Settings:
        values = {
            "source_dir": project / "sass",
            "dest_dir": project / "static",
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return factory


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
