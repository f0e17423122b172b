"""Logging setup and build-scoped log context."""

from __future__ import annotations

from stylepipe.observability.logging import (
    BuildIdFilter,
    bind_build_id,
    build_id,
    configure_logging,
)

__all__ = [
    "BuildIdFilter",
    "bind_build_id",
    "build_id",
    "configure_logging",
]
