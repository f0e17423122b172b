"""Compile SCSS sources into prefixed, compressed CSS."""

from __future__ import annotations

__version__ = "0.1.0"
