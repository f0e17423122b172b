"""Coloured status lines for the command line."""

from __future__ import annotations

import os
import sys


class Colors:
    RED = "\033[0;31m"
    GREEN = "\033[0;32m"
    CYAN = "\033[0;36m"
    NC = "\033[0m"  # No Color


def _use_color() -> bool:
    return "NO_COLOR" not in os.environ and sys.stdout.isatty()


def print_colored(message: str, color: str = Colors.NC) -> None:
    if _use_color():
        print(f"{color}{message}{Colors.NC}")
    else:
        print(message)


def print_success(message: str) -> None:
    print_colored(f"✓ {message}", Colors.GREEN)


def print_error(message: str) -> None:
    print_colored(f"✗ {message}", Colors.RED)


def print_info(message: str) -> None:
    print_colored(message, Colors.CYAN)
