"""Command line entry point: ``stylepipe sass`` and ``stylepipe watch``."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from stylepipe import __version__
from stylepipe.config import Settings
from stylepipe.config import settings as default_settings
from stylepipe.console import print_error, print_info, print_success
from stylepipe.observability import configure_logging
from stylepipe.pipeline import BuildReport, build, log_report
from stylepipe.watcher import StyleWatcher


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--source", type=Path, help="SCSS base directory")
    parser.add_argument("--dest", type=Path, help="Output directory for CSS")
    parser.add_argument("--glob", help="Source glob relative to --source")
    parser.add_argument(
        "--style",
        choices=["nested", "expanded", "compact", "compressed"],
        help="libsass output style",
    )
    parser.add_argument(
        "--prefixer",
        choices=["builtin", "postcss", "none"],
        help="Vendor-prefixing backend",
    )
    parser.add_argument("--log-level", help="Log level (default: INFO)")
    parser.add_argument("--log-format", choices=["text", "json"])


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stylepipe",
        description="Compile SCSS to compressed, vendor-prefixed CSS",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    actions = parser.add_subparsers(dest="action", required=True)

    sass_cmd = actions.add_parser("sass", help="Compile all matched sources once")
    _add_common_options(sass_cmd)
    sass_cmd.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when any file fails to compile",
    )

    watch_cmd = actions.add_parser("watch", help="Recompile whenever a source changes")
    _add_common_options(watch_cmd)
    watch_cmd.add_argument(
        "--debounce", type=float, help="Seconds of quiet before rebuilding"
    )
    watch_cmd.add_argument(
        "--build-on-start",
        action="store_true",
        default=None,
        help="Run one build before waiting for changes",
    )
    return parser


_OVERRIDES = {
    "source": "source_dir",
    "dest": "dest_dir",
    "glob": "source_glob",
    "style": "output_style",
    "prefixer": "prefixer",
    "log_level": "log_level",
    "log_format": "log_format",
    "debounce": "watch_debounce",
    "build_on_start": "build_on_start",
}


def resolve_settings(args: argparse.Namespace, base: Settings) -> Settings:
    """Overlay command-line flags on top of env/.env settings."""
    update: dict[str, Any] = {}
    for arg, field_name in _OVERRIDES.items():
        value = getattr(args, arg, None)
        if value is not None:
            update[field_name] = value
    if not update:
        return base
    # re-validate so flag values get the same checks as env values
    return Settings.model_validate({**base.model_dump(), **update})


def _describe(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )


def _summarize(report: BuildReport) -> None:
    for result in report.compiled:
        print_success(f"Compiled {result.source} -> {result.output}")
    for result in report.failed:
        print_error(f"Failed {result.source}")
    if not report.results:
        print_info("No stylesheets matched")


def run_sass(settings: Settings, strict: bool = False) -> int:
    report = build(settings)
    log_report(report)
    _summarize(report)
    if strict and not report.ok:
        return 1
    return 0


def run_watch(settings: Settings) -> int:
    print_info(f"Watching {settings.source_dir} for changes. Press Ctrl+C to stop")
    StyleWatcher(settings).run_forever()
    return 0


def main(argv: Sequence[str] | None = None, base: Settings | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = resolve_settings(args, base or default_settings)
    except ValidationError as exc:
        parser.error(_describe(exc))
    configure_logging(settings.log_level, settings.log_format)

    if args.action == "sass":
        return run_sass(settings, strict=args.strict)
    return run_watch(settings)


if __name__ == "__main__":
    sys.exit(main())
