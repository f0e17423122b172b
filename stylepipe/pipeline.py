"""Compile SCSS sources into prefixed CSS under the static directory."""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Literal

import sass

from stylepipe.config import Settings
from stylepipe.discovery import discover, is_partial
from stylepipe.observability import bind_build_id
from stylepipe.processors import CssProcessor, build_processors

logger = logging.getLogger(__name__)

FileStatus = Literal["compiled", "failed", "skipped"]


@dataclass
class FileResult:
    """Outcome for one discovered source file."""

    source: Path
    status: FileStatus
    output: Path | None = None
    diagnostic: str | None = None

    @property
    def ok(self) -> bool:
        return self.status != "failed"


@dataclass
class BuildReport:
    """Batch report for one run of the pipeline."""

    build_id: str
    started_at: datetime
    finished_at: datetime | None = None
    results: list[FileResult] = field(default_factory=list)
    elapsed: float = 0.0

    def _with_status(self, status: FileStatus) -> list[FileResult]:
        return [r for r in self.results if r.status == status]

    @property
    def compiled(self) -> list[FileResult]:
        return self._with_status("compiled")

    @property
    def failed(self) -> list[FileResult]:
        return self._with_status("failed")

    @property
    def skipped(self) -> list[FileResult]:
        return self._with_status("skipped")

    @property
    def ok(self) -> bool:
        return not self.failed


def output_path(source: Path, settings: Settings) -> Path:
    """Mirror ``source`` under the destination directory with a .css suffix."""
    relative = source.relative_to(settings.source_dir)
    return settings.dest_dir / relative.with_suffix(".css")


def compile_scss(source: Path, settings: Settings) -> str:
    """Run libsass on one file. Raises ``sass.CompileError`` on bad input."""
    return sass.compile(
        filename=str(source),
        output_style=settings.output_style,
        include_paths=settings.import_paths,
    )


def build_file(
    source: Path, settings: Settings, processors: Sequence[CssProcessor]
) -> FileResult:
    if settings.skip_partials and is_partial(source):
        return FileResult(source=source, status="skipped")

    try:
        css = compile_scss(source, settings)
    except sass.CompileError as exc:
        return FileResult(source=source, status="failed", diagnostic=str(exc).strip())

    for processor in processors:
        css = processor.process(css, source)

    dest = output_path(source, settings)
    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_text(css, encoding="utf-8")
    logger.debug("Compiled %s -> %s", source, dest)
    return FileResult(source=source, status="compiled", output=dest)


def build(
    settings: Settings, processors: Sequence[CssProcessor] | None = None
) -> BuildReport:
    """Compile every matched source; one bad file never stops the batch.

    Only stylesheet compile errors are captured (as failed results). A missing
    source directory, an unwritable destination or a broken post-processor
    propagate to the caller.
    """
    if processors is None:
        processors = build_processors(settings)

    with bind_build_id() as current_id:
        report = BuildReport(build_id=current_id, started_at=datetime.now(UTC))
        start = time.perf_counter()
        for source in discover(settings.source_dir, settings.source_glob):
            report.results.append(build_file(source, settings, processors))
        report.elapsed = time.perf_counter() - start
        report.finished_at = datetime.now(UTC)
    return report


def log_report(report: BuildReport) -> None:
    """Route compile diagnostics and a summary line to the log."""
    with bind_build_id(report.build_id):
        for result in report.failed:
            logger.error("Failed to compile %s\n%s", result.source, result.diagnostic)
        logger.info(
            "Compiled %d file(s), %d failed, %d skipped in %.2fs",
            len(report.compiled),
            len(report.failed),
            len(report.skipped),
            report.elapsed,
        )
