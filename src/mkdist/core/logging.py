"""Structured logging and verbosity levels for mkdist runs."""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape


class Verbosity(IntEnum):
    """Verbosity levels for console output."""

    DEFAULT = 0   # Written file list only
    VERBOSE = 1   # + per-file status
    DEBUG = 2     # + per-artifact details, timing


@dataclass
class FileLog:
    """Per-file processing record."""

    path: str
    status: str = "pending"  # loaded | copied | skipped | failed
    outputs: int = 0
    declarations: int = 0
    time_seconds: float = 0.0
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "status": self.status,
            "outputs": self.outputs,
            "declarations": self.declarations,
            "time_seconds": self.time_seconds,
            "error": self.error,
        }


@dataclass
class RunLog:
    """Structured log of a complete run.

    The dict format is::

        {
            "run_id": "20240315T101500Z",
            "files": {
                "index.ts": {"status": "loaded", "outputs": 2, "declarations": 1, ...},
                "README.md": {"status": "copied", "outputs": 1, ...},
            },
            "total_loaded": 1,
            "total_copied": 1,
            "total_skipped": 0,
            "total_failed": 0,
            "total_written": 3,
            "total_time": 0.4,
        }
    """

    run_id: str = ""
    files: dict[str, FileLog] = field(default_factory=dict)
    total_time: float = 0.0
    total_loaded: int = 0
    total_copied: int = 0
    total_skipped: int = 0
    total_failed: int = 0
    total_written: int = 0

    def get_or_create_file(self, path: str) -> FileLog:
        """Get existing file log or create a new one."""
        if path not in self.files:
            self.files[path] = FileLog(path=path)
        return self.files[path]

    def finalize(self) -> None:
        """Compute totals from file data."""
        statuses = [f.status for f in self.files.values()]
        self.total_loaded = statuses.count("loaded")
        self.total_copied = statuses.count("copied")
        self.total_skipped = statuses.count("skipped")
        self.total_failed = statuses.count("failed")

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "files": {path: f.to_dict() for path, f in self.files.items()},
            "total_loaded": self.total_loaded,
            "total_copied": self.total_copied,
            "total_skipped": self.total_skipped,
            "total_failed": self.total_failed,
            "total_written": self.total_written,
            "total_time": self.total_time,
        }


class BuildLogger:
    """Structured logger for mkdist runs.

    Optionally writes a JSONL event log to ``log_dir`` and prints console
    output via Rich based on verbosity level.
    """

    def __init__(
        self,
        verbosity: Verbosity = Verbosity.DEFAULT,
        log_dir: Path | None = None,
        console: Console | None = None,
    ):
        self.verbosity = verbosity
        self.console = console or Console()
        self.run_log = RunLog(
            run_id=datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ"),
        )
        self._log_file = None
        self._log_path: Path | None = None
        self._run_start = 0.0

        if log_dir is not None:
            log_dir.mkdir(parents=True, exist_ok=True)
            self._log_path = log_dir / f"{self.run_log.run_id}.jsonl"
            self._log_file = open(self._log_path, "a")

    @property
    def log_path(self) -> Path | None:
        return self._log_path

    def _write_event(self, event: dict[str, Any]) -> None:
        if self._log_file is not None:
            event["timestamp"] = datetime.now(timezone.utc).isoformat()
            self._log_file.write(json.dumps(event) + "\n")
            self._log_file.flush()

    def _console_print(self, message: str, min_verbosity: Verbosity) -> None:
        if self.verbosity >= min_verbosity:
            self.console.print(message)

    # -- Run lifecycle --

    def run_start(self, src_dir: Path, dist_dir: Path, file_count: int) -> None:
        self._run_start = time.time()
        self._write_event({
            "event": "run_start",
            "src_dir": str(src_dir),
            "dist_dir": str(dist_dir),
            "file_count": file_count,
        })
        self._console_print(
            f"[bold]Building[/bold] {file_count} file(s) from {escape(str(src_dir))}",
            Verbosity.VERBOSE,
        )

    def run_finish(self, written: int) -> None:
        """Log the completion of a run and finalize stats."""
        self.run_log.total_time = time.time() - self._run_start
        self.run_log.total_written = written
        self.run_log.finalize()

        self._write_event({
            "event": "run_finish",
            "total_time": round(self.run_log.total_time, 3),
            "total_written": written,
            "total_failed": self.run_log.total_failed,
        })
        self.close()

    # -- File events --

    def file_loaded(self, path: str, outputs: int, declarations: int, elapsed: float) -> None:
        """Log a file handled by a loader."""
        entry = self.run_log.get_or_create_file(path)
        entry.status = "loaded"
        entry.outputs = outputs
        entry.declarations = declarations
        entry.time_seconds = elapsed

        self._write_event({
            "event": "file_loaded",
            "path": path,
            "outputs": outputs,
            "declarations": declarations,
            "time_seconds": round(elapsed, 3),
        })
        self._console_print(f"  [green]+[/green] {escape(path)}", Verbosity.VERBOSE)
        self._console_print(
            f"    [dim]{outputs} output(s), {declarations} declaration(s), {elapsed:.2f}s[/dim]",
            Verbosity.DEBUG,
        )

    def file_copied(self, path: str) -> None:
        """Log a file no loader accepted, copied as-is."""
        entry = self.run_log.get_or_create_file(path)
        entry.status = "copied"
        entry.outputs = 1

        self._write_event({"event": "file_copied", "path": path})
        self._console_print(f"  [cyan]=[/cyan] {escape(path)} (copied)", Verbosity.VERBOSE)

    def file_skipped(self, path: str) -> None:
        """Log a file no loader accepted and that was not copied."""
        self.run_log.get_or_create_file(path).status = "skipped"

        self._write_event({"event": "file_skipped", "path": path})
        self._console_print(f"  [dim]-[/dim] {escape(path)} (skipped)", Verbosity.DEBUG)

    def file_failed(self, path: str, error: str) -> None:
        """Log a file whose loader raised."""
        entry = self.run_log.get_or_create_file(path)
        entry.status = "failed"
        entry.error = error

        self._write_event({"event": "file_failed", "path": path, "error": error})
        self._console_print(
            f"  [red]x[/red] {escape(path)}: {escape(error)}", Verbosity.DEFAULT
        )

    def close(self) -> None:
        """Close the log file if open."""
        if self._log_file is not None:
            self._log_file.close()
            self._log_file = None
