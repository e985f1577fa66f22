"""Core data models for mkdist."""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath


@dataclass(frozen=True)
class InputDescriptor:
    """Read-on-demand handle to one source file (or embedded sub-content).

    ``path`` is the destination-relative path including the source extension.
    Contents are fetched through ``reader`` the first time ``get_contents()``
    is called and memoized afterwards, so a loader that declines never reads
    the file and a recursive loader never reads it twice.
    """

    path: str
    extension: str
    reader: Callable[[], str] = field(repr=False, compare=False)
    src_path: str | None = None
    _cache: dict = field(default_factory=dict, init=False, repr=False, compare=False)
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def get_contents(self) -> str:
        with self._lock:
            if "contents" not in self._cache:
                self._cache["contents"] = self.reader()
            return self._cache["contents"]

    @classmethod
    def from_file(cls, file: Path, path: str) -> InputDescriptor:
        """Descriptor for a file on disk, written under ``path`` in the dist tree."""
        return cls(
            path=path,
            extension=file.suffix,
            reader=lambda: file.read_text(encoding="utf-8"),
            src_path=str(file),
        )

    @classmethod
    def from_text(cls, path: str, text: str, src_path: str | None = None) -> InputDescriptor:
        """Descriptor for in-memory text, e.g. a script block cut out of a markup file."""
        return cls(
            path=path,
            extension=PurePosixPath(path).suffix,
            reader=lambda: text,
            src_path=src_path,
        )


@dataclass
class OutputDescriptor:
    """One artifact produced by a loader.

    ``path`` still carries the source extension; the writer swaps it for
    ``extension`` when one is set.
    """

    path: str
    contents: str | None
    extension: str | None = None
    src_path: str | None = None
    declaration: bool = False
    source_file: Path | None = None  # raw byte copy when contents is None


@dataclass
class FileFailure:
    """A file whose loader raised; reported, never fatal to the run."""

    path: str
    error: Exception

    @property
    def message(self) -> str:
        return f"{type(self.error).__name__}: {self.error}"
