"""mkdist error types and utilities."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


# Read once at import; os.umask() can only be queried by setting it
_UMASK = _current_umask()


def atomic_write(path: Path, content: str | bytes) -> None:
    """Write content to a file atomically using temp file + rename.

    Writes to a temporary file in the same directory, fsyncs it,
    then atomically replaces the target path. The result gets the same
    permissions as a freshly created file (``0o666`` minus the umask)
    instead of the owner-only mode of the temporary file.
    """
    data = content.encode() if isinstance(content, str) else content
    fd, tmp = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    closed = False
    try:
        os.write(fd, data)
        os.fsync(fd)
        os.close(fd)
        closed = True
        os.chmod(tmp, 0o666 & ~_UMASK)
        os.replace(tmp, str(path))
    except BaseException:
        if not closed:
            os.close(fd)
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise


class MkdistError(Exception):
    """Base exception for mkdist."""

    pass


class ConfigError(MkdistError, ValueError):
    """Invalid build configuration (unknown loader, format, dialect)."""

    pass


class WalkError(MkdistError):
    """The source tree cannot be enumerated."""

    pass


class TransformError(MkdistError):
    """An external transform failed for one file."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path
