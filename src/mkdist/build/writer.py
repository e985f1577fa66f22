"""Dist writer — persist output descriptors under the dist directory."""

from __future__ import annotations

import os
import shutil
from collections.abc import Iterable
from pathlib import Path

from mkdist.build.resolver import apply_extension
from mkdist.core.errors import MkdistError, atomic_write
from mkdist.core.models import OutputDescriptor


class DistWriter:
    """Writes artifacts to ``dist_dir/<path with resolved extension>``.

    Tracks every path written through it; a path written twice keeps its
    first position in ``written`` and the last contents on disk.
    """

    def __init__(self, dist_dir: Path):
        self.dist_dir = Path(dist_dir).absolute()
        self._written: dict[Path, None] = {}

    @property
    def written(self) -> list[Path]:
        return list(self._written)

    def target_for(self, output: OutputDescriptor) -> Path:
        target = Path(os.path.normpath(self.dist_dir / apply_extension(output.path, output.extension)))
        if not target.is_relative_to(self.dist_dir):
            raise MkdistError(f"Refusing to write outside {self.dist_dir}: {output.path}")
        return target

    def write(self, output: OutputDescriptor) -> Path:
        target = self.target_for(output)
        target.parent.mkdir(parents=True, exist_ok=True)
        if output.contents is None:
            if output.source_file is None:
                raise MkdistError(f"Nothing to write for {output.path}")
            shutil.copyfile(output.source_file, target)
        else:
            atomic_write(target, output.contents)
        self._written.setdefault(target, None)
        return target

    def write_all(self, outputs: Iterable[OutputDescriptor]) -> list[Path]:
        for output in outputs:
            self.write(output)
        return self.written
