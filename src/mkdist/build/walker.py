"""Source tree discovery — glob filtering and alias remapping."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path

from mkdist.core.errors import WalkError
from mkdist.core.models import InputDescriptor


@dataclass(frozen=True)
class SourceFile:
    """A discovered file and where it lands in the dist tree."""

    file: Path
    relative: str  # posix path relative to the source dir
    path: str      # destination-relative path after aliasing

    def to_input(self) -> InputDescriptor:
        return InputDescriptor.from_file(self.file, self.path)


def _match_segments(parts: list[str], segments: list[str]) -> bool:
    if not segments:
        return not parts
    head, rest = segments[0], segments[1:]
    if head == "**":
        # zero or more whole directories
        return any(_match_segments(parts[i:], rest) for i in range(len(parts) + 1))
    return bool(parts) and fnmatchcase(parts[0], head) and _match_segments(parts[1:], rest)


def _matches(relative: str, pattern: str) -> bool:
    """Glob match where ``*``, ``?`` and ``[...]`` stay inside one path segment."""
    return _match_segments(relative.split("/"), pattern.strip("/").split("/"))


def split_patterns(patterns: Iterable[str]) -> tuple[list[str], list[str]]:
    """Separate include patterns from ``!``-prefixed exclude patterns."""
    includes: list[str] = []
    excludes: list[str] = []
    for pattern in patterns:
        pattern = pattern.strip()
        if not pattern:
            continue
        if pattern.startswith("!"):
            excludes.append(pattern[1:])
        else:
            includes.append(pattern)
    return includes or ["**"], excludes


def apply_alias(relative: str, alias: Mapping[str, str]) -> str:
    """Remap the longest matching directory prefix of ``relative``."""
    normalized = {_clean(k): _clean(v) for k, v in alias.items() if _clean(k)}
    matches = [k for k in normalized if relative == k or relative.startswith(k + "/")]
    if not matches:
        return relative
    prefix = max(matches, key=len)
    target = normalized[prefix]
    rest = relative[len(prefix):].lstrip("/")
    if target and rest:
        return f"{target}/{rest}"
    return target or rest


def _clean(prefix: str) -> str:
    return prefix.removeprefix("./").strip("/")


def walk(
    src_dir: Path,
    pattern: str | Iterable[str] = ("**",),
    alias: Mapping[str, str] | None = None,
) -> list[SourceFile]:
    """List source files under ``src_dir``, shallow files first, then by path.

    Dotfiles and dot-directories are ignored.
    """
    src_dir = Path(src_dir)
    if not src_dir.is_dir():
        raise WalkError(f"Source directory not found: {src_dir}")

    includes, excludes = split_patterns([pattern] if isinstance(pattern, str) else pattern)
    alias = alias or {}

    found: list[SourceFile] = []
    for file in src_dir.rglob("*"):
        if not file.is_file():
            continue
        rel = file.relative_to(src_dir)
        if any(part.startswith(".") for part in rel.parts):
            continue
        relative = rel.as_posix()
        if not any(_matches(relative, p) for p in includes):
            continue
        if any(_matches(relative, p) for p in excludes):
            continue
        found.append(SourceFile(file=file, relative=relative, path=apply_alias(relative, alias)))

    found.sort(key=lambda sf: (len(Path(sf.relative).parts), sf.relative))
    return found
