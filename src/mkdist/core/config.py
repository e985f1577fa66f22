"""Build options shared by every loader of a run."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from mkdist.core.errors import ConfigError

FORMATS = ("esm", "cjs")

DEFAULT_LOADERS = ("js", "vue", "sass", "css")

# Dialect name -> source extensions eligible for declaration emission
DECLARATION_DIALECTS: dict[str, tuple[str, ...]] = {
    "ts": (".ts", ".mts", ".cts", ".tsx"),
    "js": (".js", ".mjs", ".cjs", ".jsx"),
}


@dataclass(frozen=True)
class EsbuildOptions:
    """Options forwarded to the syntax transformer."""

    jsx: str | None = None  # transform | preserve | automatic
    jsx_factory: str | None = None
    jsx_fragment: str | None = None
    minify: bool = False
    target: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> EsbuildOptions:
        known = {f.name for f in dataclasses.fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known and v is not None})


def _parse_declaration(value: Any) -> frozenset[str] | None:
    """Resolve the declaration setting into the set of eligible extensions.

    ``None`` means declarations are off.
    """
    if value is None or value is False:
        return None
    if value is True:
        return frozenset(ext for exts in DECLARATION_DIALECTS.values() for ext in exts)

    if isinstance(value, str):
        names = [v.strip() for v in value.split(",") if v.strip()]
    else:
        names = [str(v).strip() for v in value]

    extensions: set[str] = set()
    for name in names:
        if name in DECLARATION_DIALECTS:
            extensions.update(DECLARATION_DIALECTS[name])
        elif name.startswith("."):
            extensions.add(name)
        else:
            raise ConfigError(
                f"Unknown declaration dialect: {name}. "
                f"Available: {sorted(DECLARATION_DIALECTS)}"
            )
    return frozenset(extensions) if extensions else None


@dataclass(frozen=True)
class BuildOptions:
    """Resolved configuration for one mkdist run.

    Shared read-only by every loader through the loader context.
    ``declaration`` accepts ``False``, ``True``, or dialect names
    (``"ts"``, ``"ts,js"``, ``[".tsx"]``) restricting emission.
    """

    root_dir: Path = field(default_factory=Path.cwd)
    src_dir: str = "src"
    dist_dir: str = "dist"
    pattern: tuple[str, ...] = ("**",)
    alias: dict[str, str] = field(default_factory=dict)
    format: str = "esm"
    ext: str | None = None
    declaration: Any = False
    loaders: tuple = DEFAULT_LOADERS
    esbuild: EsbuildOptions = field(default_factory=EsbuildOptions)
    clean: bool = True
    copy_unhandled: bool = True
    concurrency: int = 1
    declaration_extensions: frozenset[str] | None = field(
        default=None, init=False, repr=False, compare=False
    )

    def __post_init__(self):
        if self.format not in FORMATS:
            raise ConfigError(f"Unknown format: {self.format}. Available: {list(FORMATS)}")
        object.__setattr__(self, "root_dir", Path(self.root_dir))
        if isinstance(self.pattern, str):
            object.__setattr__(self, "pattern", (self.pattern,))
        else:
            object.__setattr__(self, "pattern", tuple(self.pattern))
        object.__setattr__(self, "loaders", tuple(self.loaders))
        if isinstance(self.esbuild, dict):
            object.__setattr__(self, "esbuild", EsbuildOptions.from_dict(self.esbuild))
        object.__setattr__(self, "declaration_extensions", _parse_declaration(self.declaration))
        object.__setattr__(self, "concurrency", max(1, int(self.concurrency)))

    @classmethod
    def from_dict(cls, data: dict) -> BuildOptions:
        """Create BuildOptions from a dict; unknown keys and ``None`` values are ignored."""
        known = {f.name for f in dataclasses.fields(cls) if f.init}
        return cls(**{k: v for k, v in data.items() if k in known and v is not None})

    def replace(self, **changes: Any) -> BuildOptions:
        """Copy with some fields changed."""
        return dataclasses.replace(self, **changes)

    @property
    def src_path(self) -> Path:
        return self.root_dir / self.src_dir

    @property
    def dist_path(self) -> Path:
        return self.root_dir / self.dist_dir

    @property
    def emits_declarations(self) -> bool:
        return self.declaration_extensions is not None

    def wants_declaration(self, extension: str) -> bool:
        """Whether a script with this source extension should get a declaration file."""
        if self.declaration_extensions is None:
            return False
        return extension in self.declaration_extensions
