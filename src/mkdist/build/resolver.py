"""Output extension resolution.

Pure functions: which extension a compiled file gets, and which extension
its declaration sidecar gets so both resolve under the same module rules.
"""

from __future__ import annotations

import posixpath
import re

DECLARATION_RE = re.compile(r"\.d\.[cm]?ts$")
CM_LETTER_RE = re.compile(r"(?<=\.)(c|m)(?=[jt]s$)")
SCRIPT_EXT_RE = re.compile(r"\.(c|m)?[jt]sx?$")

TS_EXTS = frozenset({".ts", ".mts", ".cts"})
JSX_LOADERS = {".tsx": "tsx", ".jsx": "jsx"}

# Conventional extension per module calling convention
FORMAT_EXTENSIONS = {"cjs": ".js", "esm": ".mjs"}


def normalize_extension(ext: str) -> str:
    """Ensure a leading dot: ``mjs`` -> ``.mjs``."""
    return ext if ext.startswith(".") else f".{ext}"


def is_script_extension(ext: str) -> bool:
    return bool(SCRIPT_EXT_RE.fullmatch(ext))


def is_declaration_file(path: str | None) -> bool:
    return bool(path and DECLARATION_RE.search(path))


def module_type_letter(path: str | None) -> str:
    """The ``c``/``m`` marker of ``.cts``/``.mjs``-style paths, or ``""``."""
    if not path:
        return ""
    match = CM_LETTER_RE.search(path)
    return match.group(0) if match else ""


def resolve_extension(source_extension: str, fmt: str, override: str | None = None) -> str:
    """Extension of the primary artifact compiled from ``source_extension``.

    An explicit override always wins. Otherwise scripts follow the configured
    format (``cjs`` -> ``.js``, anything else -> ``.mjs``) and every other
    source keeps its own extension.
    """
    if override:
        return normalize_extension(override)
    if not is_script_extension(source_extension):
        return source_extension
    if fmt == "cjs":
        return FORMAT_EXTENSIONS["cjs"]
    return FORMAT_EXTENSIONS["esm"]


def declaration_extension(src_path: str | None) -> str:
    """``.d.ts``, ``.d.mts`` or ``.d.cts`` depending on the source's module-type letter."""
    return f".d.{module_type_letter(src_path)}ts"


def apply_extension(path: str, extension: str | None) -> str:
    """Swap the last extension of ``path`` for ``extension``.

    ``components/card.vue.ts`` + ``.d.ts`` -> ``components/card.vue.d.ts``.
    """
    if not extension:
        return path
    root, _ = posixpath.splitext(path)
    return root + extension
