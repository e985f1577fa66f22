"""Best-effort type declaration emission through the TypeScript compiler.

Declarations are a convenience: when ``tsc`` is missing or chokes on a file
the emitter logs a warning and returns ``None`` so the compiled artifact is
still produced.
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path, PurePosixPath

from mkdist.build.tools import ExternalTool, Unavailable
from mkdist.config import get_settings
from mkdist.core.errors import MkdistError

logger = logging.getLogger(__name__)

TSC_ARGS = [
    "--declaration",
    "--emitDeclarationOnly",
    "--allowJs",
    "--skipLibCheck",
    "--noResolve",
    "--jsx", "preserve",
    "--target", "esnext",
]


class DeclarationError(MkdistError):
    """tsc ran but produced no declaration."""

    pass


class DeclarationEmitter:
    """Turn script source into ``.d.ts`` text, or ``None`` on any failure."""

    def __init__(self, tool: ExternalTool | None = None):
        if tool is None:
            settings = get_settings()
            tool = ExternalTool("typescript", settings.tsc_command, settings.tool_timeout)
        self.tool = tool
        self._warned_unavailable = False

    @property
    def available(self) -> bool:
        return not isinstance(self.tool.resolve(), Unavailable)

    def emit(self, source_text: str, source_path: str, src_path: str | None = None) -> str | None:
        """Declaration text for ``source_text``, or ``None``.

        ``source_path`` names the file handed to tsc; ``src_path``, when
        given, is the file named in warnings.
        """
        status = self.tool.resolve()
        if isinstance(status, Unavailable):
            if not self._warned_unavailable:
                self._warned_unavailable = True
                logger.warning("Could not load `typescript`. Do you have it installed?")
                logger.debug("typescript lookup failed: %s", status.reason)
            return None

        try:
            return self._compile(source_text, source_path)
        except Exception as exc:
            logger.warning(
                "Could not generate declaration file for %s. %s", src_path or source_path, exc
            )
            return None

    def _compile(self, source_text: str, source_path: str) -> str:
        name = PurePosixPath(source_path).name or "index.ts"
        with tempfile.TemporaryDirectory(prefix="mkdist-dts-") as tmp:
            src = Path(tmp) / "src" / name
            out = Path(tmp) / "out"
            src.parent.mkdir(parents=True)
            src.write_text(source_text, encoding="utf-8")

            # Type errors make tsc exit non-zero but the declaration is still emitted
            result = self.tool.run([*TSC_ARGS, "--outDir", str(out), str(src)], cwd=tmp)

            emitted = sorted(out.rglob("*.d.*ts")) if out.exists() else []
            if not emitted:
                detail = (result.stdout or result.stderr or "").strip()
                raise DeclarationError(detail or f"tsc exited with status {result.returncode}")
            return emitted[0].read_text(encoding="utf-8")
