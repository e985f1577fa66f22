"""Stylesheet compiler backed by the Dart Sass CLI."""

from __future__ import annotations

import subprocess

from mkdist.build.tools import ExternalTool
from mkdist.config import get_settings
from mkdist.core.errors import TransformError


class SassCompiler:
    """Compile ``.scss``/``.sass`` text to CSS via ``sass --stdin``."""

    def __init__(self, tool: ExternalTool | None = None):
        if tool is None:
            settings = get_settings()
            tool = ExternalTool("sass", settings.sass_command, settings.tool_timeout)
        self.tool = tool

    def compile(
        self,
        source: str,
        indented: bool = False,
        minify: bool = False,
        load_path: str | None = None,
        path: str | None = None,
    ) -> str:
        args = ["--stdin", "--no-source-map"]
        if indented:
            args.append("--indented")
        if minify:
            args.append("--style=compressed")
        if load_path:
            args.append(f"--load-path={load_path}")

        try:
            result = self.tool.run(args, input=source)
        except FileNotFoundError as exc:
            raise TransformError(
                f"Could not run `sass` ({exc}). Do you have it installed?", path
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise TransformError(f"sass timed out after {exc.timeout}s on {path}", path) from exc

        if result.returncode != 0:
            raise TransformError(f"sass failed on {path}:\n{result.stderr.strip()}", path)
        return result.stdout
