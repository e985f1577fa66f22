"""Syntax transformer backed by the esbuild CLI.

Source goes in on stdin and the transformed code comes back on stdout, the
same contract as esbuild's ``transform`` API.
"""

from __future__ import annotations

import re
import subprocess

from mkdist.build.tools import ExternalTool
from mkdist.config import get_settings
from mkdist.core.config import EsbuildOptions
from mkdist.core.errors import TransformError


def esbuild_args(
    loader: str,
    options: EsbuildOptions | None = None,
    fmt: str | None = None,
    sourcefile: str | None = None,
) -> list[str]:
    """Command-line flags for one esbuild transform."""
    options = options or EsbuildOptions()
    args = [f"--loader={loader}"]
    if fmt:
        args.append(f"--format={fmt}")
    if options.jsx:
        args.append(f"--jsx={options.jsx}")
    if options.jsx_factory:
        args.append(f"--jsx-factory={options.jsx_factory}")
    if options.jsx_fragment:
        args.append(f"--jsx-fragment={options.jsx_fragment}")
    if options.minify:
        args.append("--minify")
    if options.target:
        args.append(f"--target={options.target}")
    if sourcefile:
        args.append(f"--sourcefile={sourcefile}")
    return args


# esbuild's CommonJS output for ES module exports:
#   __export(stdin_exports, {
#     default: () => stdin_default
#   });
#   module.exports = __toCommonJS(stdin_exports);
_EXPORT_MAP_RE = re.compile(r"__export\((?P<ns>[\w$]+), \{(?P<body>[^}]*)\}\);")
_EXPORT_ENTRY_RE = re.compile(r"""(?P<key>[\w$]+|"[^"]*")\s*:\s*\(\)\s*=>\s*(?P<binding>[\w$]+)""")


def hoist_default_export(code: str) -> str:
    """Make a default-only CommonJS module export the default value itself.

    ``require()`` of the converted ``export default 'foo'`` then returns
    ``'foo'`` rather than ``{default: 'foo'}``. Modules with named exports
    are returned unchanged.
    """
    match = _EXPORT_MAP_RE.search(code)
    if match is None:
        return code
    entries = _EXPORT_ENTRY_RE.findall(match.group("body"))
    if len(entries) != 1 or entries[0][0].strip('"') != "default":
        return code

    binding = entries[0][1]
    namespace_export = f"module.exports = __toCommonJS({match.group('ns')});"
    if namespace_export not in code:
        return code
    code = code.replace(namespace_export + "\n", "", 1).replace(namespace_export, "", 1)
    return f"{code.rstrip()}\nmodule.exports = {binding};\n"


class EsbuildTransformer:
    """Strip types and compile JSX, or rewrite ES modules as CommonJS."""

    def __init__(self, tool: ExternalTool | None = None):
        if tool is None:
            settings = get_settings()
            tool = ExternalTool("esbuild", settings.esbuild_command, settings.tool_timeout)
        self.tool = tool

    def transform(
        self,
        source: str,
        loader: str,
        options: EsbuildOptions | None = None,
        path: str | None = None,
    ) -> str:
        """Compile ``source`` with the given esbuild loader (``ts``, ``tsx``, ``jsx``, ``css``)."""
        return self._run(source, esbuild_args(loader, options, sourcefile=path), path)

    def convert_module_syntax(self, source: str, fmt: str, path: str | None = None) -> str:
        """Rewrite ES module syntax into ``fmt`` (``cjs``)."""
        return self._run(source, esbuild_args("js", fmt=fmt, sourcefile=path), path)

    def _run(self, source: str, args: list[str], path: str | None) -> str:
        try:
            result = self.tool.run(args, input=source)
        except FileNotFoundError as exc:
            raise TransformError(
                f"Could not run `esbuild` ({exc}). Do you have it installed?", path
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise TransformError(
                f"esbuild timed out after {exc.timeout}s on {path or '<stdin>'}", path
            ) from exc

        if result.returncode != 0:
            raise TransformError(
                f"esbuild failed on {path or '<stdin>'}:\n{result.stderr.strip()}", path
            )
        return result.stdout
