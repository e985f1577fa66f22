"""Script loader — JavaScript and TypeScript in all module flavours."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mkdist.build.esbuild import hoist_default_export
from mkdist.build.resolver import (
    JSX_LOADERS,
    TS_EXTS,
    declaration_extension,
    is_declaration_file,
    is_script_extension,
    resolve_extension,
)
from mkdist.core.models import InputDescriptor, OutputDescriptor
from mkdist.loaders.base import Loader, LoaderResult, register_loader

if TYPE_CHECKING:
    from mkdist.build.chain import LoaderContext


@register_loader("js")
class JsLoader(Loader):
    """Compile ``.[cm]?[jt]sx?`` files and optionally emit their declarations.

    The declaration artifact, when produced, comes before the compiled one.
    """

    def try_load(self, input: InputDescriptor, context: LoaderContext) -> LoaderResult:
        if not is_script_extension(input.extension) or is_declaration_file(input.path):
            return None

        options = context.options
        toolchain = context.toolchain
        output: list[OutputDescriptor] = []

        contents = input.get_contents()

        # declaration
        if options.wants_declaration(input.extension) and not is_declaration_file(input.src_path):
            dts = toolchain.declarations.emit(contents, input.path, src_path=input.src_path)
            if dts is not None:
                output.append(OutputDescriptor(
                    path=input.path,
                    contents=dts,
                    extension=declaration_extension(input.src_path or input.path),
                    src_path=input.src_path,
                    declaration=True,
                ))

        # typescript / jsx => js
        if input.extension in TS_EXTS:
            contents = toolchain.transformer.transform(
                contents, "ts", options.esbuild, path=input.path
            )
        elif input.extension in JSX_LOADERS:
            contents = toolchain.transformer.transform(
                contents, JSX_LOADERS[input.extension], options.esbuild, path=input.path
            )
        elif options.esbuild.minify:
            contents = toolchain.transformer.transform(
                contents, "js", options.esbuild, path=input.path
            )

        # esm => cjs, with a lone default export as module.exports
        if options.format == "cjs":
            contents = hoist_default_export(
                toolchain.transformer.convert_module_syntax(contents, "cjs", path=input.path)
            )

        output.append(OutputDescriptor(
            path=input.path,
            contents=contents,
            extension=resolve_extension(input.extension, options.format, options.ext),
            src_path=input.src_path,
        ))
        return output
