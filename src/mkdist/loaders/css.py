"""CSS loader — passthrough, or esbuild minification when asked."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mkdist.core.models import InputDescriptor, OutputDescriptor
from mkdist.loaders.base import Loader, LoaderResult, register_loader

if TYPE_CHECKING:
    from mkdist.build.chain import LoaderContext


@register_loader("css")
class CssLoader(Loader):
    """Copy ``.css`` files, minified when asked."""

    def try_load(self, input: InputDescriptor, context: LoaderContext) -> LoaderResult:
        if input.extension != ".css":
            return None

        contents = input.get_contents()
        if context.options.esbuild.minify:
            contents = context.toolchain.transformer.transform(
                contents, "css", context.options.esbuild, path=input.path
            )
        return [OutputDescriptor(path=input.path, contents=contents, src_path=input.src_path)]
