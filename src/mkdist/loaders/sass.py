"""Sass loader — ``.scss``/``.sass`` to ``.css``."""

from __future__ import annotations

import os
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from mkdist.core.models import InputDescriptor, OutputDescriptor
from mkdist.loaders.base import Loader, LoaderResult, register_loader

if TYPE_CHECKING:
    from mkdist.build.chain import LoaderContext

SASS_EXTS = frozenset({".scss", ".sass"})


@register_loader("sass")
class SassLoader(Loader):
    """Compile ``.scss``/``.sass`` to ``.css``; partials produce nothing."""

    def try_load(self, input: InputDescriptor, context: LoaderContext) -> LoaderResult:
        if input.extension not in SASS_EXTS:
            return None

        # Partials are only @use'd by other stylesheets
        if PurePosixPath(input.path).name.startswith("_"):
            return []

        load_path = os.path.dirname(input.src_path) if input.src_path else None
        css = context.toolchain.stylesheets.compile(
            input.get_contents(),
            indented=input.extension == ".sass",
            minify=context.options.esbuild.minify,
            load_path=load_path or None,
            path=input.path,
        )
        return [OutputDescriptor(
            path=input.path,
            contents=css,
            extension=".css",
            src_path=input.src_path,
        )]
