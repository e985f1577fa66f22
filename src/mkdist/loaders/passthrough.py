"""Passthrough loader — hand-written declarations and JSON, copied as text."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mkdist.build.resolver import is_declaration_file
from mkdist.core.models import InputDescriptor, OutputDescriptor
from mkdist.loaders.base import Loader, LoaderResult, register_loader

if TYPE_CHECKING:
    from mkdist.build.chain import LoaderContext


@register_loader("passthrough")
class PassthroughLoader(Loader):
    """Copy declaration files and JSON as text.

    Not in the default chain, since unhandled files are copied byte-for-byte
    anyway. Useful with ``copy_unhandled`` off.
    """

    extensions = frozenset({".json"})

    def try_load(self, input: InputDescriptor, context: LoaderContext) -> LoaderResult:
        if input.extension not in self.extensions and not is_declaration_file(input.path):
            return None
        return [OutputDescriptor(
            path=input.path,
            contents=input.get_contents(),
            src_path=input.src_path,
        )]
