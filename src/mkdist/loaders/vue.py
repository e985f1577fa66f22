"""Single-file component loader.

The ``.vue`` file itself is always passed through untouched. A typed
``<script lang="ts">`` block is cut out and handed back to the chain, which
routes it to the script loader; its outputs (the declaration, mainly) land
next to the component as ``card.vue.d.ts`` and friends.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from mkdist.core.models import InputDescriptor, OutputDescriptor
from mkdist.loaders.base import Loader, LoaderResult, register_loader

if TYPE_CHECKING:
    from mkdist.build.chain import LoaderContext

_SCRIPT_RE = re.compile(r"<script(?P<attrs>[^>]*)>(?P<body>[\s\S]*?)</script>", re.IGNORECASE)
_LANG_RE = re.compile(r"""\blang\s*=\s*["']?(?P<lang>[\w-]+)""")

TYPED_LANGS = frozenset({"ts", "tsx"})


@dataclass
class ScriptBlock:
    contents: str
    lang: str | None

    @property
    def extension(self) -> str:
        return f".{self.lang or 'js'}"

    @property
    def typed(self) -> bool:
        return self.lang in TYPED_LANGS


def get_script_block(markup: str) -> ScriptBlock | None:
    """First ``<script>`` block of a component, or ``None``."""
    match = _SCRIPT_RE.search(markup)
    if match is None:
        return None
    lang = _LANG_RE.search(match.group("attrs"))
    return ScriptBlock(
        contents=match.group("body"),
        lang=lang.group("lang").lower() if lang else None,
    )


@register_loader("vue")
class VueLoader(Loader):
    """Pass ``.vue`` files through; route typed script blocks back into the chain."""

    def try_load(self, input: InputDescriptor, context: LoaderContext) -> LoaderResult:
        if input.extension != ".vue":
            return None

        contents = input.get_contents()
        output: list[OutputDescriptor] = []

        script = get_script_block(contents)
        if script is not None and script.typed:
            embedded = InputDescriptor.from_text(
                path=f"{input.path}{script.extension}",
                text=script.contents,
                src_path=input.src_path or input.path,
            )
            output.extend(context.load_file(embedded) or [])

        output.append(OutputDescriptor(
            path=input.path,
            contents=contents,
            src_path=input.src_path,
        ))
        return output
