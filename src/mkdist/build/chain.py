"""Loader chain — ordered dispatch of inputs to format loaders."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from mkdist.build.declarations import DeclarationEmitter
from mkdist.build.esbuild import EsbuildTransformer
from mkdist.build.sass import SassCompiler
from mkdist.core.config import BuildOptions
from mkdist.core.models import InputDescriptor, OutputDescriptor
from mkdist.loaders.base import Loader, LoaderResult, get_loader

# Import loader modules to trigger @register_loader decorators
import mkdist.loaders.css  # noqa: F401
import mkdist.loaders.js  # noqa: F401
import mkdist.loaders.passthrough  # noqa: F401
import mkdist.loaders.sass  # noqa: F401
import mkdist.loaders.vue  # noqa: F401

logger = logging.getLogger(__name__)


@dataclass
class Toolchain:
    """External collaborators the loaders delegate to.

    Executables are located on first use, so a run that never meets a
    stylesheet never looks for ``sass``.
    """

    transformer: EsbuildTransformer | None = None
    declarations: DeclarationEmitter | None = None
    stylesheets: SassCompiler | None = None

    def __post_init__(self):
        if self.transformer is None:
            self.transformer = EsbuildTransformer()
        if self.declarations is None:
            self.declarations = DeclarationEmitter()
        if self.stylesheets is None:
            self.stylesheets = SassCompiler()


@dataclass(frozen=True)
class LoaderContext:
    """Read-only state shared by every loader call of one chain.

    ``load_file`` is the chain's own entry point, so a loader can hand
    embedded sub-content back to the chain as if it were a new input.
    """

    options: BuildOptions
    load_file: Callable[[InputDescriptor], LoaderResult]
    toolchain: Toolchain = field(default_factory=Toolchain)


class LoaderChain:
    """Tries each loader in order; the first one that accepts an input owns it."""

    def __init__(
        self,
        loaders: Sequence[Loader],
        options: BuildOptions,
        toolchain: Toolchain | None = None,
    ):
        self.loaders = list(loaders)
        self.options = options
        self.context = LoaderContext(
            options=options,
            load_file=self.load_file,
            toolchain=toolchain or Toolchain(),
        )

    def load_file(self, input: InputDescriptor) -> list[OutputDescriptor] | None:
        """Run ``input`` through the first accepting loader.

        Returns ``None`` when no loader accepts it. Loader errors propagate.
        """
        for loader in self.loaders:
            result = loader.try_load(input, self.context)
            if result is not None:
                logger.debug("%s handled %s (%d outputs)", loader.name, input.path, len(result))
                return result
        return None


def create_loader(
    options: BuildOptions | None = None,
    *,
    loaders: Sequence[str | Loader] | None = None,
    toolchain: Toolchain | None = None,
    **overrides,
) -> LoaderChain:
    """Build a loader chain.

    ``loaders`` (names or instances) defaults to ``options.loaders``;
    ``overrides`` are applied on top of ``options``, e.g.
    ``create_loader(declaration=True)``.
    """
    options = options or BuildOptions()
    if overrides:
        options = options.replace(**overrides)
    selected = loaders if loaders is not None else options.loaders
    instances = [get_loader(ld) if isinstance(ld, str) else ld for ld in selected]
    return LoaderChain(instances, options, toolchain)
