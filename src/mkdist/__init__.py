"""mkdist - file-to-file transformer from a source tree to a dist tree.

Usage:
    from mkdist import make

    result = make(root_dir="path/to/project", format="cjs", declaration=True)
    for path in result.written_files:
        print(path)

Single files can be pushed through the loader chain directly:

    from mkdist import InputDescriptor, create_loader

    chain = create_loader(declaration="ts")
    outputs = chain.load_file(InputDescriptor.from_text("index.ts", "export const a = 1"))
"""

from mkdist.build.chain import LoaderChain, LoaderContext, Toolchain, create_loader
from mkdist.build.runner import BuildResult, make
from mkdist.core.config import BuildOptions, EsbuildOptions
from mkdist.core.errors import ConfigError, MkdistError, TransformError, WalkError
from mkdist.core.models import FileFailure, InputDescriptor, OutputDescriptor
from mkdist.loaders.base import Loader, register_loader

__all__ = [
    "BuildOptions",
    "BuildResult",
    "ConfigError",
    "EsbuildOptions",
    "FileFailure",
    "InputDescriptor",
    "Loader",
    "LoaderChain",
    "LoaderContext",
    "MkdistError",
    "OutputDescriptor",
    "Toolchain",
    "TransformError",
    "WalkError",
    "create_loader",
    "make",
    "register_loader",
]

__version__ = "0.1.0"
