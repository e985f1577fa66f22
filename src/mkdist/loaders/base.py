"""Base loader interface and registry."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from mkdist.core.errors import ConfigError
from mkdist.core.models import InputDescriptor, OutputDescriptor

if TYPE_CHECKING:
    from mkdist.build.chain import LoaderContext

LoaderResult = list[OutputDescriptor] | None


class Loader(ABC):
    """A per-format file transformer.

    ``try_load`` returns ``None`` to decline an input ("not mine") and a
    list, possibly empty, once it has handled it. Declining must be decided
    from the descriptor's path and extension alone, without reading contents.
    """

    name: str = ""

    @abstractmethod
    def try_load(self, input: InputDescriptor, context: LoaderContext) -> LoaderResult:
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"


# Loader registry
_LOADERS: dict[str, type[Loader]] = {}


def register_loader(name: str):
    """Decorator to register a loader class under ``name``."""

    def wrapper(cls):
        cls.name = name
        _LOADERS[name] = cls
        return cls

    return wrapper


def get_loader(name: str) -> Loader:
    """Get an instantiated loader by name."""
    if name not in _LOADERS:
        raise ConfigError(f"Unknown loader: {name}. Available: {list(_LOADERS.keys())}")
    return _LOADERS[name]()


def available_loaders() -> dict[str, type[Loader]]:
    return dict(_LOADERS)
