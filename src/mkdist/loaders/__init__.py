"""Format loaders, registered by name on import."""

from mkdist.loaders.base import Loader, available_loaders, get_loader, register_loader
from mkdist.loaders.css import CssLoader
from mkdist.loaders.js import JsLoader
from mkdist.loaders.passthrough import PassthroughLoader
from mkdist.loaders.sass import SassLoader
from mkdist.loaders.vue import VueLoader

__all__ = [
    "CssLoader",
    "JsLoader",
    "Loader",
    "PassthroughLoader",
    "SassLoader",
    "VueLoader",
    "available_loaders",
    "get_loader",
    "register_loader",
]
