"""SauceNAO reverse image search client."""

from .config import Settings, load_settings
from .constants import API_URL, LIST_OF_SOURCES, Source, get_source
from .errors import ErrType, SauceError
from .handler import Handler, HandlerBuilder
from .sauce import Sauce, to_json

__all__ = [
    "API_URL",
    "LIST_OF_SOURCES",
    "Source",
    "get_source",
    "ErrType",
    "SauceError",
    "Handler",
    "HandlerBuilder",
    "Sauce",
    "to_json",
    "Settings",
    "load_settings",
]
