from .app.dispatcher import Dispatcher
from .app.handlers import build_handler
from .config import Config
from .domain.content_types import CONTENT_TYPES, guess_content_type
from .domain.errors import AssetUnavailable, DispatchError, DocumentUnavailable, RouteNotFound

__all__ = [
    "Config",
    "Dispatcher",
    "build_handler",
    "CONTENT_TYPES",
    "guess_content_type",
    "DispatchError",
    "DocumentUnavailable",
    "AssetUnavailable",
    "RouteNotFound",
]
