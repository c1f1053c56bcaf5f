from __future__ import annotations

from typing import Optional


class DispatchError(Exception):
    """Base class for the ways a request path can fail to resolve."""

    def __init__(self, path: str, message: Optional[str] = None) -> None:
        super().__init__(message or path)
        self.path = path


class DocumentUnavailable(DispatchError):
    """The home document could not be read."""


class AssetUnavailable(DispatchError):
    """The requested asset is missing or unreadable."""


class RouteNotFound(DispatchError):
    """No rule matched the request path."""
