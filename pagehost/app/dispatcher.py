from __future__ import annotations

import logging
import os
from http import HTTPStatus
from typing import Optional

from libs.python.http_core import HttpResponse, make_response, text_response
from ..domain.content_types import guess_content_type
from ..domain.errors import AssetUnavailable, DocumentUnavailable, RouteNotFound
from ..ports.files import FileReader, LocalFileReader

logger = logging.getLogger("pagehost.dispatcher")

DEFAULT_ASSET_PREFIX = "/assets/"
DEFAULT_HOME_DOCUMENT = "index.html"


class Dispatcher:
    """Maps a request path to the home document, an asset, or a 404.

    Only the path is consulted. Every call reads from disk, so responses
    always reflect the current state of the static root.
    """

    def __init__(
        self,
        static_root: str,
        assets_root: Optional[str] = None,
        *,
        asset_prefix: str = DEFAULT_ASSET_PREFIX,
        home_document: str = DEFAULT_HOME_DOCUMENT,
        reader: Optional[FileReader] = None,
    ) -> None:
        self.static_root = static_root
        self.assets_root = assets_root or os.path.join(static_root, asset_prefix.strip("/"))
        self.asset_prefix = asset_prefix
        self.home_document = home_document
        self._home_paths = frozenset({"/", "/" + home_document})
        self._reader = reader or LocalFileReader()

    def handle(self, path: str) -> HttpResponse:
        try:
            return self.resolve(path)
        except DocumentUnavailable as exc:
            logger.error("home document unavailable: %s", exc.__cause__ or exc)
            return text_response(HTTPStatus.INTERNAL_SERVER_ERROR, "Internal Server Error")
        except AssetUnavailable:
            return text_response(HTTPStatus.NOT_FOUND, "Not Found")
        except RouteNotFound:
            return text_response(HTTPStatus.NOT_FOUND, "Page Not Found")

    def resolve(self, path: str) -> HttpResponse:
        """Like :meth:`handle` but lets :class:`DispatchError` propagate."""

        if path in self._home_paths:
            return self._serve_home(path)
        if path.startswith(self.asset_prefix):
            return self._serve_asset(path)
        raise RouteNotFound(path)

    def asset_path(self, path: str) -> str:
        relative = path[len(self.asset_prefix):].lstrip("/")
        return os.path.normpath(os.path.join(self.assets_root, relative))

    def _serve_home(self, path: str) -> HttpResponse:
        document = os.path.join(self.static_root, self.home_document)
        try:
            data = self._reader.read(document)
        except (OSError, ValueError) as exc:
            raise DocumentUnavailable(path, f"cannot read {document}") from exc
        return make_response(HTTPStatus.OK, "text/html", data)

    def _serve_asset(self, path: str) -> HttpResponse:
        file_path = self.asset_path(path)
        try:
            data = self._reader.read(file_path)
        except (OSError, ValueError) as exc:
            raise AssetUnavailable(path, f"cannot read {file_path}") from exc
        return make_response(HTTPStatus.OK, guess_content_type(file_path), data)


__all__ = ["Dispatcher", "DEFAULT_ASSET_PREFIX", "DEFAULT_HOME_DOCUMENT"]
