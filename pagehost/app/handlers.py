from __future__ import annotations

import json
import logging
import time
from http import HTTPStatus
from typing import Optional

from libs.python.http_core import Handler, HttpRequest, HttpResponse, RequestContext, text_response
from .dispatcher import Dispatcher

access_logger = logging.getLogger("pagehost.access")
logger = logging.getLogger("pagehost.handlers")


def internal_error() -> HttpResponse:
    return text_response(HTTPStatus.INTERNAL_SERVER_ERROR, "Internal Server Error")


class AbstractHandler(Handler):
    def __init__(self) -> None:
        self._next: Optional[Handler] = None

    def set_next(self, handler: Handler) -> Handler:
        self._next = handler
        return handler

    def _handle_next(self, ctx: RequestContext) -> HttpResponse:
        if self._next is None:
            if ctx.response is None:
                ctx.response = internal_error()
            return ctx.response
        return self._next.handle(ctx)


class ErrorHandler(AbstractHandler):
    def handle(self, ctx: RequestContext) -> HttpResponse:  # noqa: D401
        try:
            return self._handle_next(ctx)
        except Exception:  # noqa: BLE001
            logger.exception("unhandled error for %s %s", ctx.request.method, ctx.request.path)
            ctx.response = internal_error()
            return ctx.response


class LoggingHandler(AbstractHandler):
    def handle(self, ctx: RequestContext) -> HttpResponse:  # noqa: D401
        start = time.time()
        response = self._handle_next(ctx)
        duration_ms = round((time.time() - start) * 1000, 1)
        entry = {
            "ts": int(time.time() * 1000),
            "method": ctx.request.method,
            "path": ctx.request.path,
            "status": int(response.status),
            "ms": duration_ms,
            "remote": ctx.request.client[0] if ctx.request.client else None,
        }
        access_logger.info(json.dumps(entry, separators=(",", ":")))
        return response


class DispatchHandler(AbstractHandler):
    """Terminal handler: hands the request path to the dispatcher."""

    def __init__(self, dispatcher: Dispatcher) -> None:
        super().__init__()
        self._dispatcher = dispatcher

    def handle(self, ctx: RequestContext) -> HttpResponse:  # noqa: D401
        ctx.response = self._dispatcher.handle(ctx.request.path)
        return ctx.response


class RequestProcessor:
    """Facade executed by the manual HTTP server."""

    def __init__(self, entry: Handler) -> None:
        self._entry = entry

    def handle(self, request: HttpRequest) -> HttpResponse:
        ctx = RequestContext(request=request)
        response = self._entry.handle(ctx)
        response.ensure_content_length()
        return response


def build_handler(dispatcher: Dispatcher) -> RequestProcessor:
    logging_handler = LoggingHandler()
    error_handler = ErrorHandler()
    dispatch_handler = DispatchHandler(dispatcher)

    logging_handler.set_next(error_handler)
    error_handler.set_next(dispatch_handler)

    return RequestProcessor(logging_handler)


__all__ = [
    "build_handler",
    "RequestProcessor",
]
