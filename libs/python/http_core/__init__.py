"""Shared HTTP server primitives used across Python services."""

from .http import Handler, HttpRequest, HttpResponse, RequestContext, make_response, text_response
from .server import HttpServer, RequestHandler

__all__ = [
    "Handler",
    "HttpRequest",
    "HttpResponse",
    "RequestContext",
    "make_response",
    "text_response",
    "HttpServer",
    "RequestHandler",
]
