from __future__ import annotations

import os
from types import MappingProxyType
from typing import Mapping

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Keys are matched case-sensitively: ``logo.PNG`` falls back to the default.
CONTENT_TYPES: Mapping[str, str] = MappingProxyType(
    {
        ".css": "text/css",
        ".js": "application/javascript",
        ".png": "image/png",
        ".jpg": "image/jpeg",
        ".jpeg": "image/jpeg",
        ".svg": "image/svg+xml",
    }
)


def guess_content_type(path: str) -> str:
    """Return the MIME type for ``path`` based on its extension."""

    _, ext = os.path.splitext(path)
    return CONTENT_TYPES.get(ext, DEFAULT_CONTENT_TYPE)


__all__ = ["CONTENT_TYPES", "DEFAULT_CONTENT_TYPE", "guess_content_type"]
