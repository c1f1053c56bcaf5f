from __future__ import annotations

import pytest

from pagehost.domain.content_types import CONTENT_TYPES, DEFAULT_CONTENT_TYPE, guess_content_type


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("style.css", "text/css"),
        ("app.js", "application/javascript"),
        ("logo.png", "image/png"),
        ("photo.jpg", "image/jpeg"),
        ("photo.jpeg", "image/jpeg"),
        ("icon.svg", "image/svg+xml"),
        ("dir/sub/theme.min.css", "text/css"),
    ],
)
def test_known_extensions(name: str, expected: str) -> None:
    assert guess_content_type(name) == expected


@pytest.mark.parametrize("name", ["data.xyz", "README", "archive.tar.gz", ".hidden", "page.html"])
def test_unknown_or_missing_extension_falls_back(name: str) -> None:
    assert guess_content_type(name) == DEFAULT_CONTENT_TYPE == "application/octet-stream"


def test_extension_matching_is_case_sensitive() -> None:
    assert guess_content_type("PHOTO.JPG") == "application/octet-stream"
    assert guess_content_type("Style.CSS") == "application/octet-stream"


def test_table_is_read_only() -> None:
    with pytest.raises(TypeError):
        CONTENT_TYPES[".html"] = "text/html"  # type: ignore[index]
