from __future__ import annotations

from pathlib import Path

import pytest

HOME_HTML = b"<!DOCTYPE html><html><head><title>X</title></head><body>home</body></html>"


@pytest.fixture
def static_root(tmp_path: Path) -> Path:
    root = tmp_path / "public"
    assets = root / "assets"
    assets.mkdir(parents=True)
    (root / "index.html").write_bytes(HOME_HTML)
    (assets / "test.css").write_text("body { color: red; }")
    (assets / "test.js").write_text("console.log('hi');")
    (assets / "test.svg").write_text("<svg xmlns='http://www.w3.org/2000/svg'/>")
    (assets / "test.png").write_bytes(b"\x89PNG\r\n\x1a\nmock")
    (assets / "test.jpg").write_bytes(b"mock-image-content")
    (assets / "test.jpeg").write_bytes(b"mock-jpeg-content")
    (assets / "README").write_text("no extension")
    (assets / "nested").mkdir()
    (assets / "nested" / "deep.css").write_text("p { margin: 0; }")
    return root
