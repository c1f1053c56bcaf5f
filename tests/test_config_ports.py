from __future__ import annotations

import os

import pytest

from pagehost.app.dispatcher import Dispatcher
from pagehost.config import Config

_ENV_KEYS = (
    "PORT",
    "PORT_POOL",
    "HOST",
    "STATIC_ROOT",
    "HOME_DOCUMENT",
    "ASSET_PREFIX",
    "ASSETS_ROOT",
    "SOCKET_TIMEOUT",
    "LOG_LEVEL",
)


def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    cfg = Config()
    assert cfg.host == "127.0.0.1"
    assert cfg.port_candidates == [3002]
    assert cfg.port == 3002
    assert cfg.static_root == "public"
    assert cfg.home_document == "index.html"
    assert cfg.asset_prefix == "/assets/"
    assert cfg.assets_root == os.path.join("public", "assets")
    assert cfg.socket_timeout == 30.0
    assert cfg.log_level == "INFO"


def test_port_range_from_port_var(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("PORT", "9000, 9005-9006")
    cfg = Config()
    assert cfg.port_candidates == [9000, 9005, 9006]
    assert cfg.port == 9000


def test_port_pool_overrides_port(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("PORT_POOL", "9100-9101,auto")
    cfg = Config()
    assert cfg.port_candidates == [9100, 9101, 0]


def test_duplicate_ports_are_dropped(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("PORT", "auto, 9300, 9300, auto")
    cfg = Config()
    assert cfg.port_candidates == [0, 9300]


@pytest.mark.parametrize("spec", ["-1", "70000", "9010-9000", ",", "abc"])
def test_invalid_port_raises(monkeypatch: pytest.MonkeyPatch, spec: str) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("PORT", spec)
    with pytest.raises(ValueError):
        Config()


def test_assets_root_follows_static_root_and_prefix(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("STATIC_ROOT", "/srv/site")
    monkeypatch.setenv("ASSET_PREFIX", "/static/files/")
    cfg = Config()
    assert cfg.assets_root == os.path.join("/srv/site", "static/files")


def test_explicit_assets_root_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("ASSETS_ROOT", "/srv/media")
    cfg = Config()
    assert cfg.assets_root == "/srv/media"


def test_asset_prefix_must_be_absolute(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("ASSET_PREFIX", "assets/")
    with pytest.raises(ValueError):
        Config()


def test_socket_timeout_must_be_positive(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("SOCKET_TIMEOUT", "0")
    with pytest.raises(ValueError):
        Config()


def test_build_dispatcher_uses_config(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("STATIC_ROOT", str(tmp_path))
    monkeypatch.setenv("HOME_DOCUMENT", "home.html")
    dispatcher = Config().build_dispatcher()
    assert isinstance(dispatcher, Dispatcher)
    assert dispatcher.static_root == str(tmp_path)
    assert dispatcher.assets_root == os.path.join(str(tmp_path), "assets")
    assert dispatcher.home_document == "home.html"


@pytest.mark.parametrize("value", ["nan", "inf", "-inf"])
def test_socket_timeout_must_be_finite(monkeypatch: pytest.MonkeyPatch, value: str) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("SOCKET_TIMEOUT", value)
    with pytest.raises(ValueError):
        Config()
