import math
import os
import pathlib
from typing import List


def _load_dotenv_if_present() -> None:
    # Optional, no dependency: load simple KEY=VALUE lines
    env_path = pathlib.Path(__file__).parent / ".env"
    if env_path.exists():
        for line in env_path.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith('#'):
                continue
            if '=' in line:
                k, v = line.split('=', 1)
                os.environ.setdefault(k.strip(), v.strip())


_load_dotenv_if_present()


class Config:
    def __init__(self) -> None:
        self.host: str = os.environ.get('HOST', '127.0.0.1')
        port_pool_raw = os.environ.get('PORT_POOL')
        raw_port = os.environ.get('PORT', '3002')
        self.port_candidates: List[int] = self._parse_port_candidates(port_pool_raw or raw_port)
        if not self.port_candidates:
            raise ValueError('No valid ports configured via PORT or PORT_POOL')
        self.port: int = self.port_candidates[0]

        self.static_root: str = os.environ.get('STATIC_ROOT', 'public')
        self.home_document: str = os.environ.get('HOME_DOCUMENT', 'index.html')
        self.asset_prefix: str = os.environ.get('ASSET_PREFIX', '/assets/')
        if not self.asset_prefix.startswith('/'):
            raise ValueError(f'ASSET_PREFIX must start with "/": {self.asset_prefix!r}')
        self.assets_root: str = os.environ.get('ASSETS_ROOT') or self._default_assets_root()

        self.socket_timeout: float = float(os.environ.get('SOCKET_TIMEOUT', '30'))
        if not math.isfinite(self.socket_timeout) or self.socket_timeout <= 0:
            raise ValueError('SOCKET_TIMEOUT must be a positive finite number')
        self.log_level: str = os.environ.get('LOG_LEVEL', 'INFO').upper()

    def _default_assets_root(self) -> str:
        return os.path.join(self.static_root, self.asset_prefix.strip('/'))

    def build_dispatcher(self):
        from .app.dispatcher import Dispatcher

        return Dispatcher(
            self.static_root,
            self.assets_root,
            asset_prefix=self.asset_prefix,
            home_document=self.home_document,
        )

    @staticmethod
    def _parse_port_candidates(raw: str) -> List[int]:
        ports: List[int] = []
        seen: set[int] = set()

        for chunk in (piece.strip() for piece in raw.split(',') if piece.strip()):
            if chunk.lower() == 'auto':
                Config._append_port_if_new(0, ports, seen)
                continue

            if '-' in chunk:
                start_str, end_str = chunk.split('-', 1)
                start = Config._coerce_port(start_str)
                end = Config._coerce_port(end_str)
                if start > end:
                    raise ValueError(f'Invalid port range {chunk!r}')
                for value in range(start, end + 1):
                    Config._append_port_if_new(value, ports, seen)
                continue

            value = Config._coerce_port(chunk)
            Config._append_port_if_new(value, ports, seen)

        return ports

    @staticmethod
    def _coerce_port(raw: str) -> int:
        value = int(raw)
        if value < 0 or value > 65535:
            raise ValueError(f'Invalid port number: {value}')
        return value

    @staticmethod
    def _append_port_if_new(value: int, ports: List[int], seen: set[int]) -> None:
        if value not in seen:
            ports.append(value)
            seen.add(value)
