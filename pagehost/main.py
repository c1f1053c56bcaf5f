from __future__ import annotations

import contextlib
import errno
import logging
import signal
import sys
from typing import Iterable

from libs.python.http_core import HttpServer, RequestHandler
from .app.handlers import build_handler
from .config import Config

logger = logging.getLogger("pagehost.main")


def _bind_with_port_pool(handler: RequestHandler, host: str, ports: Iterable[int], timeout: float) -> HttpServer:
    ports_to_try: list[int] = list(ports)
    if not ports_to_try:
        raise ValueError("At least one port must be specified")

    last_error: OSError | None = None
    for port in ports_to_try:
        server = HttpServer(handler, host, port, timeout=timeout)
        try:
            server.bind()
            return server
        except OSError as exc:
            if exc.errno == errno.EADDRINUSE:
                logger.warning("%s:%s already in use, trying next candidate...", host, port)
                last_error = exc
                continue
            raise

    raise RuntimeError("No available ports to bind") from last_error


def _install_signal_handlers(server: HttpServer) -> None:  # pragma: no cover - cli helper
    def _handler(signum, frame):  # noqa: ARG001
        logger.info("received signal %s", signum)
        server.stop()

    signal.signal(signal.SIGINT, _handler)
    signal.signal(signal.SIGTERM, _handler)


def main() -> None:
    cfg = Config()
    logging.basicConfig(
        level=cfg.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    handler = build_handler(cfg.build_dispatcher())
    server = _bind_with_port_pool(handler, cfg.host, cfg.port_candidates, cfg.socket_timeout)
    _install_signal_handlers(server)
    logger.info("website running at http://%s:%s/", *server.address)
    with contextlib.closing(server):
        server.serve_forever()


def run() -> None:  # pragma: no cover - console script entry point
    try:
        main()
    except Exception as exc:  # noqa: BLE001
        print(f"[pagehost] fatal error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":  # pragma: no cover - cli entry point
    run()
