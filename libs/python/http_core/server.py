from __future__ import annotations

"""Manual HTTP/1.1 server implemented directly over sockets."""

import logging
import socket
import threading
from contextlib import suppress
from http import HTTPStatus
from typing import Optional, Protocol, Tuple
from urllib.parse import urlsplit

from .http import HttpRequest, HttpResponse, text_response

MAX_HEADER_BYTES = 16 * 1024
MAX_BODY_BYTES = 5 * 1024 * 1024
ACCEPT_POLL_INTERVAL = 0.5

logger = logging.getLogger("http_core.server")


class RequestHandler(Protocol):
    def handle(self, request: HttpRequest) -> HttpResponse:
        """Process ``request`` and return an HTTP response."""


class HttpServer:
    """Threaded TCP listener that delegates every request to ``handler``.

    The server owns its listening socket and accept thread, so several
    instances can run side by side (one per port) and each can be stopped
    independently::

        with HttpServer(handler, port=0).start() as server:
            urlopen(f"http://127.0.0.1:{server.port}/")
    """

    def __init__(
        self,
        handler: RequestHandler,
        host: str = "127.0.0.1",
        port: int = 0,
        *,
        timeout: float = 30.0,
        backlog: int = 128,
    ) -> None:
        self.host = host
        self._requested_port = port
        self._handler = handler
        self._timeout = timeout
        self._backlog = backlog
        self._sock: Optional[socket.socket] = None
        self._thread: Optional[threading.Thread] = None
        self._stopping = threading.Event()

    @property
    def address(self) -> Tuple[str, int]:
        if self._sock is None:
            raise RuntimeError("server is not bound")
        host, port = self._sock.getsockname()[:2]
        return host, port

    @property
    def port(self) -> int:
        return self.address[1]

    @property
    def running(self) -> bool:
        return self._sock is not None and not self._stopping.is_set()

    def bind(self) -> None:
        if self._sock is not None:
            return
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self.host, self._requested_port))
            sock.listen(self._backlog)
            sock.settimeout(ACCEPT_POLL_INTERVAL)
        except OSError:
            sock.close()
            raise
        self._stopping.clear()
        self._sock = sock
        logger.info("listening on %s:%s", *self.address)

    def start(self) -> "HttpServer":
        """Bind and run the accept loop on a background thread."""

        if self._thread is not None and self._thread.is_alive():
            raise RuntimeError("server already started")
        self.bind()
        self._thread = threading.Thread(
            target=self._accept_loop,
            name=f"http-server-{self.port}",
            daemon=True,
        )
        self._thread.start()
        return self

    def serve_forever(self) -> None:
        """Bind and run the accept loop on the calling thread until stopped."""

        self.bind()
        self._accept_loop()

    def stop(self) -> None:
        self._stopping.set()
        sock, self._sock = self._sock, None
        if sock is not None:
            with suppress(OSError):
                sock.shutdown(socket.SHUT_RDWR)
            sock.close()
            logger.info("shutting down")
        thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=ACCEPT_POLL_INTERVAL * 4)

    def close(self) -> None:
        self.stop()

    def __enter__(self) -> "HttpServer":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def _accept_loop(self) -> None:
        sock = self._sock
        if sock is None:
            raise RuntimeError("server is not bound")
        while not self._stopping.is_set():
            try:
                conn, addr = sock.accept()
            except socket.timeout:
                continue
            except OSError:
                if self._stopping.is_set():
                    break
                raise
            thread = threading.Thread(
                target=_serve_connection,
                args=(conn, addr, self._handler, self._timeout),
                daemon=True,
            )
            thread.start()


def _serve_connection(
    conn: socket.socket,
    addr: Tuple[str, int],
    handler: RequestHandler,
    timeout: float = 30.0,
) -> None:
    with conn:
        conn.settimeout(timeout)
        try:
            request = _read_request(conn, addr)
            if request is None:
                return
        except ValueError as exc:
            _send_simple_response(conn, HTTPStatus.BAD_REQUEST, str(exc))
            return
        except OSError as exc:
            logger.debug("connection from %s dropped while reading: %s", addr[0], exc)
            return
        except Exception:  # noqa: BLE001
            _send_simple_response(conn, HTTPStatus.BAD_REQUEST, "Malformed request")
            return

        try:
            response = handler.handle(request)
        except Exception:  # noqa: BLE001
            logger.exception("handler failed for %s %s", request.method, request.path)
            response = text_response(HTTPStatus.INTERNAL_SERVER_ERROR, "Internal Server Error")

        try:
            _send_response(conn, request, response)
        except OSError as exc:
            logger.debug("client %s went away before the response was sent: %s", addr[0], exc)


def _read_request(conn: socket.socket, addr: Tuple[str, int]) -> HttpRequest | None:
    buffer = bytearray()
    while b"\r\n\r\n" not in buffer:
        chunk = conn.recv(4096)
        if not chunk:
            return None
        buffer.extend(chunk)
        if len(buffer) > MAX_HEADER_BYTES:
            raise ValueError("header section too large")

    header_part, body_part = buffer.split(b"\r\n\r\n", 1)
    lines = header_part.split(b"\r\n")
    if not lines:
        raise ValueError("invalid request line")
    request_line = lines[0].decode("iso-8859-1").strip()
    parts = request_line.split()
    if len(parts) != 3:
        raise ValueError("invalid request line")
    method, target, version = parts
    method = method.upper()
    if version not in {"HTTP/1.1", "HTTP/1.0"}:
        raise ValueError("unsupported HTTP version")

    headers: dict[str, str] = {}
    for raw in lines[1:]:
        if not raw:
            continue
        if b":" not in raw:
            raise ValueError("invalid header")
        name, value = raw.split(b":", 1)
        headers[name.decode("ascii", "ignore").strip().lower()] = value.decode("iso-8859-1").strip()

    content_length = 0
    if "content-length" in headers:
        with suppress(ValueError):
            content_length = int(headers["content-length"]) if headers["content-length"] else 0
    content_length = max(0, min(content_length, MAX_BODY_BYTES))

    body = bytearray(body_part[:content_length])
    while len(body) < content_length:
        chunk = conn.recv(min(65536, content_length - len(body)))
        if not chunk:
            break
        body.extend(chunk)

    path, query = _split_target(target)

    return HttpRequest(
        method=method,
        target=target,
        path=path,
        query=query,
        headers=headers,
        body=bytes(body[:content_length]),
        client=addr,
    )


def _split_target(target: str) -> Tuple[str, str]:
    # Origin-form targets keep their path verbatim, "//x" included.
    if target.startswith("/"):
        rest = target.partition("#")[0]
        path, _, query = rest.partition("?")
        return path, query
    parsed = urlsplit(target)
    return parsed.path or "/", parsed.query


def _send_response(conn: socket.socket, request: HttpRequest, response: HttpResponse) -> None:
    response.headers.setdefault("Connection", "close")
    response.ensure_content_length()
    try:
        reason = HTTPStatus(response.status).phrase
    except ValueError:
        reason = "OK"
    status_line = f"HTTP/1.1 {int(response.status)} {reason}\r\n"
    header_lines = "".join(f"{name}: {value}\r\n" for name, value in response.headers.items())
    conn.sendall(status_line.encode("iso-8859-1"))
    conn.sendall(header_lines.encode("iso-8859-1"))
    conn.sendall(b"\r\n")
    if request.method != "HEAD" and response.body:
        conn.sendall(response.body)


def _send_simple_response(conn: socket.socket, status: HTTPStatus, message: str) -> None:
    payload = message.encode()
    status_line = f"HTTP/1.1 {int(status)} {status.phrase}\r\n"
    headers = (
        "Content-Type: text/plain\r\n"
        f"Content-Length: {len(payload)}\r\n"
        "Connection: close\r\n"
    )
    with suppress(OSError):
        conn.sendall(status_line.encode("iso-8859-1"))
        conn.sendall(headers.encode("iso-8859-1"))
        conn.sendall(b"\r\n")
        conn.sendall(payload)
