"""Local redirect test server shared by the integration tests.

Routes mirror the situations the redirect driver has to handle: absolute
and relative redirects, endless loops, UTF-8 Location bytes, missing
Location headers, cross-origin hops, and HTTP/HTTPS scheme changes. The
HTTPS twin uses the self-signed certificate under certs/.
"""

import contextlib
import os
import ssl
import threading
import urllib.parse
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Dict, Iterator, Tuple

import pytest

UTF8_PATH = "/utf8-url-áé"
CERT_DIR = os.path.join(os.path.dirname(__file__), "certs")


class RedirectRequestHandler(BaseHTTPRequestHandler):
    """HTTP/1.1 handler with a fixed set of redirect routes."""

    protocol_version = "HTTP/1.1"

    def log_message(self, format: str, *args: Any) -> None:
        """Suppress server logs during testing."""

    def _route(self) -> Tuple[int, Dict[str, str], bytes]:
        base = self.server.base_url  # type: ignore[attr-defined]
        path = urllib.parse.unquote(urllib.parse.urlsplit(self.path).path)

        if path in ("/", UTF8_PATH):
            return 200, {}, b"reached"
        if path == "/finite":
            return 302, {"Location": f"{base}/"}, b""
        if path == "/endless":
            return 302, {"Location": f"{base}/endless"}, b""
        if path in ("/relative", "/relativeQuery"):
            return 302, {"Location": "/"}, b""
        if path == "/redirect-with-utf8-binary":
            # send_header encodes as latin-1, so this goes out as raw UTF-8 bytes.
            location = f"{base}{UTF8_PATH}".encode("utf-8").decode("latin-1")
            return 302, {"Location": location}, b""
        if path == "/no-location":
            return 302, {}, b"moved"
        if path == "/not-modified":
            return 304, {}, b""
        if path == "/to-localhost":
            port = self.server.server_port  # type: ignore[attr-defined]
            return 302, {"Location": f"http://localhost:{port}/echo-auth"}, b""
        if path == "/to-same-origin":
            return 302, {"Location": "/echo-auth"}, b""
        if path == "/echo-auth":
            return 200, {}, self.headers.get("Authorization", "").encode()
        if path in ("/httpsToHttp", "/httpToHttps"):
            # Points at the server on the other scheme.
            peer = self.server.peer_url  # type: ignore[attr-defined]
            return 302, {"Location": f"{peer}/"}, b""
        if path == "/echo-method":
            return 200, {}, self.command.encode()
        return 404, {}, b"Not Found"

    def _reply(self, with_body: bool = True) -> None:
        status, headers, body = self._route()
        self.server.hits.append(self.path)  # type: ignore[attr-defined]
        self.send_response(status)
        for name, value in headers.items():
            self.send_header(name, value)
        if status != 304:
            self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if with_body and status != 304:
            self.wfile.write(body)

    def do_GET(self) -> None:
        self._reply()

    def do_HEAD(self) -> None:
        self._reply(with_body=False)

    def do_POST(self) -> None:
        self.rfile.read(int(self.headers.get("Content-Length", 0)))
        self._reply()

    do_PUT = do_POST


@contextlib.contextmanager
def _serve(tls: bool) -> Iterator[ThreadingHTTPServer]:
    server = ThreadingHTTPServer(("127.0.0.1", 0), RedirectRequestHandler)
    server.daemon_threads = True
    scheme = "http"
    if tls:
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
        context.load_cert_chain(
            os.path.join(CERT_DIR, "localhost.crt"),
            os.path.join(CERT_DIR, "localhost.key"),
        )
        server.socket = context.wrap_socket(server.socket, server_side=True)
        scheme = "https"
    server.base_url = f"{scheme}://127.0.0.1:{server.server_port}"  # type: ignore[attr-defined]
    server.peer_url = None  # type: ignore[attr-defined]
    server.hits = []  # type: ignore[attr-defined]

    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield server
    finally:
        server.shutdown()
        server.server_close()


@pytest.fixture(scope="session")
def redirect_server() -> Iterator[ThreadingHTTPServer]:
    """Start the plain HTTP redirect server on an ephemeral port."""
    with _serve(tls=False) as server:
        yield server


@pytest.fixture(scope="session")
def https_redirect_server(
    redirect_server: ThreadingHTTPServer,
) -> Iterator[ThreadingHTTPServer]:
    """Start an HTTPS twin with a self-signed certificate, linked to the HTTP one."""
    with _serve(tls=True) as server:
        server.peer_url = redirect_server.base_url  # type: ignore[attr-defined]
        redirect_server.peer_url = server.base_url  # type: ignore[attr-defined]
        yield server


@pytest.fixture
def server_url(redirect_server: ThreadingHTTPServer) -> str:
    """Base URL of the running server, with its hit log cleared."""
    redirect_server.hits.clear()  # type: ignore[attr-defined]
    return redirect_server.base_url  # type: ignore[attr-defined]


@pytest.fixture
def https_server_url(https_redirect_server: ThreadingHTTPServer) -> str:
    """Base URL of the HTTPS server, with its hit log cleared."""
    https_redirect_server.hits.clear()  # type: ignore[attr-defined]
    return https_redirect_server.base_url  # type: ignore[attr-defined]

