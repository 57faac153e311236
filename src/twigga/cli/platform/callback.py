"""Loopback HTTP listener that captures the login redirect.

The service redirects the browser to ``http://localhost:<port>/callback``
with the session token in the query string. The handler hands the token to
the waiting login command through a one-slot queue and then shuts the
listener down.
"""

from __future__ import annotations

import logging
import queue
import socket
import threading
from collections.abc import Mapping, Sequence
from http.server import BaseHTTPRequestHandler, HTTPServer
from urllib.parse import parse_qs, urlparse

from .config import CALLBACK_HOST, CALLBACK_HOST_V6, CALLBACK_PORT
from .exceptions import LoginTimeoutError

logger = logging.getLogger(__name__)

CALLBACK_PATH = "/callback"

_PAGE = """<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title} &bull; Twigga</title>
<meta name="viewport" content="width=device-width, initial-scale=1">
<style>
  body {{ margin: 0; display: grid; place-items: center; min-height: 100vh;
         font: 14px/1.5 system-ui, -apple-system, Segoe UI, Roboto, Arial; color: #0f172a; }}
  .card {{ max-width: 440px; padding: 28px; border: 1px solid #e2e8f0;
          border-radius: 16px; text-align: center; }}
  h1 {{ margin: 8px 0 4px; font-size: 20px; color: {accent}; }}
  p {{ margin: 8px 0 0; color: #64748b; }}
</style>
</head>
<body>
  <div class="card" role="status">
    <h1>{heading}</h1>
    <p>{body}</p>
  </div>
</body>
</html>
"""

SUCCESS_HTML = _PAGE.format(
    title="Login successful",
    accent="#16a34a",
    heading="You're logged in to Twigga",
    body="Authentication completed successfully. You can close this window.",
)

ERROR_HTML = _PAGE.format(
    title="Login error",
    accent="#ef4444",
    heading="We couldn't complete login",
    body=(
        "No token was found in the callback URL. Please try again or copy the "
        "full URL and run <code>twigga login</code> again."
    ),
)


def extract_callback_token(query: Mapping[str, Sequence[str]]) -> str:
    """Find the session token in parsed callback query parameters.

    ``token`` wins when present. Otherwise the first parameter whose name
    contains ``token`` (case-insensitive) is used.

    Args:
        query: Parameters as returned by ``urllib.parse.parse_qs``.

    Returns:
        The token, or an empty string if none was found.
    """
    values = query.get("token") or []
    if values and values[0]:
        return values[0]
    for key, values in query.items():
        if "token" in key.lower() and values and values[0]:
            return values[0]
    return ""


class _CallbackHandler(BaseHTTPRequestHandler):
    server: _CallbackHTTPServer

    def do_GET(self) -> None:
        parsed = urlparse(self.path)
        if parsed.path != CALLBACK_PATH:
            self.send_error(404)
            return

        token = extract_callback_token(parse_qs(parsed.query))
        page = SUCCESS_HTML if token else ERROR_HTML
        body = page.encode("utf-8")

        self.send_response(200)
        self.send_header("Content-Type", "text/html; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

        self.server.publish(token)
        # shutdown() blocks until serve_forever returns, which cannot happen
        # while this handler runs on the serving thread.
        threading.Thread(target=self.server.shutdown, daemon=True).start()

    def log_message(self, format: str, *args) -> None:
        logger.debug("callback %s - %s", self.address_string(), format % args)


class _CallbackHTTPServer(HTTPServer):
    def __init__(self, address: tuple[str, int], tokens: queue.Queue[str]) -> None:
        super().__init__(address, _CallbackHandler)
        self._tokens = tokens

    def publish(self, token: str) -> None:
        try:
            self._tokens.put_nowait(token)
        except queue.Full:
            logger.debug("Dropping duplicate login callback")


class _CallbackHTTPServerV6(_CallbackHTTPServer):
    address_family = socket.AF_INET6


class CallbackServer:
    """One-shot loopback listener for the login redirect.

    The redirect URL names ``localhost``, which browsers may resolve to
    either loopback family, so the listener binds ``host`` and, when given,
    ``ipv6_host`` on the same port. Both publish into the same one-slot
    queue. Binding happens in the constructor so a port conflict surfaces
    before the browser is sent anywhere.

    Args:
        host: IPv4 interface to bind; failing to bind it is an error.
        port: Port to bind; 0 picks a free port.
        ipv6_host: IPv6 interface to bind as well, skipped if unavailable.
    """

    def __init__(
        self,
        host: str = CALLBACK_HOST,
        port: int = CALLBACK_PORT,
        ipv6_host: str | None = CALLBACK_HOST_V6,
    ):
        self._tokens: queue.Queue[str] = queue.Queue(maxsize=1)
        self._servers: list[_CallbackHTTPServer] = [
            _CallbackHTTPServer((host, port), self._tokens)
        ]
        if ipv6_host:
            try:
                self._servers.append(
                    _CallbackHTTPServerV6((ipv6_host, self.port), self._tokens)
                )
            except OSError as e:
                logger.debug("Not listening on %s: %s", ipv6_host, e)
        self._threads: list[threading.Thread] = []

    @property
    def port(self) -> int:
        return self._servers[0].server_address[1]

    @property
    def hosts(self) -> list[str]:
        """Interfaces the listener is bound to."""
        return [srv.server_address[0] for srv in self._servers]

    @property
    def redirect_url(self) -> str:
        return f"http://localhost:{self.port}{CALLBACK_PATH}"

    def start(self) -> None:
        """Serve requests on background daemon threads."""
        for srv in self._servers:
            thread = threading.Thread(
                target=srv.serve_forever, name="twigga-login-callback", daemon=True
            )
            thread.start()
            self._threads.append(thread)
        logger.debug("Listening for login callback on port %d (%s)", self.port, self.hosts)

    def wait_for_token(self, timeout: float) -> str:
        """Block until a callback publishes a token or ``timeout`` passes.

        Returns:
            The captured token, possibly empty.

        Raises:
            LoginTimeoutError: If no callback arrived in time.
        """
        try:
            return self._tokens.get(timeout=timeout)
        except queue.Empty:
            raise LoginTimeoutError(
                "timeout! try 'twigga login' again or open the auth url manually"
            ) from None

    def close(self) -> None:
        """Stop serving and release the port."""
        if self._threads:
            # shutdown() only returns once serve_forever has run
            for srv in self._servers:
                srv.shutdown()
            for thread in self._threads:
                thread.join(timeout=1)
            self._threads = []
        for srv in self._servers:
            srv.server_close()

    def __enter__(self) -> CallbackServer:
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.close()
