"""
Pull endpoint serving the gauge registry.

Purpose:
- Answer GET <metrics_path> with the current exposition text.
- Answer every other path with an empty 404.

Logic flow:
1) MetricsServer.start() binds a ThreadingHTTPServer and serves it from a
   daemon thread so the poll loop keeps the main thread.
2) Each request renders AccountMetrics on demand; there is no caching.
3) Encoding failures are logged and answered with an empty 500.
"""

from __future__ import annotations

from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import urlsplit
import logging
import threading

from prometheus_client import CONTENT_TYPE_LATEST

from .metrics import AccountMetrics

logger = logging.getLogger(__name__)


def _make_handler(metrics: AccountMetrics, path: str) -> type[BaseHTTPRequestHandler]:
    class MetricsHandler(BaseHTTPRequestHandler):
        def do_GET(self) -> None:  # noqa: N802 (http.server naming)
            if urlsplit(self.path).path != path:
                self._empty(404)
                return
            try:
                output = metrics.render()
            except Exception:
                logger.exception("Failed to encode metrics data")
                self._empty(500)
                return
            self.send_response(200)
            self.send_header("Content-Type", CONTENT_TYPE_LATEST)
            self.send_header("Content-Length", str(len(output)))
            self.end_headers()
            self.wfile.write(output)

        def _empty(self, status: int) -> None:
            self.send_response(status)
            self.send_header("Content-Length", "0")
            self.end_headers()

        def log_message(self, format: str, *args) -> None:
            logger.debug("%s %s", self.address_string(), format % args)

    return MetricsHandler


class MetricsServer:
    """
    Threaded HTTP server exposing an AccountMetrics registry.
    """

    def __init__(
        self,
        metrics: AccountMetrics,
        *,
        host: str = "0.0.0.0",
        port: int = 8080,
        path: str = "/metrics",
    ) -> None:
        self.metrics = metrics
        self.path = path
        self._httpd = ThreadingHTTPServer((host, port), _make_handler(metrics, path))
        self._httpd.daemon_threads = True
        self._thread: threading.Thread | None = None

    @property
    def address(self) -> tuple[str, int]:
        host, port = self._httpd.server_address[:2]
        return str(host), int(port)

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self._httpd.serve_forever, name="metrics-server", daemon=True
        )
        self._thread.start()
        host, port = self.address
        logger.info("Serving metrics on http://%s:%s%s", host, port, self.path)

    def stop(self) -> None:
        if self._thread is not None:
            self._httpd.shutdown()
            self._thread.join()
            self._thread = None
        self._httpd.server_close()
