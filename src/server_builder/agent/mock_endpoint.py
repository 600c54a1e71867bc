"""
Mock control plane endpoint.

Serves an InMemoryControlPlane over HTTP so the HttpExecutor, and the full
builder, can be exercised end to end without a real account.

Request shape matches HttpExecutor:
POST /drives/create with "<key> <value>" lines as the body
POST /drives/<uuid>/image/<source uuid>
POST /drives/<uuid>/info
POST /servers/create
GET works the same for the info paths.

Unknown top level paths return 404. Commands the control plane rejects return
500 with the error text as the body.
"""

from __future__ import annotations

import argparse
import logging
import threading
import time
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Optional, Sequence

from server_builder.core.errors import ExecutionFailed
from server_builder.core.lines import split_output
from server_builder.execution.mock import InMemoryControlPlane

logger = logging.getLogger(__name__)

RESOURCE_ROOTS = ("drives", "servers")


@dataclass(frozen=True)
class MockEndpointConfig:
    """
    imaging_polls
    Info calls that report an imaged drive as still imaging.

    fail_on
    Command prefixes answered with a 500.
    """

    imaging_polls: int = 1
    fail_on: tuple[str, ...] = ()


class MockEndpointHandler(BaseHTTPRequestHandler):
    server_version = "mock-control-plane/1.0"

    def _read_body(self) -> str:
        length = int(self.headers.get("Content-Length", "0"))
        return self.rfile.read(length).decode("utf-8") if length else ""

    def _send_text(self, status: int, text: str) -> None:
        body = text.encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "text/plain")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _handle(self, body: str) -> None:
        plane: InMemoryControlPlane = self.server.control_plane  # type: ignore[attr-defined]
        start = time.time()

        words = [w for w in self.path.split("?", 1)[0].split("/") if w]
        if not words or words[0] not in RESOURCE_ROOTS:
            self._send_text(404, "unknown endpoint\n")
            return

        command = " ".join(words)
        status = 200
        try:
            lines = plane.execute(command, split_output(body))
            self._send_text(200, "\n".join(lines) + ("\n" if lines else ""))
        except ExecutionFailed as exc:
            status = 500
            self._send_text(500, f"{exc}\n")
        finally:
            duration_ms = int((time.time() - start) * 1000.0)
            logger.debug("%s %s -> %d in %d ms", self.command, self.path, status, duration_ms)

    def do_POST(self) -> None:  # noqa: N802
        self._handle(self._read_body())

    def do_GET(self) -> None:  # noqa: N802
        self._handle("")

    def log_message(self, format: str, *args: object) -> None:  # noqa: A002
        logger.debug("%s - %s", self.address_string(), format % args)


class MockEndpointServer(HTTPServer):
    def __init__(self, host: str, port: int, config: MockEndpointConfig | None = None) -> None:
        super().__init__((host, port), MockEndpointHandler)
        cfg = config or MockEndpointConfig()
        self.control_plane = InMemoryControlPlane(
            imaging_polls=cfg.imaging_polls,
            fail_on=cfg.fail_on,
        )

    @property
    def base_url(self) -> str:
        host, port = self.server_address[:2]
        return f"http://{host}:{port}"

    def start_background(self) -> threading.Thread:
        """Serve from a daemon thread. Stop with shutdown()."""
        thread = threading.Thread(target=self.serve_forever, daemon=True)
        thread.start()
        return thread


def run_mock_endpoint(host: str, port: int, config: MockEndpointConfig | None = None) -> None:
    server = MockEndpointServer(host, port, config)
    logger.info("mock control plane listening on %s", server.base_url)
    try:
        server.serve_forever()
    finally:
        server.server_close()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="server-builder-mock",
        description="Serve an in memory control plane over HTTP.",
    )
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8086)
    parser.add_argument(
        "--imaging-polls",
        type=int,
        default=1,
        help="info calls that still report an imaged drive as imaging",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s: %(message)s")
    run_mock_endpoint(args.host, args.port, MockEndpointConfig(imaging_polls=args.imaging_polls))
    return 0
