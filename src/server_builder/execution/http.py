"""
HTTP executor.

Sends each command straight to the control plane's HTTP interface instead of
going through the command line client.

Mapping
command words become the path, "drives <uuid> info" -> /drives/<uuid>/info
argument lines become a text/plain POST body
response body lines are the command output

Authentication is left to the endpoint in front of base_url.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from server_builder.core.errors import ExecutionFailed
from server_builder.core.lines import split_output
from server_builder.execution.base import CommandExecutor

logger = logging.getLogger(__name__)


def command_path(command: str) -> str:
    """Translate command words into a request path."""
    return "/" + "/".join(command.split())


@dataclass(frozen=True)
class HttpExecutor(CommandExecutor):
    base_url: str
    timeout_seconds: float = 30.0

    def execute(self, command: str, args: list[str]) -> list[str]:
        url = self.base_url.rstrip("/") + command_path(command)
        body = "\n".join(args).encode("utf-8")

        http_req = Request(
            url=url,
            data=body,
            headers={"Content-Type": "text/plain"},
            method="POST",
        )

        logger.debug("POST %s", url)
        try:
            with urlopen(http_req, timeout=self.timeout_seconds) as resp:
                text = resp.read().decode("utf-8")
        except HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="replace").strip()
            raise ExecutionFailed(f"{command} failed with HTTP {exc.code}: {detail}") from exc
        except URLError as exc:
            raise ExecutionFailed(f"{command} could not reach {self.base_url}: {exc.reason}") from exc
        except TimeoutError as exc:
            raise ExecutionFailed(f"{command} timed out after {self.timeout_seconds} seconds") from exc

        return split_output(text)
