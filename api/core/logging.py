"""
Logging setup.

Modules log through `logging.getLogger(__name__)`; this only wires the root
handler once per process.
"""

from __future__ import annotations

import logging

from . import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
MAX_REQUEST_LOG_CHARS = 80

_configured = False


def configure_logging(level: str | None = None) -> None:
    global _configured
    if _configured:
        return None
    logging.basicConfig(level=level or settings.log_level(), format=LOG_FORMAT)
    _configured = True


def request_log_line(
    method: str,
    path: str,
    status_code: int,
    duration_ms: int,
    response_body: str | None = None,
) -> str:
    line = f"{method} {path} {status_code} in {duration_ms}ms"
    if response_body:
        line += f" :: {response_body}"
    if len(line) > MAX_REQUEST_LOG_CHARS:
        line = line[: MAX_REQUEST_LOG_CHARS - 1] + "…"
    return line
