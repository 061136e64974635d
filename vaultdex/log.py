"""Logging setup shared by the CLI and the MCP server.

Logs always go to stderr: stdout carries MCP framing when serving.
"""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

LOG_LEVEL_ENV_VAR = "VAULTDEX_LOG_LEVEL"


def configure_logging(level: str | None = None) -> None:
    level_name = (level or os.getenv(LOG_LEVEL_ENV_VAR) or "WARNING").upper()
    logging.basicConfig(
        level=level_name,
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)],
        force=True,
    )
