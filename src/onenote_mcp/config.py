"""Runtime settings, read from the process environment.

`.env` files are loaded by the entry point before `Settings.from_env` runs.
"""

import logging
import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Self

DEFAULT_AUTHORITY = "https://login.microsoftonline.com/common"
GRAPH_BASE_URL = "https://graph.microsoft.com/v1.0"
DEFAULT_CACHE_FILE = ".mcp-onenote-cache.json"
DEFAULT_SCOPES = ("Notes.Read", "Notes.Create", "Notes.ReadWrite", "User.Read")
DEVICE_CODE_TIMEOUT = 300.0  # seconds

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    client_id: str | None = None
    authority: str = DEFAULT_AUTHORITY
    scopes: tuple[str, ...] = DEFAULT_SCOPES
    cache_path: Path = Path(DEFAULT_CACHE_FILE)
    graph_base_url: str = GRAPH_BASE_URL
    log_level: str = "INFO"
    device_code_timeout: float = DEVICE_CODE_TIMEOUT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Self:
        """Build settings from environment variables.

        Unset or empty variables fall back to the defaults.
        """
        env = os.environ if environ is None else environ
        return cls(
            client_id=env.get("AZURE_CLIENT_ID") or None,
            authority=env.get("AZURE_AUTHORITY") or DEFAULT_AUTHORITY,
            cache_path=Path(env.get("ONENOTE_MCP_CACHE_FILE") or DEFAULT_CACHE_FILE),
            graph_base_url=(env.get("ONENOTE_MCP_GRAPH_URL") or GRAPH_BASE_URL).rstrip(
                "/"
            ),
            log_level=(env.get("ONENOTE_MCP_LOG_LEVEL") or "INFO").upper(),
        )


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Send the package's logs to stderr.

    Stdout is reserved for protocol messages, so nothing here touches it.
    Safe to call more than once.
    """
    logger = logging.getLogger("onenote_mcp")
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.propagate = False

    try:
        logger.setLevel(level)
    except ValueError:
        logger.setLevel(logging.INFO)
        logger.warning(f"Unknown log level {level!r}, using INFO")
    return logger
