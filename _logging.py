"""Logging configuration for the wikilink index server.

Modules log through `logging.getLogger(__name__)`. Output goes to stderr so
stdout stays free for the stdio MCP transport. The level comes from the
WIKILINK_LOG_LEVEL environment variable (default INFO).
"""

import logging
import sys

from config import get_log_level


def configure_logging() -> None:
    """Install a stderr handler on the root logger.

    Call once at startup. Subsequent calls are no-ops.
    """
    root_logger = logging.getLogger()

    if any(getattr(h, "_wikilink", False) for h in root_logger.handlers):
        return

    level = getattr(logging, get_log_level(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    handler._wikilink = True

    root_logger.setLevel(level)
    root_logger.addHandler(handler)
