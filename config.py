"""Configuration for the wikilink index server."""

import os
from pathlib import Path

# Directories never indexed or watched
EXCLUDED_DIRS = frozenset(
    {".git", "node_modules", ".obsidian", ".trash", ".venv", ".roamingzed"}
)

# Change coordinator
DEFAULT_DEBOUNCE_MS = 500

# Query defaults
DEFAULT_SEARCH_LIMIT = 10
DEFAULT_GRAPH_DEPTH = 2

# read_note size limit
MAX_NOTE_CHARS = 1_000_000


def get_workspace_root() -> Path:
    """Get the workspace root directory."""
    root = os.environ.get("WIKILINK_WORKSPACE")
    if root:
        return Path(root)
    return Path.cwd()


def get_debounce_seconds() -> float:
    """Get the per-path debounce window in seconds."""
    raw = os.environ.get("WIKILINK_DEBOUNCE_MS")
    try:
        ms = int(raw) if raw else DEFAULT_DEBOUNCE_MS
    except ValueError:
        ms = DEFAULT_DEBOUNCE_MS
    return max(ms, 0) / 1000


def get_log_level() -> str:
    """Get the log level name."""
    return os.environ.get("WIKILINK_LOG_LEVEL", "INFO").upper()


def watch_enabled() -> bool:
    """Whether to watch the workspace for changes after the initial build."""
    return os.environ.get("WIKILINK_WATCH", "1").lower() not in {"0", "false", "no"}
