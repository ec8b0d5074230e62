"""Tool implementations: index lifecycle and text payloads for MCP clients."""

import json
import logging

import frontmatter
import queries
from config import (
    DEFAULT_DEBOUNCE_MS,
    DEFAULT_GRAPH_DEPTH,
    DEFAULT_SEARCH_LIMIT,
    MAX_NOTE_CHARS,
)
from index import LinkIndex, export_index
from indexer import build_index
from vault import Vault
from watcher import ChangeCoordinator, FileWatcher

logger = logging.getLogger(__name__)

NOT_INITIALIZED = "Error: Index not initialized"


class Workspace:
    """Owns the index of one vault plus the machinery that keeps it fresh.

    `index` stays None until `initialize()` has built it; tools report the
    uninitialized condition instead of failing.
    """

    def __init__(
        self, vault: Vault, debounce_seconds: float = DEFAULT_DEBOUNCE_MS / 1000
    ):
        self.vault = vault
        self.debounce_seconds = debounce_seconds
        self.index: LinkIndex | None = None
        self.coordinator: ChangeCoordinator | None = None
        self.watcher: FileWatcher | None = None

    def initialize(self) -> LinkIndex:
        """Build the index from disk."""
        index = build_index(self.vault)
        self.coordinator = ChangeCoordinator(
            index, self.vault, debounce_seconds=self.debounce_seconds
        )
        self.index = index
        return index

    def start(self, watch: bool = True) -> None:
        """Build the index and, optionally, start watching for changes."""
        index = self.initialize()
        stats = queries.get_stats(index)
        logger.info(
            "Indexed %d notes with %d links", stats.total_notes, stats.total_links
        )
        if watch:
            self.watcher = FileWatcher(self.coordinator, self.vault)
            self.watcher.start()

    def stop(self) -> None:
        """Stop watching and cancel pending work."""
        if self.watcher is not None:
            self.watcher.stop()
            self.watcher = None
        if self.coordinator is not None:
            self.coordinator.cancel_all()


def get_backlinks(ws: Workspace, file: str) -> str:
    """List notes linking to a file."""
    index = ws.index
    if index is None:
        return NOT_INITIALIZED

    backlinks = queries.get_backlinks(index, file)
    if not backlinks:
        return f'No backlinks found for "{file}"'

    lines = []
    for source in backlinks:
        note = index.note(source)
        title = note.title if note else source
        lines.append(f"- [[{title}]] ({source})")
    return f'## Backlinks to "{file}"\n\n' + "\n".join(lines)


def get_outlinks(ws: Workspace, file: str) -> str:
    """List wikilinks from a file."""
    index = ws.index
    if index is None:
        return NOT_INITIALIZED

    outlinks = queries.get_outlinks(index, file)
    if not outlinks:
        return f'No outlinks found in "{file}"'

    lines = [f"- [[{target}]]" for target in outlinks]
    return f'## Outlinks from "{file}"\n\n' + "\n".join(lines)


def search_notes(ws: Workspace, query: str, limit: int = DEFAULT_SEARCH_LIMIT) -> str:
    """Search notes by title or path."""
    index = ws.index
    if index is None:
        return NOT_INITIALIZED

    results = queries.search_notes(index, query, limit)
    if not results:
        return f'No notes found matching "{query}"'

    entries = []
    for note in results:
        incoming = len(queries.get_backlinks(index, note.path))
        entries.append(
            f"- **{note.title}** ({note.path})\n"
            f"  Links: {len(note.outlinks)} out, {incoming} in"
        )
    return f'## Search Results for "{query}"\n\n' + "\n".join(entries)


def get_graph(
    ws: Workspace, file: str | None = None, depth: int = DEFAULT_GRAPH_DEPTH
) -> str:
    """Link graph, whole or centered on a file, as a JSON block."""
    index = ws.index
    if index is None:
        return NOT_INITIALIZED

    stats = queries.get_stats(index)
    graph = queries.build_graph(index, file, depth)

    heading = "## Link Graph"
    if file:
        heading += f' (centered on "{file}")'
    return (
        f"{heading}\n\n"
        f"Stats: {stats.total_notes} notes, {stats.total_links} links\n\n"
        f"```json\n{json.dumps(graph.to_dict(), indent=2)}\n```"
    )


def read_note(ws: Workspace, file: str, include_frontmatter: bool = True) -> str:
    """Read a note with its link counts, optionally splitting out frontmatter."""
    index = ws.index
    if index is None:
        return NOT_INITIALIZED

    try:
        full = ws.vault.absolute(file)
        if not full.is_file():
            full = ws.vault.resolve_path(file)
        if full is None:
            return f"Error: Note not found: {file}"
        content = full.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError, ValueError) as e:
        return f"Error reading file: {e}"

    rel = ws.vault.relative(full)
    if len(content) > MAX_NOTE_CHARS:
        content = content[:MAX_NOTE_CHARS] + "\n\n[Truncated, file exceeds 1MB]"

    note = index.note(rel)
    title = note.title if note else rel
    outlinks = len(note.outlinks) if note else 0
    backlinks = len(queries.get_backlinks(index, rel))

    lines = [
        f"## {title}",
        "",
        f"**Path:** {rel}",
        f"**Outlinks:** {outlinks}",
        f"**Backlinks:** {backlinks}",
    ]

    body = content
    if include_frontmatter:
        meta, body = frontmatter.split(content)
        if meta:
            lines.append("**Frontmatter:**")
            lines.extend(frontmatter.format_properties(meta))

    lines.extend(["", "---", "", body])
    return "\n".join(lines)


def index_snapshot(ws: Workspace) -> str:
    """JSON export of the whole index."""
    if ws.index is None:
        return json.dumps({"error": "Index not initialized"})
    return export_index(ws.index)


def index_stats(ws: Workspace) -> str:
    """JSON stats with root and last update time."""
    index = ws.index
    if index is None:
        return json.dumps({"error": "Index not initialized"})

    stats = queries.get_stats(index)
    return json.dumps(
        {
            "totalNotes": stats.total_notes,
            "totalLinks": stats.total_links,
            "totalBacklinks": stats.total_backlinks,
            "root": index.root,
            "lastUpdated": index.last_updated,
        }
    )
