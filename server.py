"""FastMCP server exposing the wikilink index of a workspace."""

import logging

from fastmcp import FastMCP

import config
import tools
from _logging import configure_logging
from vault import Vault

logger = logging.getLogger(__name__)

READ_ONLY = {"readOnlyHint": True, "destructiveHint": False, "idempotentHint": True}


def create_server(ws: tools.Workspace) -> FastMCP:
    """Create an MCP server whose tools read from `ws`."""
    mcp = FastMCP("wikilinks")

    # --- Links ---

    @mcp.tool(annotations=READ_ONLY)
    def get_backlinks(file: str) -> str:
        """Get all notes that link to the specified file.

        Args:
            file: File path or note name to get backlinks for
        """
        return tools.get_backlinks(ws, file)

    @mcp.tool(annotations=READ_ONLY)
    def get_outlinks(file: str) -> str:
        """Get all wikilinks from the specified file.

        Args:
            file: Workspace-relative file path (e.g., "projects/roadmap.md")
        """
        return tools.get_outlinks(ws, file)

    # --- Search & Graph ---

    @mcp.tool(annotations=READ_ONLY)
    def search_notes(query: str, limit: int = config.DEFAULT_SEARCH_LIMIT) -> str:
        """Search for notes by title or path (case-insensitive).

        Args:
            query: Text to search for
            limit: Maximum number of results
        """
        return tools.search_notes(ws, query, limit)

    @mcp.tool(annotations=READ_ONLY)
    def get_graph(
        file: str | None = None, depth: int = config.DEFAULT_GRAPH_DEPTH
    ) -> str:
        """Get link graph data for visualization.

        Args:
            file: Center file (optional, uses all notes if not specified)
            depth: Number of hops to follow from the center file
        """
        return tools.get_graph(ws, file, depth)

    # --- Notes ---

    @mcp.tool(annotations=READ_ONLY)
    def read_note(file: str, include_frontmatter: bool = True) -> str:
        """Read a markdown note with its link counts.

        Args:
            file: Workspace-relative path or note name
            include_frontmatter: If True, list frontmatter properties separately from body
        """
        return tools.read_note(ws, file, include_frontmatter)

    # --- Resources ---

    @mcp.resource("wikilinks://index", mime_type="application/json")
    def link_index() -> str:
        """Full link index snapshot."""
        return tools.index_snapshot(ws)

    @mcp.resource("wikilinks://stats", mime_type="application/json")
    def link_stats() -> str:
        """Index statistics."""
        return tools.index_stats(ws)

    return mcp


def main() -> None:
    configure_logging()

    root = config.get_workspace_root()
    logger.info("Starting server for: %s", root)
    ws = tools.Workspace(Vault(root), debounce_seconds=config.get_debounce_seconds())
    ws.start(watch=config.watch_enabled())

    mcp = create_server(ws)
    try:
        mcp.run()
    finally:
        ws.stop()


if __name__ == "__main__":
    main()
