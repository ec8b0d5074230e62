"""Read-only queries over a LinkIndex: links, search, stats, and graph."""

from dataclasses import dataclass, field

from config import DEFAULT_GRAPH_DEPTH, DEFAULT_SEARCH_LIMIT
from index import LinkIndex, NoteMetadata
from links import link_key


@dataclass
class IndexStats:
    """Index totals; links and backlinks count duplicates and entries."""

    total_notes: int
    total_links: int
    total_backlinks: int


@dataclass
class GraphData:
    """Graph nodes in discovery order and (from, to) edges, not deduplicated."""

    nodes: list[str] = field(default_factory=list)
    edges: list[tuple[str, str]] = field(default_factory=list)

    def to_dict(self) -> dict:
        """JSON-ready form with edges as two-item lists."""
        return {"nodes": self.nodes, "edges": [list(e) for e in self.edges]}


def file_key(file_path: str) -> str:
    """Backlink key for a note path: lower-cased file name without .md.

    "Projects/My Note.md" -> "my note"
    """
    key = link_key(file_path)
    if key.endswith(".md"):
        key = key[: -len(".md")]
    return key


def get_backlinks(index: LinkIndex, file_path: str) -> list[str]:
    """Paths of notes linking to a file, matched by normalized file name."""
    return index.backlinks_for(file_key(file_path))


def get_outlinks(index: LinkIndex, file_path: str) -> list[str]:
    """Outgoing link keys of the note stored at exactly `file_path`."""
    note = index.note(file_path)
    return list(note.outlinks) if note else []


def search_notes(
    index: LinkIndex, query: str, limit: int = DEFAULT_SEARCH_LIMIT
) -> list[NoteMetadata]:
    """Notes whose title or path contains `query`, case-insensitively.

    Results follow index insertion order and stop at `limit`; no ranking.
    """
    query_lower = query.lower()
    results = []
    if limit <= 0:
        return results

    with index.lock:
        for note in index.notes.values():
            if query_lower in note.title.lower() or query_lower in note.path.lower():
                results.append(note)
                if len(results) >= limit:
                    break

    return results


def get_stats(index: LinkIndex) -> IndexStats:
    """Note count, outlink count (with duplicates), and backlink entry count."""
    with index.lock:
        return IndexStats(
            total_notes=len(index.notes),
            total_links=sum(len(n.outlinks) for n in index.notes.values()),
            total_backlinks=sum(len(s) for s in index.backlinks.values()),
        )


def build_graph(
    index: LinkIndex, center: str | None = None, depth: int = DEFAULT_GRAPH_DEPTH
) -> GraphData:
    """Link graph of the whole index, or a neighbourhood around `center`.

    Without a center: one node per note and one edge per outlink, not
    deduplicated. With a center: depth-first walk over outlinks
    (node -> target) and backlinks (source -> node) up to `depth` hops.
    Each node is visited once; an edge is emitted every time it is seen from
    a visited node, so shared neighbours can yield repeated edges.
    """
    with index.lock:
        if center is None:
            return _full_graph(index)
        return _neighbourhood(index, center, depth)


def _full_graph(index: LinkIndex) -> GraphData:
    """One node per note, one edge per stored outlink."""
    graph = GraphData()
    for note in index.notes.values():
        graph.nodes.append(note.path)
        for target in note.outlinks:
            graph.edges.append((note.path, target))
    return graph


def _adjacent(index: LinkIndex, node: str):
    """Yield (edge, neighbour) for the outlinks then backlinks of a node."""
    for target in get_outlinks(index, node):
        yield (node, target), target
    for source in get_backlinks(index, node):
        yield (source, node), source


def _neighbourhood(index: LinkIndex, center: str, depth: int) -> GraphData:
    """Depth-first walk from `center`, bounded by `depth` hops."""
    graph = GraphData()
    visited: dict[str, None] = {}
    stack = []

    def visit(node: str, node_depth: int) -> None:
        if node_depth > depth or node in visited:
            return
        visited[node] = None
        stack.append((node_depth, _adjacent(index, node)))

    visit(center, 0)
    while stack:
        node_depth, neighbours = stack[-1]
        step = next(neighbours, None)
        if step is None:
            stack.pop()
            continue
        edge, neighbour = step
        graph.edges.append(edge)
        if node_depth < depth:
            visit(neighbour, node_depth + 1)

    graph.nodes = list(visited)
    return graph
