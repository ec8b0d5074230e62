"""Tests for link, search, stats, and graph queries."""

from pathlib import Path

import pytest

from index import LinkIndex
from indexer import build_index
from queries import (
    GraphData,
    IndexStats,
    build_graph,
    file_key,
    get_backlinks,
    get_outlinks,
    get_stats,
    search_notes,
)
from vault import Vault


@pytest.fixture
def pair_index(tmp_path: Path) -> LinkIndex:
    (tmp_path / "a.md").write_text("[[b]]")
    (tmp_path / "b.md").write_text("no links")
    return build_index(Vault(tmp_path))


def test_two_note_scenario(pair_index):
    assert get_backlinks(pair_index, "b.md") == ["a.md"]
    assert get_outlinks(pair_index, "a.md") == ["b"]
    assert get_stats(pair_index) == IndexStats(
        total_notes=2, total_links=1, total_backlinks=1
    )


def test_backlinks_normalize_query_path(pair_index):
    assert get_backlinks(pair_index, "B") == ["a.md"]
    assert get_backlinks(pair_index, "other/folder/b.md") == ["a.md"]
    assert get_backlinks(pair_index, "b#heading") == ["a.md"]


def test_unknown_file_is_empty(pair_index):
    assert get_backlinks(pair_index, "missing.md") == []
    assert get_outlinks(pair_index, "missing.md") == []
    # Outlinks are looked up by exact stored path
    assert get_outlinks(pair_index, "A.md") == []


def test_queries_do_not_mutate(pair_index):
    get_outlinks(pair_index, "a.md").append("zzz")
    get_backlinks(pair_index, "b.md").append("zzz")
    assert pair_index.notes["a.md"].outlinks == ["b"]
    assert pair_index.backlinks["b"] == ["a.md"]


def test_retraction_visible_to_queries(empty_index):
    empty_index.upsert("A.md", "[[B]]", 1.0)
    empty_index.upsert("A.md", "[[C]]", 2.0)

    assert "A.md" not in get_backlinks(empty_index, "B.md")
    assert get_backlinks(empty_index, "C.md") == ["A.md"]


def test_removal_visible_to_queries(empty_index):
    empty_index.upsert("A.md", "[[B]] [[C]]", 1.0)
    empty_index.remove("A.md")

    assert get_outlinks(empty_index, "A.md") == []
    assert get_backlinks(empty_index, "B.md") == []
    assert get_backlinks(empty_index, "C.md") == []


def test_search_by_title_and_path(tmp_vault: Path):
    index = build_index(Vault(tmp_vault))

    assert [n.path for n in search_notes(index, "OLD STUFF")] == [
        "Archive/old-stuff.md"
    ]
    assert {n.path for n in search_notes(index, "projects/")} == {
        "Projects/spec.md",
        "Projects/ideas.md",
    }
    assert search_notes(index, "nothing matches this") == []


def test_search_insertion_order_and_limit(empty_index):
    for name in ["zeta", "alpha", "mid", "beta"]:
        empty_index.upsert(f"{name}-note.md", "", 1.0)

    results = search_notes(empty_index, "note", limit=3)
    assert [n.path for n in results] == ["zeta-note.md", "alpha-note.md", "mid-note.md"]
    assert search_notes(empty_index, "note", limit=0) == []


def test_stats_count_duplicates(empty_index):
    empty_index.upsert("a.md", "[[b]] [[b]] [[c]]", 1.0)
    empty_index.upsert("d.md", "[[b]]", 1.0)

    assert get_stats(empty_index) == IndexStats(
        total_notes=2, total_links=4, total_backlinks=3
    )


def test_full_graph(empty_index):
    empty_index.upsert("a.md", "[[b]] [[b]]", 1.0)
    empty_index.upsert("b.md", "[[a]]", 1.0)

    graph = build_graph(empty_index)
    assert graph.nodes == ["a.md", "b.md"]
    assert graph.edges == [("a.md", "b"), ("a.md", "b"), ("b.md", "a")]


def test_centered_graph_depth_one(pair_index):
    graph = build_graph(pair_index, "a.md", depth=1)

    assert set(graph.nodes) == {"a.md", "b"}
    assert ("a.md", "b") in graph.edges


def test_centered_graph_depth_zero(pair_index):
    graph = build_graph(pair_index, "a.md", depth=0)
    assert graph.nodes == ["a.md"]
    assert graph.edges == [("a.md", "b")]


def test_centered_graph_handles_cycles(empty_index):
    empty_index.upsert("a.md", "[[b]]", 1.0)
    empty_index.upsert("b.md", "[[a]]", 1.0)

    graph = build_graph(empty_index, "a.md", depth=10)
    assert len(graph.nodes) == len(set(graph.nodes))
    assert graph.nodes[0] == "a.md"
    assert "b" in graph.nodes


def test_centered_graph_follows_backlinks(empty_index):
    empty_index.upsert("x.md", "[[hub]]", 1.0)
    empty_index.upsert("y.md", "[[hub]]", 1.0)

    graph = build_graph(empty_index, "hub.md", depth=1)
    assert graph.nodes == ["hub.md", "x.md", "y.md"]
    assert graph.edges == [
        ("x.md", "hub.md"),
        ("x.md", "hub"),
        ("y.md", "hub.md"),
        ("y.md", "hub"),
    ]


def test_centered_graph_unknown_center(empty_index):
    graph = build_graph(empty_index, "ghost.md", depth=2)
    assert graph == GraphData(nodes=["ghost.md"], edges=[])


def test_graph_to_dict(empty_index):
    empty_index.upsert("a.md", "[[b]]", 1.0)
    empty_index.upsert("b.md", "", 1.0)
    data = build_graph(empty_index).to_dict()
    assert data == {"nodes": ["a.md", "b.md"], "edges": [["a.md", "b"]]}


def test_backlinks_for_explicit_extension_link(empty_index):
    empty_index.upsert("a.md", "[[b.md]]", 1.0)

    assert get_outlinks(empty_index, "a.md") == ["b.md"]
    # Query paths drop .md, so only an extensionless link matches b.md
    assert get_backlinks(empty_index, "b.md") == []
    assert empty_index.backlinks_for("b.md") == ["a.md"]


def test_file_key():
    assert file_key("Projects/My Note.md") == "my note"
    assert file_key("b#heading") == "b"
    assert file_key("archive.md.md") == "archive.md"
