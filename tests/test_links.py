"""Tests for wikilink parsing and normalization."""

from links import (
    WikiLink,
    contains_wikilinks,
    extract_file_name,
    link_key,
    parse_wikilinks,
)


def test_parse_basic_wikilink():
    assert parse_wikilinks("See [[My Note]] here.") == [
        WikiLink(target="My Note", alias=None, start=4, end=15)
    ]


def test_parse_aliased_wikilink():
    (link,) = parse_wikilinks("See [[My Note| display text ]] here.")
    assert link.target == "My Note"
    assert link.alias == "display text"


def test_parse_heading_kept_in_target():
    (link,) = parse_wikilinks("[[folder/My Note#Section]]")
    assert link.target == "folder/My Note#Section"
    assert link.alias is None


def test_parse_multiple_in_order_with_offsets():
    content = "Link to [[A]] and [[B|alias]] and [[C#heading]]."
    links = parse_wikilinks(content)
    assert [l.target for l in links] == ["A", "B", "C#heading"]
    for link in links:
        assert content[link.start : link.end].startswith("[[")
        assert content[link.start : link.end].endswith("]]")
    assert links[1].start == content.index("[[B")


def test_parse_counts_well_formed_links():
    content = " ".join(f"[[note{i}]]" for i in range(25))
    assert len(parse_wikilinks(content)) == 25


def test_parse_none():
    assert parse_wikilinks("No links here.") == []


def test_parse_empty_target_discarded():
    assert parse_wikilinks("[[   ]] and [[real]]") == [
        WikiLink(target="real", alias=None, start=12, end=20)
    ]


def test_parse_links_do_not_nest():
    assert parse_wikilinks("[[open and [[closed]]")[0].target == "open and [[closed"


def test_parse_stray_bracket_breaks_link():
    assert parse_wikilinks("[[a]b]] then [[c]]") == [
        WikiLink(target="c", alias=None, start=13, end=18)
    ]


def test_parse_first_close_wins():
    links = parse_wikilinks("[[a]]]]")
    assert [(l.target, l.start, l.end) for l in links] == [("a", 0, 5)]


def test_parse_empty_alias_is_not_a_link():
    assert parse_wikilinks("[[a|]]") == []


def test_parse_alias_keeps_later_pipes():
    (link,) = parse_wikilinks("[[a|b|c]]")
    assert link.target == "a"
    assert link.alias == "b|c"


def test_contains_wikilinks():
    assert contains_wikilinks("see [[x]]")
    assert not contains_wikilinks("see [x]")
    assert not contains_wikilinks("[[ ]]")
    # No state carried between calls
    assert contains_wikilinks("see [[x]]")


def test_extract_file_name():
    assert extract_file_name("folder/note#heading") == "note"
    assert extract_file_name("note") == "note"
    assert extract_file_name("a/b/My Note") == "My Note"


def test_link_key():
    assert link_key("Folder/My Note#Heading") == "my note"
    assert link_key("notes/b.md") == "b.md"
    assert link_key("B") == "b"
