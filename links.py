"""Wikilink parsing and link-target normalization."""

from dataclasses import dataclass

OPEN = "[["
CLOSE = "]]"
ALIAS_SEP = "|"


@dataclass(frozen=True)
class WikiLink:
    """A single [[target]] or [[target|alias]] occurrence in a note."""

    target: str
    alias: str | None
    start: int
    end: int


def _match_at(content: str, start: int) -> tuple[str, str | None, int] | None:
    """Try to read a wikilink whose "[[" begins at `start`.

    Returns (raw_target, raw_alias, end) or None if no link closes here.
    The target runs up to the first "|" or "]"; the alias runs up to the
    first "]". Both must be non-empty and the link must close with "]]".
    """
    length = len(content)
    pos = start + len(OPEN)

    target_start = pos
    while pos < length and content[pos] not in "]|":
        pos += 1
    if pos == target_start or pos >= length:
        return None
    target = content[target_start:pos]

    alias = None
    if content[pos] == ALIAS_SEP:
        alias_start = pos + 1
        pos = alias_start
        while pos < length and content[pos] != "]":
            pos += 1
        if pos == alias_start:
            return None
        alias = content[alias_start:pos]

    if not content.startswith(CLOSE, pos):
        return None
    return target, alias, pos + len(CLOSE)


def _scan(content: str):
    """Yield WikiLinks left to right, non-overlapping."""
    pos = content.find(OPEN)
    while pos != -1:
        match = _match_at(content, pos)
        if match is None:
            pos = content.find(OPEN, pos + 1)
            continue

        raw_target, raw_alias, end = match
        target = raw_target.strip()
        if target:
            alias = raw_alias.strip() if raw_alias is not None else None
            yield WikiLink(target=target, alias=alias, start=pos, end=end)
        pos = content.find(OPEN, end)


def parse_wikilinks(content: str) -> list[WikiLink]:
    """Extract all wikilinks from content, in source order."""
    return list(_scan(content))


def contains_wikilinks(content: str) -> bool:
    """Check whether content has at least one wikilink."""
    return next(_scan(content), None) is not None


def extract_file_name(target: str) -> str:
    """Reduce a link target to its file name.

    Examples:
        "note" -> "note"
        "folder/note" -> "note"
        "note#heading" -> "note"
    """
    without_heading = target.split("#", 1)[0]
    return without_heading.split("/")[-1]


def link_key(target: str) -> str:
    """Backlink bucket key for a link target: its lower-cased file name."""
    return extract_file_name(target).lower()
