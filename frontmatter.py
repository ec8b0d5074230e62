"""YAML frontmatter handling for notes shown by read_note."""

import yaml

DELIMITER = "---"


def split(content: str) -> tuple[dict, str]:
    """Separate a leading YAML block from the note body.

    The block must open with a "---" line and close with another. Returns
    ({}, content) when there is no block or it is not a YAML mapping.
    """
    lines = content.splitlines(keepends=True)
    if not lines or lines[0].rstrip("\r\n") != DELIMITER:
        return {}, content

    for i, line in enumerate(lines[1:], start=1):
        if line.rstrip("\r\n") == DELIMITER:
            break
    else:
        return {}, content

    try:
        metadata = yaml.safe_load("".join(lines[1:i]))
    except yaml.YAMLError:
        return {}, content

    body = "".join(lines[i + 1 :])
    if metadata is None:
        return {}, body
    if not isinstance(metadata, dict):
        return {}, content
    return metadata, body


def format_properties(metadata: dict) -> list[str]:
    """Render frontmatter properties as indented "key: value" lines."""
    lines = []
    for key, value in metadata.items():
        if isinstance(value, list):
            value = ", ".join(str(v) for v in value)
        lines.append(f"  {key}: {value}")
    return lines
