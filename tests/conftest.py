"""Shared test fixtures for the wikilink index server tests."""

from pathlib import Path

import pytest

from index import LinkIndex


@pytest.fixture
def tmp_vault(tmp_path: Path) -> Path:
    """Create a temporary workspace with sample linked notes."""
    (tmp_path / ".obsidian").mkdir()
    (tmp_path / ".obsidian" / "workspace.md").write_text("[[a]]\n")
    (tmp_path / "node_modules" / "pkg").mkdir(parents=True)
    (tmp_path / "node_modules" / "pkg" / "readme.md").write_text("[[b]]\n")

    (tmp_path / "Projects").mkdir()
    (tmp_path / "Archive").mkdir()

    (tmp_path / "a.md").write_text("# A\n\nSee [[b]].\n")
    (tmp_path / "b.md").write_text("# B\n\nNo links here.\n")
    (tmp_path / "Projects" / "spec.md").write_text(
        "---\ntitle: Project Spec\ntags:\n  - project\n---\n# Spec\n\nSee also [[ideas]].\n"
    )
    (tmp_path / "Projects" / "ideas.md").write_text(
        "# Ideas\n\n- [[spec]] is the main doc\n- Check [[Archive/old-stuff#Notes|old]] too\n"
    )
    (tmp_path / "Archive" / "old-stuff.md").write_text("# Old Stuff\n\nArchived.\n")

    return tmp_path


@pytest.fixture
def empty_index() -> LinkIndex:
    return LinkIndex.create("/workspace")
