"""Workspace filesystem access: path resolution, enumeration, and reads."""

from pathlib import Path
from typing import Iterator

from config import EXCLUDED_DIRS


class Vault:
    """A directory of Markdown notes on disk."""

    EXCLUDED_DIRS = EXCLUDED_DIRS

    def __init__(self, vault_path: str | Path):
        self.root = Path(vault_path).expanduser().resolve()
        if not self.root.is_dir():
            raise ValueError(f"Vault path does not exist: {self.root}")

    def resolve_path(self, name_or_path: str) -> Path | None:
        """Resolve a vault-relative path or note name to an absolute Path.

        Resolution order:
        1. Exact path match
        2. Filename match with .md appended
        3. Case-insensitive filename match
        """
        name_or_path = name_or_path.strip("/")

        # 1. Exact match
        candidate = self.root / name_or_path
        if candidate.is_file() and self._is_within_vault(candidate):
            return candidate

        if not name_or_path.endswith(".md"):
            candidate = self.root / (name_or_path + ".md")
            if candidate.is_file() and self._is_within_vault(candidate):
                return candidate

        # 2. Filename match anywhere in vault
        basename = Path(name_or_path).name
        if not basename.endswith(".md"):
            basename += ".md"

        matches = [p for p in self.iter_notes() if p.name == basename]
        if matches:
            return matches[0]

        # 3. Case-insensitive filename match
        basename_lower = basename.lower()
        for p in self.iter_notes():
            if p.name.lower() == basename_lower:
                return p

        return None

    def _is_within_vault(self, path: Path) -> bool:
        """Check that a path resolves to within the vault root."""
        try:
            path.resolve().relative_to(self.root)
            return True
        except (OSError, ValueError):
            return False

    def absolute(self, relative_path: str) -> Path:
        """Map a vault-relative path to an absolute one inside the vault.

        Raises ValueError if the path escapes the vault.
        """
        full = self.root / relative_path
        if not self._is_within_vault(full):
            raise ValueError(f"Path escapes vault: {relative_path}")
        return full

    def relative(self, path: str | Path) -> str:
        """Vault-relative POSIX path for an absolute or relative path."""
        p = Path(path)
        if p.is_absolute():
            p = p.relative_to(self.root)
        return p.as_posix()

    def stat_mtime(self, relative_path: str) -> float:
        """Modification time of a note. Raises OSError if it is gone."""
        return self.absolute(relative_path).stat().st_mtime

    def read_text(self, relative_path: str) -> str:
        """Read a note as UTF-8. Raises OSError or UnicodeDecodeError."""
        return self.absolute(relative_path).read_text(encoding="utf-8")

    def iter_notes(self) -> Iterator[Path]:
        """Yield every .md file in the vault, skipping excluded dirs."""
        for p in sorted(self.root.rglob("*.md")):
            if p.is_file() and self._should_include(p):
                yield p

    def is_note(self, path: str | Path) -> bool:
        """Check whether a path names an indexable Markdown note."""
        p = Path(path)
        if p.suffix != ".md":
            return False
        if p.is_absolute():
            try:
                p.relative_to(self.root)
            except ValueError:
                return False
            return self._should_include(p)
        return not any(part in self.EXCLUDED_DIRS for part in p.parts)

    def _should_include(self, path: Path) -> bool:
        """Check if a path should be included (not in excluded dirs)."""
        parts = path.relative_to(self.root).parts
        return not any(part in self.EXCLUDED_DIRS for part in parts)
