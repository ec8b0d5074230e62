"""In-memory bidirectional link index: notes, outlinks and backlinks."""

import hashlib
import json
import logging
import re
import threading
import time
from dataclasses import asdict, dataclass, field
from pathlib import PurePosixPath

from links import link_key, parse_wikilinks

logger = logging.getLogger(__name__)

_WORD_START = re.compile(r"\b\w")


@dataclass
class NoteMetadata:
    """Indexed state of a single note."""

    path: str
    title: str
    outlinks: list[str]
    hash: str
    mtime: float


def hash_content(content: str) -> str:
    """Content hash used for change detection."""
    return hashlib.md5(content.encode("utf-8")).hexdigest()


def title_from_path(path: str) -> str:
    """Derive a display title from a note path.

    "projects/my-new_note.md" -> "My New Note"
    """
    stem = PurePosixPath(path).stem
    spaced = stem.replace("-", " ").replace("_", " ")
    return _WORD_START.sub(lambda m: m.group(0).upper(), spaced)


@dataclass
class LinkIndex:
    """Bidirectional link graph over a workspace.

    `notes` maps workspace-relative paths to their metadata; `backlinks` maps
    a normalized file-name key to the ordered, duplicate-free list of source
    paths linking to it. All mutations and multi-step reads go through
    `lock`, so readers never see a note whose old backlinks have been
    retracted but whose new ones are not yet installed.
    """

    root: str
    notes: dict[str, NoteMetadata] = field(default_factory=dict)
    backlinks: dict[str, list[str]] = field(default_factory=dict)
    last_updated: float = field(default_factory=time.time)
    lock: threading.RLock = field(
        default_factory=threading.RLock, repr=False, compare=False
    )

    @classmethod
    def create(cls, root: str) -> "LinkIndex":
        """Create an empty index for a workspace root."""
        return cls(root=root)

    def upsert(self, path: str, content: str, mtime: float) -> bool:
        """Index (or re-index) a note from its content.

        Returns False when the note is already indexed with identical
        content, True when the index changed.
        """
        digest = hash_content(content)
        outlinks = [link_key(link.target) for link in parse_wikilinks(content)]

        with self.lock:
            existing = self.notes.get(path)
            if existing is not None and existing.hash == digest:
                return False

            if existing is not None:
                self._retract(path, existing.outlinks)

            self.notes[path] = NoteMetadata(
                path=path,
                title=title_from_path(path),
                outlinks=outlinks,
                hash=digest,
                mtime=mtime,
            )
            self._install(path, outlinks)
            self.last_updated = time.time()

        logger.debug("Indexed %s (%d outlinks)", path, len(outlinks))
        return True

    def remove(self, path: str) -> bool:
        """Drop a note and every backlink it contributed. No-op if absent."""
        with self.lock:
            existing = self.notes.pop(path, None)
            if existing is None:
                return False
            self._retract(path, existing.outlinks)
            self.last_updated = time.time()

        logger.debug("Removed %s from index", path)
        return True

    def note(self, path: str) -> NoteMetadata | None:
        """Look up a note by its exact workspace-relative path."""
        with self.lock:
            return self.notes.get(path)

    def backlinks_for(self, key: str) -> list[str]:
        """Copy of the backlink sources for a normalized key."""
        with self.lock:
            return list(self.backlinks.get(key, ()))

    def _install(self, source: str, keys: list[str]) -> None:
        """Add `source` once to the bucket of each distinct key."""
        for key in dict.fromkeys(keys):
            sources = self.backlinks.setdefault(key, [])
            if source not in sources:
                sources.append(source)

    def _retract(self, source: str, keys: list[str]) -> None:
        """Drop `source` from each key's bucket, deleting emptied buckets."""
        for key in dict.fromkeys(keys):
            sources = self.backlinks.get(key)
            if sources is None:
                continue
            remaining = [s for s in sources if s != source]
            if remaining:
                self.backlinks[key] = remaining
            else:
                del self.backlinks[key]


def export_index(index: LinkIndex) -> str:
    """Serialize an index to a JSON snapshot."""
    with index.lock:
        data = {
            "root": index.root,
            "notes": [[path, asdict(note)] for path, note in index.notes.items()],
            "backlinks": [
                [key, list(sources)] for key, sources in index.backlinks.items()
            ],
            "lastUpdated": index.last_updated,
        }
    return json.dumps(data)


def import_index(snapshot: str) -> LinkIndex:
    """Rebuild an index from a snapshot produced by export_index.

    Raises ValueError if the snapshot is not valid JSON or lacks a field.
    """
    try:
        data = json.loads(snapshot)
        return LinkIndex(
            root=data["root"],
            notes={path: NoteMetadata(**note) for path, note in data["notes"]},
            backlinks={key: list(sources) for key, sources in data["backlinks"]},
            last_updated=data["lastUpdated"],
        )
    except (json.JSONDecodeError, KeyError, TypeError) as e:
        raise ValueError(f"Invalid index snapshot: {e}") from e
