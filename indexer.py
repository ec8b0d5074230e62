"""Full-workspace scan and single-file indexing."""

import logging
from concurrent.futures import ThreadPoolExecutor

from index import LinkIndex
from vault import Vault

logger = logging.getLogger(__name__)


def read_note_file(vault: Vault, relative_path: str) -> tuple[float, str] | None:
    """Stat and read a note. Returns None if it cannot be read."""
    try:
        mtime = vault.stat_mtime(relative_path)
        content = vault.read_text(relative_path)
    except (OSError, UnicodeDecodeError, ValueError) as e:
        logger.debug("Cannot read %s: %s", relative_path, e)
        return None
    return mtime, content


def apply_read(
    index: LinkIndex, relative_path: str, read: tuple[float, str] | None
) -> bool:
    """Commit the result of read_note_file: upsert, or remove if unreadable."""
    if read is None:
        return index.remove(relative_path)
    mtime, content = read
    return index.upsert(relative_path, content, mtime)


def index_file(index: LinkIndex, vault: Vault, relative_path: str) -> bool:
    """Read a note from disk and upsert it into the index.

    A file that cannot be stat'ed or read is treated as deleted and removed
    from the index. Returns True if the index changed.
    """
    return apply_read(index, relative_path, read_note_file(vault, relative_path))


def build_index(vault: Vault, max_workers: int | None = None) -> LinkIndex:
    """Build a fresh index from every Markdown file in the vault.

    Files are read on a thread pool and committed in enumeration order, so
    the notes mapping is ordered by path regardless of which read finishes
    first.
    """
    index = LinkIndex.create(str(vault.root))
    paths = [vault.relative(p) for p in vault.iter_notes()]

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        reads = pool.map(lambda p: read_note_file(vault, p), paths)
        for path, read in zip(paths, reads):
            apply_read(index, path, read)

    logger.info("Indexed %d notes under %s", len(index.notes), vault.root)
    return index
