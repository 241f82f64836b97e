"""Per-run file content cache.

Hot build files (pom.xml, package.json, ...) are read once per run no matter
how many registry entries inspect them. Each detection run owns its own
ContentCache; nothing is shared between runs.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 1_000_000

HOT_FILE_SUFFIXES: tuple[str, ...] = (
    "pom.xml",
    "package.json",
    "requirements.txt",
    "build.gradle",
)


def is_hot_file(path: str | Path) -> bool:
    return str(path).endswith(HOT_FILE_SUFFIXES)


class ContentCache:
    """Reads file text, memoizing hot files by absolute path."""

    def __init__(self, max_file_size: int = MAX_FILE_SIZE) -> None:
        self.max_file_size = max_file_size
        self._entries: dict[str, str | None] = {}
        self._lock = threading.Lock()

    def read(self, path: str | Path) -> str | None:
        """Return the file's text, or None if unreadable or over the size cap."""
        path = Path(path)
        if not is_hot_file(path):
            return self._read_file(path)

        key = str(path.absolute())
        with self._lock:
            if key in self._entries:
                return self._entries[key]
            content = self._read_file(path)
            self._entries[key] = content
            return content

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, Path)):
            return False
        return str(Path(path).absolute()) in self._entries

    def _read_file(self, path: Path) -> str | None:
        try:
            size = path.stat().st_size
            if size > self.max_file_size:
                logger.debug("Skipping %s: %d bytes exceeds %d", path, size, self.max_file_size)
                return None
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Could not read %s: %s", path, exc)
            return None
