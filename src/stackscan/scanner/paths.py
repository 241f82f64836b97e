"""Project tree walking with build/vendor directory exclusion."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path

from stackscan.errors import ScanError

logger = logging.getLogger(__name__)

MAX_DEPTH = 6

# Matched as case-insensitive substrings of directory names
IGNORED_SEGMENTS: tuple[str, ...] = (
    "node_modules",
    "target",
    "build",
    ".git",
    ".idea",
    "dist",
    "out",
    "bin",
    ".gradle",
)


def is_ignored_segment(segment: str) -> bool:
    """Return True if a directory name matches the denylist."""
    lowered = segment.lower()
    return any(ignored in lowered for ignored in IGNORED_SEGMENTS)


def is_ignored_path(path: str | Path, root: str | Path | None = None) -> bool:
    """Return True if any directory segment of ``path`` is denylisted.

    When ``root`` is given, only the segments below it are considered, so a
    project living under e.g. ``/home/builder`` is still scanned. The final
    segment is the file name and never excludes the file on its own.
    """
    path = Path(path)
    if root is not None:
        try:
            path = path.relative_to(root)
        except ValueError:
            pass
    return any(is_ignored_segment(segment) for segment in path.parent.parts)


def iter_project_files(root: str | Path, max_depth: int = MAX_DEPTH) -> Iterator[Path]:
    """Yield regular files under ``root`` in sorted order.

    Files deeper than ``max_depth`` levels below the root are not yielded.
    Denylisted directories are pruned while walking and every yielded file
    passes ``is_ignored_path``.

    Raises:
        ScanError: If the root does not exist, is not a directory, or
            cannot be listed.
    """
    root = Path(root)
    if not root.is_dir():
        raise ScanError(f"Cannot scan '{root}': path does not exist or is not a directory.")

    def _on_error(exc: OSError) -> None:
        if exc.filename is not None and Path(exc.filename) == root:
            raise ScanError(f"Cannot scan '{root}': {exc.strerror or exc}") from exc
        logger.warning("Skipping unreadable directory %s: %s", exc.filename, exc)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        current = Path(dirpath)
        depth = len(current.relative_to(root).parts)

        # Files in this directory sit at depth + 1
        if depth + 1 >= max_depth:
            dirnames.clear()
        else:
            dirnames[:] = sorted(d for d in dirnames if not is_ignored_segment(d))

        if depth + 1 > max_depth:
            continue
        for filename in sorted(filenames):
            filepath = current / filename
            if filepath.is_file() and not is_ignored_path(filepath, root):
                yield filepath
