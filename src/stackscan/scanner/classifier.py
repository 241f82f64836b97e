"""Guess the dominant ecosystem of a project from root-level marker files."""

from __future__ import annotations

import logging
from pathlib import Path

from stackscan.models import ProjectType

logger = logging.getLogger(__name__)

# Evaluated in order, first match wins
_MARKER_FILES: tuple[tuple[tuple[str, ...], ProjectType], ...] = (
    (("pom.xml",), ProjectType.MAVEN),
    (("build.gradle", "build.gradle.kts"), ProjectType.GRADLE),
    (("package.json",), ProjectType.NODE),
    (("requirements.txt", "setup.py", "pyproject.toml"), ProjectType.PYTHON),
)

_DOTNET_SUFFIXES = (".csproj", ".sln")


def classify_project(root: str | Path) -> ProjectType:
    """Return the single ProjectType suggested by files at the project root.

    Only the root itself is inspected, never subdirectories.
    """
    root = Path(root)
    for markers, project_type in _MARKER_FILES:
        if any((root / marker).exists() for marker in markers):
            return project_type

    try:
        if any(entry.name.endswith(_DOTNET_SUFFIXES) for entry in root.iterdir()):
            return ProjectType.DOTNET
    except OSError as exc:
        logger.debug("Could not list %s for .NET markers: %s", root, exc)

    return ProjectType.UNKNOWN
