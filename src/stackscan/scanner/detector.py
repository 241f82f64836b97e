"""Project scanner -- detect technologies by matching registry rules.

Walks a project tree once, classifies the project once, then evaluates
every registry entry against every scanned file. All per-file work is
defensive: unreadable or malformed files produce no detection and never
abort the scan. Only a root that cannot be walked is an error.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from stackscan.models import DetectionResult, ProjectType, Registry, RuleConfig
from stackscan.scanner.cache import ContentCache
from stackscan.scanner.classifier import classify_project
from stackscan.scanner.extractors import (
    build_file_kind,
    extract_version,
    indicator_kind,
)
from stackscan.scanner.paths import MAX_DEPTH, iter_project_files
from stackscan.scanner.relevance import is_relevant

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ScanContext:
    """State owned by a single detection run, passed explicitly everywhere."""

    root: Path
    project_type: ProjectType = ProjectType.UNKNOWN
    cache: ContentCache = field(default_factory=ContentCache)


# ─── Public API ──────────────────────────────────────────────


def detect_technologies(
    path: str | Path,
    registry: Registry,
    *,
    max_depth: int = MAX_DEPTH,
) -> DetectionResult:
    """Scan a project directory and return the detected technologies.

    Args:
        path: Absolute or relative path to the project root.
        registry: Read-only ``category -> technology -> RuleConfig`` rules.
        max_depth: How many levels below the root are scanned.

    Returns:
        A DetectionResult with every seeded category present.

    Raises:
        ScanError: If the path does not exist, is not a directory, or
            cannot be listed.
    """
    root = Path(path).resolve()
    context = ScanContext(root=root, project_type=classify_project(root))
    context.cache.clear()
    try:
        files = list(iter_project_files(root, max_depth=max_depth))
        logger.debug("Detected project type: %s", context.project_type)
        logger.debug("Total files to scan: %d", len(files))

        result = DetectionResult(project_type=context.project_type)
        for filepath in files:
            apply_rules(filepath, registry, context, result)
    finally:
        context.cache.clear()

    logger.info(
        "Scanned %s (%s): %d files, %d technologies",
        root,
        context.project_type,
        len(files),
        len(result),
    )
    return result


def apply_rules(
    filepath: Path,
    registry: Registry,
    context: ScanContext,
    result: DetectionResult,
) -> None:
    """Evaluate every relevant registry entry against one file.

    The file is read at most once, and only if some rule needs its content.
    """

    @functools.cache
    def read_content() -> str | None:
        return context.cache.read(filepath)

    for category, technologies in registry.items():
        for tech_name, rules in technologies.items():
            if not is_relevant(tech_name, context.project_type):
                continue
            for version in _match_file(filepath, tech_name, rules, read_content):
                result.add(category, tech_name, version)


# ─── Rule evaluation ─────────────────────────────────────────


def _match_file(
    filepath: Path,
    tech_name: str,
    rules: RuleConfig,
    read_content: Callable[[], str | None],
) -> list[str | None]:
    """Return one version (or None) per rule that matches ``filepath``.

    Extension, build-file, file-indicator and content-indicator rules are
    evaluated independently, in that order.
    """
    file_name = filepath.name.lower()
    matches: list[str | None] = []

    for extension in rules.extensions:
        if file_name.endswith(extension.lower()):
            matches.append(None)

    for marker in (*rules.build_files, *rules.file_indicators):
        if file_name == marker.lower():
            matches.append(_extract_from_build_file(tech_name, marker, read_content))

    if rules.indicators:
        found, version = _match_indicators(filepath, tech_name, rules.indicators, read_content)
        if found:
            matches.append(version)

    return matches


def _extract_from_build_file(
    tech_name: str,
    marker: str,
    read_content: Callable[[], str | None],
) -> str | None:
    content = read_content()
    if content is None:
        return None
    return extract_version(build_file_kind(marker), content, tech_name)


def _match_indicators(
    filepath: Path,
    tech_name: str,
    indicators: tuple[str, ...],
    read_content: Callable[[], str | None],
) -> tuple[bool, str | None]:
    """Search file content for the first matching indicator.

    Returns ``(found, version)``. Later indicators are not tried once one
    matches.
    """
    try:
        content = read_content()
        if content is None:
            return False, None
        lowered = content.lower()
        for indicator in indicators:
            if indicator.lower() in lowered:
                kind = indicator_kind(filepath.name)
                return True, extract_version(kind, content, tech_name, indicator=indicator)
    except Exception as exc:
        logger.debug("Indicator check for %s failed on %s: %s", tech_name, filepath, exc)
    return False, None
