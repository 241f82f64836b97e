"""Domain models for stackscan.

Registry models are frozen dataclasses shared read-only across runs.
DetectionResult is the one mutable type: a per-run accumulator.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum

# ─── Enumerations ─────────────────────────────────────────────


class ProjectType(StrEnum):
    MAVEN = "maven"
    GRADLE = "gradle"
    NODE = "node"
    PYTHON = "python"
    DOTNET = "dotnet"
    UNKNOWN = "unknown"


class Category(StrEnum):
    """Technology categories always present in a detection result."""

    LANGUAGES = "languages"
    FRAMEWORKS = "frameworks"
    RUNTIMES = "runtimes"
    CLOUD_SDKS = "cloud_sdks"
    DATABASES = "databases"
    CONTAINERS = "containers"
    INFRASTRUCTURE_AS_CODE = "infrastructure_as_code"


class BuildFileKind(StrEnum):
    """Build-file formats with a dedicated version extraction strategy."""

    MANIFEST = "manifest"  # package.json
    MAVEN = "maven"  # pom.xml
    GRADLE = "gradle"  # build.gradle, build.gradle.kts
    REQUIREMENTS = "requirements"  # requirements.txt
    DOCKERFILE = "dockerfile"
    ORCHESTRATION = "orchestration"  # *.yaml, *.yml
    VERSION_PIN = "version_pin"  # .nvmrc, .node-version, .python-version
    GENERIC = "generic"


NOT_AVAILABLE = "NA"


# ─── Registry Models ──────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class RuleConfig:
    """Match rules for one technology. Collections keep declaration order."""

    extensions: tuple[str, ...] = ()
    build_files: tuple[str, ...] = ()
    file_indicators: tuple[str, ...] = ()
    indicators: tuple[str, ...] = ()


# category -> technology -> rules
Registry = Mapping[str, Mapping[str, RuleConfig]]


# ─── Detection Result ─────────────────────────────────────────


class DetectionResult:
    """Accumulates (category, technology, version) triples for one run.

    Seeded categories are always present, even when empty. A technology
    appears at most once per category; a later add overwrites its version.
    """

    __slots__ = ("_detections", "project_type")

    def __init__(self, project_type: ProjectType = ProjectType.UNKNOWN) -> None:
        self.project_type = project_type
        self._detections: dict[str, dict[str, str]] = {c.value: {} for c in Category}

    def add(self, category: str, technology: str, version: str | None) -> None:
        self._detections.setdefault(category, {})[technology] = version or NOT_AVAILABLE

    def get(self, category: str, technology: str) -> str | None:
        return self._detections.get(category, {}).get(technology)

    def __len__(self) -> int:
        return sum(len(techs) for techs in self._detections.values())

    def to_dict(self) -> dict[str, dict[str, str]]:
        return {category: dict(techs) for category, techs in self._detections.items()}
