"""Version extraction, one strategy per build-file format.

Every strategy takes raw file text and a technology name and returns a
version string or None. Strategies are total: parse failures return None,
never raise. Within a strategy the rules are tried in a fixed priority
order and the first hit wins.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable

from stackscan.models import BuildFileKind

logger = logging.getLogger(__name__)

_DOTTED_VERSION = r"[0-9]+\.[0-9]+\.?[0-9]*"

# ─── Strategy selection ──────────────────────────────────────

_BUILD_FILE_KINDS: dict[str, BuildFileKind] = {
    "package.json": BuildFileKind.MANIFEST,
    "pom.xml": BuildFileKind.MAVEN,
    "build.gradle": BuildFileKind.GRADLE,
    "build.gradle.kts": BuildFileKind.GRADLE,
    "requirements.txt": BuildFileKind.REQUIREMENTS,
    "dockerfile": BuildFileKind.DOCKERFILE,
    ".nvmrc": BuildFileKind.VERSION_PIN,
    ".node-version": BuildFileKind.VERSION_PIN,
    ".python-version": BuildFileKind.VERSION_PIN,
}

# Content-indicator matches only get structured extraction for these files
_INDICATOR_KINDS: dict[str, BuildFileKind] = {
    "package.json": BuildFileKind.MANIFEST,
    "pom.xml": BuildFileKind.MAVEN,
    "requirements.txt": BuildFileKind.REQUIREMENTS,
}


def build_file_kind(file_name: str) -> BuildFileKind:
    """Map a matched build-file name to its extraction strategy."""
    name = file_name.lower()
    kind = _BUILD_FILE_KINDS.get(name)
    if kind is not None:
        return kind
    if name.endswith((".yaml", ".yml")):
        return BuildFileKind.ORCHESTRATION
    return BuildFileKind.GENERIC


def indicator_kind(file_name: str) -> BuildFileKind:
    """Map the name of a file with a content-indicator hit to a strategy."""
    return _INDICATOR_KINDS.get(file_name.lower(), BuildFileKind.GENERIC)


def extract_version(
    kind: BuildFileKind,
    content: str,
    tech_name: str,
    indicator: str | None = None,
) -> str | None:
    """Run the strategy for ``kind``. Returns None on any failure.

    The generic strategy needs the matched ``indicator``; without one it
    finds nothing.
    """
    try:
        if kind is BuildFileKind.GENERIC:
            if not indicator:
                return None
            return extract_near_indicator(content, indicator)
        return _STRATEGIES[kind](content, tech_name)
    except Exception as exc:
        logger.debug("Version extraction (%s) failed for %s: %s", kind, tech_name, exc)
        return None


# ─── Helpers ─────────────────────────────────────────────────


def clean_version(raw: object) -> str | None:
    """Strip range operators and other noise: ``^18.2.0`` -> ``18.2.0``."""
    if raw is None:
        return None
    cleaned = re.sub(r"[^0-9.]", "", str(raw))
    if cleaned.endswith("."):
        cleaned = cleaned[:-1]
    return cleaned or None


def _is_java(name: str) -> bool:
    return ("java" in name or "jdk" in name) and "javascript" not in name


def _is_kubernetes(name: str) -> bool:
    return "kubernetes" in name or "k8s" in name


def _artifact_id(tech_name: str) -> str:
    return tech_name.lower().replace("_", "-").replace(" ", "-")


# ─── package.json ────────────────────────────────────────────

# Technologies naming a runtime, looked up under "engines"
_ENGINE_RUNTIMES: dict[str, str] = {
    "node_runtime": "node",
}


def extract_from_manifest(content: str, tech_name: str) -> str | None:
    """Find a dependency (or engine) version in package.json text."""
    try:
        data = json.loads(content)
    except (json.JSONDecodeError, ValueError):
        logger.debug("Malformed package.json while looking for %s", tech_name)
        return None
    if not isinstance(data, dict):
        return None

    for section in ("dependencies", "devDependencies"):
        deps = data.get(section)
        if isinstance(deps, dict) and tech_name in deps:
            return clean_version(deps[tech_name])

    runtime = _ENGINE_RUNTIMES.get(tech_name)
    engines = data.get("engines")
    if runtime is not None and isinstance(engines, dict) and runtime in engines:
        return clean_version(engines[runtime])

    return None


# ─── pom.xml ─────────────────────────────────────────────────

_POM_JAVA_VERSION = re.compile(
    r"<(java\.version|maven\.compiler\.source|maven\.compiler\.target)>(.*?)</"
)
_POM_DEPENDENCY = re.compile(r"<dependency>(.*?)</dependency>", re.DOTALL)
_POM_PARENT = re.compile(r"<parent>(.*?)</parent>", re.DOTALL)

_Predicate = Callable[[str, str], bool]


def _element_text(block: str, tag: str) -> str | None:
    match = re.search(rf"<{tag}>(.*?)</{tag}>", block, re.DOTALL)
    return match.group(1).strip() if match else None


def _coordinates(block: str) -> tuple[str, str]:
    return _element_text(block, "groupId") or "", _element_text(block, "artifactId") or ""


def _matching_blocks(blocks: list[str], predicate: _Predicate) -> list[str]:
    return [block for block in blocks if predicate(*_coordinates(block))]


def _first_version(blocks: list[str]) -> str | None:
    for block in blocks:
        version = _element_text(block, "version")
        if version is not None:
            return version
    return None


def _coordinate(group: str | None = None, artifact: str | None = None) -> _Predicate:
    def predicate(block_group: str, block_artifact: str) -> bool:
        if group is not None and block_group != group:
            return False
        return artifact is None or block_artifact == artifact

    return predicate


# (name fragments, dependency predicate, stop when present without a version)
_KNOWN_DEPENDENCIES: tuple[tuple[tuple[str, ...], _Predicate, bool], ...] = (
    (("postgres",), _coordinate("org.postgresql", "postgresql"), True),
    (("mysql",), _coordinate("mysql", "mysql-connector-java"), False),
    (("mongo",), _coordinate("org.mongodb"), False),
    (("hibernate",), _coordinate("org.hibernate"), False),
    (("lombok",), _coordinate("org.projectlombok", "lombok"), False),
    (
        ("kubernetes", "k8s"),
        lambda _group, artifact: "kubernetes" in artifact.lower(),
        False,
    ),
)


def extract_from_pom(content: str, tech_name: str) -> str | None:
    """Find a version in pom.xml text.

    Rules, first hit wins: compiler properties for Java, the Spring Boot
    parent or a Spring dependency for Spring, fixed coordinates for a few
    well-known libraries, then a generic artifactId / property lookup.
    A PostgreSQL driver declared without <version> returns None right away:
    the version is managed by a parent or BOM.
    """
    name = tech_name.lower()

    if _is_java(name):
        match = _POM_JAVA_VERSION.search(content)
        if match:
            return match.group(2).strip()

    dependencies = _POM_DEPENDENCY.findall(content)

    if "spring" in name:
        parents = _matching_blocks(
            _POM_PARENT.findall(content),
            _coordinate("org.springframework.boot", "spring-boot-starter-parent"),
        )
        version = _first_version(parents) or _first_version(
            _matching_blocks(dependencies, _coordinate("org.springframework"))
        )
        if version:
            return version

    for fragments, predicate, stop_when_present in _KNOWN_DEPENDENCIES:
        if not any(fragment in name for fragment in fragments):
            continue
        blocks = _matching_blocks(dependencies, predicate)
        version = _first_version(blocks)
        if version is not None:
            return version
        if blocks and stop_when_present:
            return None

    artifact = _artifact_id(tech_name)
    version = _first_version(
        _matching_blocks(dependencies, lambda _group, a: a.lower() == artifact)
    ) or _first_version(_matching_blocks(dependencies, lambda _group, a: artifact in a.lower()))
    if version:
        return version

    prop = re.escape(f"{artifact}.version")
    match = re.search(rf"<{prop}>(.*?)</{prop}>", content, re.IGNORECASE)
    if match:
        return match.group(1).strip()

    return None


# ─── build.gradle ────────────────────────────────────────────

_GRADLE_JAVA_VERSION = re.compile(
    r"(sourceCompatibility|targetCompatibility)\s*=\s*['\"]?(\d+\.?\d*)['\"]?"
)


def extract_from_gradle(content: str, tech_name: str) -> str | None:
    """Find a Java compatibility level or a dependency version in Gradle text."""
    if _is_java(tech_name.lower()):
        match = _GRADLE_JAVA_VERSION.search(content)
        if match:
            return match.group(2).strip()

    artifact = re.escape(tech_name.lower().replace("_", "-"))
    patterns = (
        # name: "1.2.3" / name = '1.2.3'
        rf"\b{artifact}[\"']?\s*:\s*[\"']({_DOTTED_VERSION})[\"']",
        # "group:name:1.2.3"
        rf"[\"'][\w.\-]+:{artifact}:({_DOTTED_VERSION})[\"']",
    )
    for pattern in patterns:
        match = re.search(pattern, content, re.IGNORECASE)
        if match:
            return match.group(1).strip()
    return None


# ─── requirements.txt ────────────────────────────────────────


def _requirement_name(tech_name: str) -> str:
    """Regex for a package name where ``-`` and ``_`` are interchangeable."""
    return "[-_]".join(re.escape(part) for part in re.split(r"[-_]", tech_name.lower()))


def extract_from_requirements(content: str, tech_name: str) -> str | None:
    """Find a pinned or bounded version of ``tech_name`` in requirements text.

    Examples:
        ``Django==4.2.1`` -> ``4.2.1``
        ``flask_cors >= 3.0`` -> ``3.0``
        ``uvicorn[standard]~=0.23.2`` -> ``0.23.2``
    """
    pattern = re.compile(
        rf"^{_requirement_name(tech_name)}\s*(?:\[[^\]]*\])?\s*[=<>~!]+\s*({_DOTTED_VERSION})",
        re.IGNORECASE,
    )
    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        match = pattern.match(line)
        if match:
            return match.group(1).strip()
    return None


# ─── Dockerfile ──────────────────────────────────────────────

# (technology predicate, FROM line pattern capturing the tag)
_BASE_IMAGES: tuple[tuple[Callable[[str], bool], re.Pattern[str]], ...] = (
    (
        _is_java,
        re.compile(r"FROM\s+[\w/.:-]*(?:java|jdk|openjdk):([0-9]+\.?[0-9]*)", re.IGNORECASE),
    ),
    (
        lambda name: "python" in name,
        re.compile(rf"FROM\s+python:({_DOTTED_VERSION})", re.IGNORECASE),
    ),
    (
        lambda name: "node" in name,
        re.compile(rf"FROM\s+node:({_DOTTED_VERSION})", re.IGNORECASE),
    ),
)


def extract_from_dockerfile(content: str, tech_name: str) -> str | None:
    """Find the runtime version in a ``FROM <image>:<tag>`` line."""
    name = tech_name.lower()
    for applies, pattern in _BASE_IMAGES:
        if not applies(name):
            continue
        match = pattern.search(content)
        if match:
            return match.group(1).strip()
    return None


# ─── Kubernetes / compose YAML ───────────────────────────────

_K8S_API_VERSION = re.compile(r"apiVersion:\s*[\w./]+/v([0-9]+[a-z]*[0-9]*)")


def extract_from_orchestration(content: str, tech_name: str) -> str | None:
    """Find an API version (Kubernetes) or an image tag in YAML text."""
    name = tech_name.lower()
    if _is_kubernetes(name):
        match = _K8S_API_VERSION.search(content)
        if match:
            return match.group(1).strip()

    match = re.search(
        rf"image:\s*[\w/.:-]*{re.escape(name)}:({_DOTTED_VERSION})",
        content,
        re.IGNORECASE,
    )
    if match:
        return match.group(1).strip()
    return None


# ─── .nvmrc / .node-version ──────────────────────────────────


def extract_version_pin(content: str, tech_name: str) -> str | None:
    return content.strip() or None


# ─── Any other file ──────────────────────────────────────────


def extract_near_indicator(content: str, indicator: str) -> str | None:
    """Find a dotted version right after ``indicator``.

    Handles shapes like ``"express": "4.18.2"``, ``terraform 1.5.7`` and
    ``version: '3.8'`` when the indicator is the key.
    """
    match = re.search(
        rf"{re.escape(indicator)}[\"']?\s*:?\s*[\"']?({_DOTTED_VERSION}[^\"'\s,]*)",
        content,
        re.IGNORECASE,
    )
    if match:
        return clean_version(match.group(1))
    return None


_STRATEGIES: dict[BuildFileKind, Callable[[str, str], str | None]] = {
    BuildFileKind.MANIFEST: extract_from_manifest,
    BuildFileKind.MAVEN: extract_from_pom,
    BuildFileKind.GRADLE: extract_from_gradle,
    BuildFileKind.REQUIREMENTS: extract_from_requirements,
    BuildFileKind.DOCKERFILE: extract_from_dockerfile,
    BuildFileKind.ORCHESTRATION: extract_from_orchestration,
    BuildFileKind.VERSION_PIN: extract_version_pin,
}
