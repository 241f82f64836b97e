"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from stackscan.models import Registry
from stackscan.registry.loader import build_registry

REGISTRY_DATA: dict = {
    "languages": {
        "python": {"extensions": [".py"]},
        "java": {"extensions": [".java"], "buildFiles": ["pom.xml"]},
        "javascript": {"extensions": [".js"]},
    },
    "frameworks": {
        "react": {"buildFiles": ["package.json"]},
        "django": {"indicators": ["django"]},
        "spring_framework": {"indicators": ["org.springframework"]},
    },
    "runtimes": {
        "node_runtime": {"buildFiles": ["package.json"], "fileIndicators": [".nvmrc"]},
    },
    "databases": {
        "postgresql": {"indicators": ["org.postgresql", "psycopg2"]},
    },
    "containers": {
        "docker": {"fileIndicators": ["Dockerfile"]},
    },
}


@pytest.fixture
def registry() -> Registry:
    """A small registry covering every rule type."""
    return build_registry(REGISTRY_DATA, source="tests")


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Write ``{relative_path: content}`` files under a fresh project root."""

    def _make(files: dict[str, str]) -> Path:
        root = tmp_path / "project"
        root.mkdir(exist_ok=True)
        for rel, content in files.items():
            target = root / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return root

    return _make
