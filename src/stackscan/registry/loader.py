"""Load the technology registry from the bundled resource or a file."""

from __future__ import annotations

import importlib.resources
import json
import logging
from pathlib import Path
from types import MappingProxyType

import yaml

from stackscan.errors import RegistryError
from stackscan.models import Registry, RuleConfig

logger = logging.getLogger(__name__)

BUILTIN_REGISTRY = "registry.json"

# document key -> RuleConfig field
_RULE_FIELDS: dict[str, str] = {
    "extensions": "extensions",
    "buildFiles": "build_files",
    "fileIndicators": "file_indicators",
    "indicators": "indicators",
}


def load_registry(path: str | Path | None = None) -> Registry:
    """Load the registry from ``path``, or the bundled one when omitted.

    Args:
        path: Optional path to a .json/.yaml/.yml registry document.

    Returns:
        A read-only ``category -> technology -> RuleConfig`` mapping.

    Raises:
        RegistryError: If the document cannot be read or has the wrong shape.
    """
    if path is None:
        return _load_builtin()
    return _load_from_file(Path(path))


def list_technologies(registry: Registry) -> dict[str, list[str]]:
    """Return the sorted technology names of each registry category."""
    return {category: sorted(techs) for category, techs in registry.items()}


def _load_builtin() -> Registry:
    """Load the registry shipped inside the package."""
    try:
        ref = importlib.resources.files("stackscan.registry") / "data" / BUILTIN_REGISTRY
        text = ref.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise RegistryError(f"Failed to read built-in registry: {exc}") from exc
    return parse_registry(text, source=f"builtin:{BUILTIN_REGISTRY}")


def _load_from_file(path: Path) -> Registry:
    """Load a registry document from disk."""
    if not path.is_file():
        raise RegistryError(f"Registry file not found: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise RegistryError(f"Failed to read registry file '{path}': {exc}") from exc
    return parse_registry(text, source=str(path))


def parse_registry(text: str, source: str = "") -> Registry:
    """Parse a registry document into a frozen Registry.

    Sources ending in .json are parsed as JSON, anything else as YAML.
    """
    try:
        if source.lower().endswith(".json"):
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise RegistryError(f"Invalid registry document in {source}: {exc}") from exc
    if not isinstance(data, dict):
        raise RegistryError(f"Invalid registry format in {source}: expected a mapping.")
    return build_registry(data, source=source)


def build_registry(data: dict, source: str = "") -> Registry:
    """Freeze a plain ``category -> technology -> rules`` dict.

    Raises:
        RegistryError: If a category or technology entry is not a mapping,
            or a rule value is not a list of strings.
    """
    categories: dict[str, MappingProxyType] = {}
    for category, techs in data.items():
        if not isinstance(techs, dict):
            raise RegistryError(
                f"Invalid registry format in {source}: category '{category}' must be a mapping."
            )
        rules: dict[str, RuleConfig] = {}
        for tech_name, config in techs.items():
            if config is None:
                config = {}
            if not isinstance(config, dict):
                raise RegistryError(
                    f"Invalid registry format in {source}: "
                    f"'{category}.{tech_name}' must be a mapping."
                )
            rules[str(tech_name)] = _parse_rule_config(config, f"{category}.{tech_name}", source)
        categories[str(category)] = MappingProxyType(rules)

    logger.debug(
        "Loaded registry %s: %d categories, %d technologies",
        source,
        len(categories),
        sum(len(techs) for techs in categories.values()),
    )
    return MappingProxyType(categories)


def _parse_rule_config(config: dict, where: str, source: str) -> RuleConfig:
    fields: dict[str, tuple[str, ...]] = {}
    for key, value in config.items():
        field_name = _RULE_FIELDS.get(key)
        if field_name is None:
            logger.warning("Ignoring unknown rule key '%s' for %s in %s", key, where, source)
            continue
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise RegistryError(
                f"Invalid registry format in {source}: '{where}.{key}' must be a list of strings."
            )
        # Drop duplicates, keep first occurrence order
        fields[field_name] = tuple(dict.fromkeys(value))
    return RuleConfig(**fields)
