"""MCP server that detects the technology stack of a project directory."""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from stackscan.models import Registry
from stackscan.registry.loader import load_registry
from stackscan.tools.detect import detect_technologies, list_technologies

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AppContext:
    """Shared state across all tool invocations.

    The registry is loaded once per process and never mutated; each
    detection run builds its own per-run state on top of it.
    """

    registry: Registry


@asynccontextmanager
async def app_lifespan(server: FastMCP) -> AsyncIterator[AppContext]:
    """Load the registry once -- the composition root.

    A registry that cannot be loaded aborts startup with RegistryError.
    """
    registry_path = os.environ.get("STACKSCAN_REGISTRY") or None
    registry = load_registry(registry_path)
    logger.info(
        "Loaded %s registry with %d categories",
        registry_path or "built-in",
        len(registry),
    )
    yield AppContext(registry=registry)


mcp = FastMCP(
    "stackscan",
    instructions=(
        "stackscan detects the technology stack of a project directory.\n\n"
        "- **detect_technologies** -- Pass the project root path. Returns the "
        "detected languages, frameworks, runtimes, cloud SDKs, databases, "
        "containers and infrastructure-as-code tools, with versions where they "
        "can be read from build files. 'NA' means the technology is present but "
        "its version could not be determined.\n"
        "- **list_technologies** -- Show every technology stackscan knows how "
        "to detect.\n\n"
        "Detection is heuristic: a missing technology is not proof of absence."
    ),
    lifespan=app_lifespan,
)

# ─── Read-only tools ──────────────────────────────────────────
mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))(detect_technologies)
mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))(list_technologies)
