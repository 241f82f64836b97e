"""detect_technologies and list_technologies tools."""

from __future__ import annotations

import asyncio

from mcp.server.fastmcp import Context

from stackscan.errors import StackScanError
from stackscan.registry.loader import list_technologies as _list_technologies
from stackscan.scanner.detector import detect_technologies as _detect_technologies
from stackscan.tools._helpers import get_context


async def detect_technologies(
    ctx: Context,
    path: str = "",
) -> dict[str, object]:
    """Detect the technology stack of a project directory.

    Finds languages, frameworks, runtimes, databases, cloud SDKs, containers
    and infrastructure-as-code tools used by the project.

    Walks the project (skipping build output and vendored directories such
    as node_modules, target, dist), matches files against the technology
    registry, and extracts versions from build files like pom.xml,
    package.json, build.gradle, requirements.txt, Dockerfile and Kubernetes
    manifests.

    Args:
        path: Path to the project root directory. Required.

    Returns:
        Dict with: path, project_type, and detections mapping
        category -> technology -> version ("NA" when the version is unknown).
    """
    if not path or not path.strip():
        return {"success": False, "error": "Parameter 'path' is required and must not be empty."}

    try:
        app = get_context(ctx)
        result = await asyncio.to_thread(_detect_technologies, path.strip(), app.registry)
        return {
            "path": path.strip(),
            "project_type": result.project_type.value,
            "detections": result.to_dict(),
        }

    except StackScanError as exc:
        return {"success": False, "error": str(exc)}
    except Exception as exc:
        await ctx.error(f"Unexpected error in detect_technologies: {exc}")
        return {"success": False, "error": f"Internal error: {type(exc).__name__}"}


async def list_technologies(ctx: Context) -> dict[str, object]:
    """List every technology the registry can detect, grouped by category.

    Returns:
        Dict with: categories mapping category -> sorted technology names,
        and technology_count.
    """
    try:
        app = get_context(ctx)
        categories = _list_technologies(app.registry)
        return {
            "categories": categories,
            "technology_count": sum(len(names) for names in categories.values()),
        }
    except Exception as exc:
        await ctx.error(f"Unexpected error in list_technologies: {exc}")
        return {"success": False, "error": f"Internal error: {type(exc).__name__}"}
