"""stackscan: detect the technology stack of a project directory."""

from __future__ import annotations

import os
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _distribution_version

_LOCAL_VERSION_FALLBACK = "0.0.0+local"


def _resolve_version() -> str:
    """Resolve package version from installed metadata with deterministic fallback."""
    try:
        return _distribution_version("stackscan")
    except PackageNotFoundError:
        return _LOCAL_VERSION_FALLBACK


__version__ = _resolve_version()


def main() -> None:
    """Entry point for `stackscan` CLI."""
    from stackscan.server import mcp

    mcp.run(transport=os.environ.get("STACKSCAN_TRANSPORT", "stdio"))
