"""Shared plumbing for stackscan tools."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mcp.server.fastmcp import Context

if TYPE_CHECKING:
    from stackscan.server import AppContext


def get_context(ctx: Context) -> AppContext:
    """Return the AppContext holding the registry loaded at server start.

    Raises TypeError when the server was started without app_lifespan, so a
    tool never scans against a missing registry.
    """
    from stackscan.server import AppContext

    app = ctx.request_context.lifespan_context
    if not isinstance(app, AppContext):
        raise TypeError(
            f"Expected AppContext with a loaded registry, got {type(app).__name__}. "
            "Start the server through stackscan.server.mcp."
        )
    return app
