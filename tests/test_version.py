"""Tests for runtime package version resolution."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as distribution_version
from unittest.mock import patch

import stackscan


class TestRuntimeVersion:
    """Version resolution should reflect installed package metadata."""

    def test_module_version_matches_installed_distribution(self):
        assert stackscan.__version__ == distribution_version("stackscan")

    def test_resolve_version_uses_deterministic_fallback_when_metadata_missing(self, monkeypatch):
        def _raise_package_not_found(_: str) -> str:
            raise PackageNotFoundError

        monkeypatch.setattr(stackscan, "_distribution_version", _raise_package_not_found)

        assert stackscan._resolve_version() == stackscan._LOCAL_VERSION_FALLBACK


class TestMain:
    def test_defaults_to_stdio(self, monkeypatch):
        monkeypatch.delenv("STACKSCAN_TRANSPORT", raising=False)
        with patch("stackscan.server.mcp.run") as mock_run:
            stackscan.main()
        mock_run.assert_called_once_with(transport="stdio")

    def test_transport_from_env(self, monkeypatch):
        monkeypatch.setenv("STACKSCAN_TRANSPORT", "streamable-http")
        with patch("stackscan.server.mcp.run") as mock_run:
            stackscan.main()
        mock_run.assert_called_once_with(transport="streamable-http")
