"""Exception hierarchy for stackscan.

All exceptions inherit from StackScanError (single catch point).
Messages are written for LLM consumption -- clear, actionable, no stack traces.
"""

from __future__ import annotations


class StackScanError(Exception):
    """Base exception for all stackscan errors."""


class ScanError(StackScanError):
    """Error walking a project directory."""


class RegistryError(StackScanError):
    """Error loading or validating the technology registry."""
