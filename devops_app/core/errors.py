"""Exception types raised by the Azure DevOps client and bug service."""

from __future__ import annotations

from collections.abc import Sequence

BODY_EXCERPT_CHARS = 500


class DevOpsDashboardError(RuntimeError):
    """Base class for every failure surfaced by the dashboard core."""


class ConfigurationError(DevOpsDashboardError):
    def __init__(self, message: str, *, missing: Sequence[str] = ()):
        super().__init__(message)
        self.missing = list(missing)


class AzureDevOpsError(DevOpsDashboardError):
    """A non-success HTTP response from Azure DevOps."""

    def __init__(self, operation: str, status_code: int, reason: str = "", body: str = ""):
        self.operation = operation
        self.status_code = status_code
        self.reason = reason or ""
        self.body = body or ""
        status = f"{status_code} {self.reason}".strip()
        message = f"{operation} failed: {status}"
        if self.body:
            message = f"{message} - {self.body[:BODY_EXCERPT_CHARS]}"
        super().__init__(message)


class ResponseShapeError(DevOpsDashboardError):
    """The response parsed as JSON but did not have the expected structure."""
