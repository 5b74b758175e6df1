"""Request-level operations consumed by the pages: list bugs, list team members, reassign.

Each method returns ``(status_code, payload)`` with JSON-ready payloads. This is
the only layer that turns exceptions into error payloads; everything below it
raises.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

import requests

from .config import DEFAULT_DAYS, DEFAULT_TAKE, DevOpsSettings
from .errors import AzureDevOpsError, DevOpsDashboardError
from .models import PageWindow
from .service import BugService, ProgressCallback

logger = logging.getLogger(__name__)

Payload = Any
Response = tuple[int, Payload]

CONFIG_MISSING = "Azure DevOps configuration is missing"

# Failures whose message is shown to the user as-is
REPORTED_ERRORS = (DevOpsDashboardError, requests.RequestException)


def _int_param(params: Mapping[str, Any], name: str, default: int) -> int:
    value = params.get(name)
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer")
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


def error_payload(error: str, details: Any) -> dict[str, Any]:
    return {"error": error, "details": details}


class BugEndpoints:
    def __init__(
        self,
        settings: DevOpsSettings,
        service: BugService | None = None,
        *,
        service_factory: Callable[[DevOpsSettings], BugService] = BugService.from_settings,
    ):
        self.settings = settings
        self._service = service
        self._service_factory = service_factory

    def _config_error(self) -> Response | None:
        if self.settings.is_complete:
            return None
        logger.error("Azure DevOps configuration is missing: %s", ", ".join(self.settings.missing()))
        return 500, error_payload(CONFIG_MISSING, self.settings.presence())

    @property
    def service(self) -> BugService:
        if self._service is None:
            self._service = self._service_factory(self.settings)
        return self._service

    def list_bugs(
        self,
        params: Mapping[str, Any] | None = None,
        *,
        progress: ProgressCallback | None = None,
    ) -> Response:
        config_error = self._config_error()
        if config_error:
            return config_error
        params = params or {}
        try:
            window = PageWindow.clamped(
                skip=_int_param(params, "skip", 0),
                take=_int_param(params, "take", DEFAULT_TAKE),
                days=_int_param(params, "days", DEFAULT_DAYS),
            )
        except ValueError as exc:
            return 400, error_payload("Invalid query parameters", str(exc))
        try:
            page = self.service.fetch_page(window.skip, window.take, window.days, progress=progress)
        except REPORTED_ERRORS as exc:
            logger.error("Error fetching bugs: %s", exc)
            return 500, error_payload("Failed to fetch bugs", str(exc))
        except Exception:
            logger.exception("Unexpected error fetching bugs")
            return 500, error_payload("Failed to fetch bugs", "Unknown error")
        return 200, page.to_dict()

    def list_team_members(self) -> Response:
        config_error = self._config_error()
        if config_error:
            return config_error
        try:
            members = self.service.list_team_members()
        except REPORTED_ERRORS as exc:
            logger.error("Error fetching team members: %s", exc)
            return 500, error_payload("Failed to fetch team members", str(exc))
        except Exception:
            logger.exception("Unexpected error fetching team members")
            return 500, error_payload("Failed to fetch team members", "Unknown error")
        return 200, [m.to_dict() for m in members]

    def reassign_bug(self, bug_id: Any, body: Mapping[str, Any] | None) -> Response:
        config_error = self._config_error()
        if config_error:
            return config_error
        try:
            parsed_id = int(str(bug_id).strip())
        except ValueError:
            return 400, error_payload("Invalid bug id", f"{bug_id!r} is not a work item id")
        new_assignee = (body or {}).get("newAssignee")
        if not isinstance(new_assignee, str) or not new_assignee.strip():
            return 400, error_payload("Invalid request body", "newAssignee must be a non-empty string")
        try:
            self.service.reassign(parsed_id, new_assignee)
        except AzureDevOpsError as exc:
            logger.error("Error reassigning bug %s: %s", parsed_id, exc)
            payload = error_payload("Failed to reassign bug", str(exc))
            payload["status"] = exc.status_code
            return 500, payload
        except REPORTED_ERRORS as exc:
            logger.error("Error reassigning bug %s: %s", parsed_id, exc)
            return 500, error_payload("Failed to reassign bug", str(exc))
        except Exception:
            logger.exception("Unexpected error reassigning bug %s", parsed_id)
            return 500, error_payload("Failed to reassign bug", "Unknown error")
        return 200, {"success": True}
