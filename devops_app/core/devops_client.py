"""Azure DevOps REST client wrapper (WIQL, work items, teams, graph users)."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

import requests

from .config import (
    DEVOPS_BASE_URL,
    DEVOPS_GRAPH_BASE_URL,
    GRAPH_API_VERSION,
    PROJECTS_API_VERSION,
    TEAMS_API_VERSION,
    WIQL_API_VERSION,
    WORK_ITEMS_API_VERSION,
    DevOpsSettings,
)
from .errors import AzureDevOpsError, ResponseShapeError

logger = logging.getLogger(__name__)

JSON_PATCH_CONTENT_TYPE = "application/json-patch+json"
CONTINUATION_HEADER = "x-ms-continuationtoken"


class AzureDevOpsAPI:
    def __init__(self, settings: DevOpsSettings, session: requests.Session | None = None):
        self.settings = settings.require()
        self.session = session if session is not None else requests.Session()
        # Basic auth with an empty user name and the PAT as password
        self.session.auth = ("", settings.pat)
        self.session.headers.update({"Accept": "application/json"})

    # ------------------ URL helpers ------------------
    @property
    def org_url(self) -> str:
        return f"{DEVOPS_BASE_URL}/{self.settings.encoded_organization}"

    @property
    def project_url(self) -> str:
        return f"{self.org_url}/{self.settings.encoded_project}"

    # ------------------ Work items ------------------
    def run_wiql(self, query: str) -> list[int]:
        """Execute a WIQL query and return the matching work item ids in query order."""
        url = f"{self.project_url}/_apis/wit/wiql"
        logger.debug("Executing WIQL query: %s", query)
        resp = self.session.post(url, params={"api-version": WIQL_API_VERSION}, json={"query": query})
        data = self._json(resp, "WIQL query")
        work_items = data.get("workItems") if isinstance(data, dict) else None
        if work_items is None:
            return []
        try:
            return [int(item["id"]) for item in work_items]
        except (KeyError, TypeError, ValueError) as exc:
            raise ResponseShapeError(f"Unexpected WIQL response shape: {exc!r}") from exc

    def get_work_items(self, ids: Sequence[int], fields: Iterable[str]) -> list[dict[str, Any]]:
        """Fetch the given fields for a batch of work items in one call."""
        if not ids:
            return []
        url = f"{self.project_url}/_apis/wit/workitems"
        params = {
            "ids": ",".join(str(i) for i in ids),
            "fields": ",".join(fields),
            "api-version": WORK_ITEMS_API_VERSION,
        }
        resp = self.session.get(url, params=params)
        return self._value_list(self._json(resp, "Work items query"), "work items")

    def update_work_item(self, bug_id: int, operations: list[dict[str, Any]]) -> dict[str, Any]:
        """Apply a JSON-patch document to one work item."""
        url = f"{self.project_url}/_apis/wit/workitems/{int(bug_id)}"
        resp = self.session.patch(
            url,
            params={"api-version": WORK_ITEMS_API_VERSION},
            json=operations,
            headers={"Content-Type": JSON_PATCH_CONTENT_TYPE},
        )
        self._raise_for_status(resp, "Reassign bug")
        if not resp.text:
            return {}
        try:
            return resp.json()
        except ValueError:
            return {}

    # ------------------ Teams / Projects ------------------
    def get_project(self) -> dict[str, Any]:
        url = f"{self.org_url}/_apis/projects/{self.settings.encoded_project}"
        resp = self.session.get(url, params={"api-version": PROJECTS_API_VERSION})
        data = self._json(resp, "Project lookup")
        if not isinstance(data, dict):
            raise ResponseShapeError("Unexpected project response shape")
        return data

    def list_teams(self) -> list[dict[str, Any]]:
        url = f"{self.org_url}/_apis/projects/{self.settings.encoded_project}/teams"
        resp = self.session.get(url, params={"api-version": TEAMS_API_VERSION})
        return self._value_list(self._json(resp, "Teams request"), "teams")

    def list_team_members(self, team_id: str) -> list[dict[str, Any]]:
        url = f"{self.org_url}/_apis/projects/{self.settings.encoded_project}/teams/{team_id}/members"
        resp = self.session.get(url, params={"api-version": TEAMS_API_VERSION})
        return self._value_list(self._json(resp, "Team members request"), "team members")

    def list_graph_users(self) -> list[dict[str, Any]]:
        """Enumerate every directory user of the organization, following continuation pages."""
        url = f"{DEVOPS_GRAPH_BASE_URL}/{self.settings.encoded_organization}/_apis/graph/users"
        out: list[dict[str, Any]] = []
        token = None
        while True:
            params = {"api-version": GRAPH_API_VERSION}
            if token:
                params["continuationToken"] = token
            resp = self.session.get(url, params=params)
            out.extend(self._value_list(self._json(resp, "Users request"), "users"))
            token = (resp.headers or {}).get(CONTINUATION_HEADER)
            if not token:
                break
        return out

    # ------------------ Internal helpers ------------------
    def _raise_for_status(self, resp: requests.Response, operation: str) -> None:
        if resp.status_code < 400:
            return
        body = resp.text or ""
        logger.error(
            "%s failed: status=%s reason=%s body=%s",
            operation,
            resp.status_code,
            getattr(resp, "reason", ""),
            body[:200],
        )
        raise AzureDevOpsError(operation, resp.status_code, getattr(resp, "reason", "") or "", body)

    def _json(self, resp: requests.Response, operation: str) -> Any:
        self._raise_for_status(resp, operation)
        try:
            return resp.json()
        except ValueError as exc:
            raise ResponseShapeError(f"{operation} returned a non-JSON body") from exc

    @staticmethod
    def _value_list(data: Any, what: str) -> list[dict[str, Any]]:
        value = data.get("value") if isinstance(data, dict) else None
        if not isinstance(value, list):
            raise ResponseShapeError(f"Unexpected {what} response shape: missing 'value' list")
        return value
