"""Test doubles for Azure DevOps: an in-memory tracker API and a canned HTTP session."""

from __future__ import annotations

import json
from typing import Any

from devops_app.core.config import (
    FIELD_ASSIGNED_TO,
    FIELD_CHANGED_DATE,
    FIELD_PRIORITY,
    FIELD_STATE,
    FIELD_TITLE,
    QUERY_TOP,
    DevOpsSettings,
)
from devops_app.core.devops_client import AzureDevOpsAPI
from devops_app.core.errors import AzureDevOpsError


def make_bug(bug_id: int, *, assignee: str | None = "Alice", priority: int | None = 2, state: str = "Active"):
    fields: dict[str, Any] = {
        FIELD_TITLE: f"Bug {bug_id}",
        FIELD_STATE: state,
        FIELD_CHANGED_DATE: f"2024-09-{(bug_id % 28) + 1:02d}T10:00:00.000Z",
    }
    if assignee is not None:
        fields[FIELD_ASSIGNED_TO] = {"displayName": assignee, "uniqueName": f"{assignee.lower()}@contoso.com"}
    if priority is not None:
        fields[FIELD_PRIORITY] = priority
    return {"id": bug_id, "fields": fields}


class FakeTracker(AzureDevOpsAPI):
    """In-memory tracker: the query returns ids in insertion order, patches apply immediately."""

    def __init__(self, bugs=(), settings: DevOpsSettings | None = None, *, reverse_details: bool = False):
        self.settings = settings or DevOpsSettings(organization="contoso", project="Web Shop", pat="x")
        self.bugs: dict[int, dict[str, Any]] = {b["id"]: b for b in bugs}
        self.reverse_details = reverse_details
        self.queries: list[str] = []
        self.detail_calls: list[list[int]] = []
        self.patches: list[tuple[int, list[dict[str, Any]]]] = []
        self.teams: list[dict[str, Any]] = [{"id": "team-1", "name": "Web Shop Team"}]
        self.members: dict[str, list[dict[str, Any]]] = {}
        self.users: list[dict[str, Any]] = []
        self.teams_error: AzureDevOpsError | None = None
        self.project_error: AzureDevOpsError | None = None

    def run_wiql(self, query):
        self.queries.append(query)
        return list(self.bugs)[:QUERY_TOP]

    def get_work_items(self, ids, fields):
        self.detail_calls.append(list(ids))
        out = [json.loads(json.dumps(self.bugs[i])) for i in ids if i in self.bugs]
        return list(reversed(out)) if self.reverse_details else out

    def update_work_item(self, bug_id, operations):
        if bug_id not in self.bugs:
            raise AzureDevOpsError("Reassign bug", 404, "Not Found", f"TF401232: Work item {bug_id} does not exist")
        self.patches.append((bug_id, operations))
        for op in operations:
            field_name = op["path"].rsplit("/", 1)[-1]
            self.bugs[bug_id]["fields"][field_name] = {"displayName": op["value"]}
        return {"id": bug_id}

    def list_teams(self):
        if self.teams_error:
            raise self.teams_error
        return self.teams

    def list_team_members(self, team_id):
        return self.members.get(team_id, [])

    def get_project(self):
        if self.project_error:
            raise self.project_error
        return {"id": "p-1", "name": self.settings.project}

    def list_graph_users(self):
        return self.users


class FakeResponse:
    def __init__(self, status_code=200, payload=None, *, text=None, headers=None, reason="OK"):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else ("" if payload is None else json.dumps(payload))
        self.headers = headers or {}
        self.reason = reason

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    """Routes are ``(method, url_fragment, response_or_list)``; first match wins."""

    def __init__(self, routes):
        self.routes = routes
        self.headers: dict[str, str] = {}
        self.auth = None
        self.calls: list[dict[str, Any]] = []

    def _dispatch(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        for route_method, fragment, response in self.routes:
            if route_method == method and fragment in url:
                if isinstance(response, list):
                    return response.pop(0)
                return response
        raise AssertionError(f"Unexpected request {method} {url}")

    def get(self, url, **kwargs):
        return self._dispatch("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._dispatch("POST", url, **kwargs)

    def patch(self, url, **kwargs):
        return self._dispatch("PATCH", url, **kwargs)
