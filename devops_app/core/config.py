"""Central configuration, constants, and connection settings for the bug dashboard."""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

from .errors import ConfigurationError

# =============================================================================
# Azure DevOps Endpoints
# =============================================================================
DEVOPS_BASE_URL = "https://dev.azure.com"
DEVOPS_GRAPH_BASE_URL = "https://vssps.dev.azure.com"

WIQL_API_VERSION = "7.1-preview.2"
WORK_ITEMS_API_VERSION = "7.1-preview.3"
TEAMS_API_VERSION = "7.1-preview.3"
PROJECTS_API_VERSION = "7.1-preview.4"
GRAPH_API_VERSION = "7.1-preview.1"

# =============================================================================
# Query / Pagination
# =============================================================================
MAX_TAKE: int = 50  # Largest page the list operation will serve
DEFAULT_TAKE: int = 50
DEFAULT_DAYS: int = 90  # Default lookback for "changed within N days"
QUERY_TOP: int = 1000  # WIQL "Select Top" bound on candidate ids

# Work item states excluded from the open bug list
EXCLUDED_STATES: Sequence[str] = ("Closed", "Removed")

# =============================================================================
# Work Item Fields
# =============================================================================
FIELD_ID = "System.Id"
FIELD_TITLE = "System.Title"
FIELD_ASSIGNED_TO = "System.AssignedTo"
FIELD_PRIORITY = "Microsoft.VSTS.Common.Priority"
FIELD_STATE = "System.State"
FIELD_CHANGED_DATE = "System.ChangedDate"

BUG_FIELDS: Sequence[str] = (
    FIELD_ID,
    FIELD_TITLE,
    FIELD_ASSIGNED_TO,
    FIELD_PRIORITY,
    FIELD_STATE,
    FIELD_CHANGED_DATE,
)

ASSIGNEE_PATCH_PATH = f"/fields/{FIELD_ASSIGNED_TO}"

# =============================================================================
# Normalization Defaults
# =============================================================================
UNASSIGNED = "Unassigned"
DEFAULT_PRIORITY: int = 2

# Priority badge labels; unknown priorities fall back to the entry for 1
PRIORITY_LABELS: dict[int, str] = {
    1: "Low",
    2: "Medium",
    3: "High",
}

# Streamlit badge colors keyed by work item state; anything else is "gray"
STATE_BADGES: dict[str, str] = {
    "New": "blue",
    "Active": "orange",
}

# =============================================================================
# Team Members
# =============================================================================
TEAM_SOURCE_TEAM = "team"
TEAM_SOURCE_DIRECTORY = "directory"
TEAM_SOURCES: frozenset[str] = frozenset({TEAM_SOURCE_TEAM, TEAM_SOURCE_DIRECTORY})

# Graph users kept by the directory strategy
DIRECTORY_ORIGIN = "aad"
DIRECTORY_SUBJECT_KIND = "user"

# =============================================================================
# Display
# =============================================================================
DEFAULT_TIMEZONE = "UTC"

BUG_CORE_COLUMNS: Sequence[str] = (
    "id",
    "title",
    "assignedTo",
    "priority",
    "state",
    "changedDate",
)

DISPLAY_ORDER_BUG_LIST: Sequence[str] = (
    "Work Item",
    "title",
    "assignedTo",
    "priority_label",
    "state",
    "changed",
    "days_since_change",
)

# Setting names (environment variables and Streamlit secrets keys)
ENV_PAT = "AZURE_DEVOPS_PAT"
ENV_ORGANIZATION = "AZURE_DEVOPS_ORGANIZATION"
ENV_PROJECT = "AZURE_DEVOPS_PROJECT"
ENV_TEAM_SOURCE = "AZURE_DEVOPS_TEAM_SOURCE"
ENV_TIMEZONE = "DASHBOARD_TIMEZONE"
SECRETS_SECTION = "azure_devops"


def _clean(value: Any) -> str:
    """Strip whitespace and a single pair of surrounding double quotes."""
    if value is None:
        return ""
    text = str(value).strip()
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        text = text[1:-1]
    return text


@dataclass(frozen=True, slots=True)
class DevOpsSettings:
    """Immutable connection settings, built once and passed to every operation."""

    organization: str = ""
    project: str = ""
    pat: str = ""
    team_source: str = TEAM_SOURCE_TEAM
    timezone: str = DEFAULT_TIMEZONE

    def __repr__(self) -> str:
        return (
            f"DevOpsSettings(organization={self.organization!r}, project={self.project!r}, "
            f"pat={'***' if self.pat else ''!r}, team_source={self.team_source!r}, "
            f"timezone={self.timezone!r})"
        )

    @classmethod
    def from_mapping(cls, *sources: Mapping[str, Any] | None) -> DevOpsSettings:
        """Build settings from one or more mappings; earlier sources win."""

        def pick(name: str) -> str:
            for source in sources:
                if not source:
                    continue
                value = _clean(source.get(name))
                if value:
                    return value
            return ""

        team_source = pick(ENV_TEAM_SOURCE).lower() or TEAM_SOURCE_TEAM
        return cls(
            organization=pick(ENV_ORGANIZATION),
            project=pick(ENV_PROJECT),
            pat=pick(ENV_PAT),
            team_source=team_source,
            timezone=pick(ENV_TIMEZONE) or DEFAULT_TIMEZONE,
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> DevOpsSettings:
        return cls.from_mapping(os.environ if environ is None else environ)

    def missing(self) -> list[str]:
        names = []
        if not self.pat:
            names.append(ENV_PAT)
        if not self.organization:
            names.append(ENV_ORGANIZATION)
        if not self.project:
            names.append(ENV_PROJECT)
        return names

    @property
    def is_complete(self) -> bool:
        return not self.missing()

    def require(self) -> DevOpsSettings:
        missing = self.missing()
        if missing:
            raise ConfigurationError("Azure DevOps configuration is missing", missing=missing)
        return self

    def presence(self) -> dict[str, bool]:
        """Which required values are set, in the shape reported to callers."""
        return {
            "hasPAT": bool(self.pat),
            "hasOrg": bool(self.organization),
            "hasProject": bool(self.project),
        }

    @property
    def encoded_organization(self) -> str:
        return quote(self.organization, safe="")

    @property
    def encoded_project(self) -> str:
        return quote(self.project, safe="")

    def work_item_url(self, bug_id: int) -> str:
        return f"{DEVOPS_BASE_URL}/{self.encoded_organization}/{self.encoded_project}/_workitems/edit/{bug_id}"


@dataclass(slots=True)
class AppSettings:
    max_cards_per_row: int = 3
    download_encoding: str = "utf-8"


SETTINGS = AppSettings()
