"""Team member listing strategies used to populate the reassignment picker.

Two interchangeable strategies exist:

- ``DefaultTeamLister`` resolves the project's default team (the first team the
  teams endpoint reports) and lists that team's members.
- ``DirectoryUserLister`` enumerates the organization's directory users and
  keeps only active-directory backed user accounts.

Which one is used is decided by ``DevOpsSettings.team_source``.
"""

from __future__ import annotations

import logging
from typing import Protocol

from .config import (
    DIRECTORY_ORIGIN,
    DIRECTORY_SUBJECT_KIND,
    TEAM_SOURCE_DIRECTORY,
    TEAM_SOURCE_TEAM,
    TEAM_SOURCES,
    DevOpsSettings,
)
from .devops_client import AzureDevOpsAPI
from .errors import AzureDevOpsError, ConfigurationError, ResponseShapeError
from .mappers import map_graph_user, map_team_identity
from .models import TeamMember

logger = logging.getLogger(__name__)


class TeamMemberLister(Protocol):
    def list_team_members(self) -> list[TeamMember]: ...


class DefaultTeamLister:
    def __init__(self, api: AzureDevOpsAPI):
        self.api = api

    def list_team_members(self) -> list[TeamMember]:
        try:
            teams = self.api.list_teams()
        except AzureDevOpsError as exc:
            if exc.status_code == 404:
                self._explain_missing_teams(exc)
            raise
        if not teams:
            raise ResponseShapeError("No teams found in the project")
        default_team = teams[0]
        team_id = default_team.get("id")
        if not team_id:
            raise ResponseShapeError("Default team has no id")
        logger.debug("Listing members of default team %s", default_team.get("name") or team_id)
        return [map_team_identity(m) for m in self.api.list_team_members(team_id)]

    def _explain_missing_teams(self, teams_error: AzureDevOpsError) -> None:
        """Turn a 404 from the teams endpoint into a more precise error.

        Raises the project lookup error if the project itself is missing,
        otherwise reports that the project exists but its teams are not
        reachable, keeping the original 404 status.
        """
        try:
            project = self.api.get_project()
        except AzureDevOpsError as exc:
            raise exc from teams_error
        name = project.get("name") or self.api.settings.project
        raise AzureDevOpsError(
            f'Project "{name}" found but teams endpoint',
            teams_error.status_code,
            teams_error.reason,
        ) from teams_error


class DirectoryUserLister:
    def __init__(self, api: AzureDevOpsAPI):
        self.api = api

    def list_team_members(self) -> list[TeamMember]:
        users = self.api.list_graph_users()
        kept = [
            u
            for u in users
            if u.get("origin") == DIRECTORY_ORIGIN and u.get("subjectKind") == DIRECTORY_SUBJECT_KIND
        ]
        logger.debug("Directory users: %d total, %d active-directory users kept", len(users), len(kept))
        return [map_graph_user(u) for u in kept]


def build_team_member_lister(settings: DevOpsSettings, api: AzureDevOpsAPI) -> TeamMemberLister:
    if settings.team_source == TEAM_SOURCE_TEAM:
        return DefaultTeamLister(api)
    if settings.team_source == TEAM_SOURCE_DIRECTORY:
        return DirectoryUserLister(api)
    raise ConfigurationError(
        f"Unknown team member source {settings.team_source!r}; expected one of {sorted(TEAM_SOURCES)}"
    )
