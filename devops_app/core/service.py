"""BugService: orchestrates the bug query, lookahead pagination, and reassignment."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from .config import ASSIGNEE_PATCH_PATH, BUG_FIELDS, DEFAULT_DAYS, QUERY_TOP, DevOpsSettings
from .devops_client import AzureDevOpsAPI
from .mappers import map_work_item
from .models import BugPage, BugRecord, PageWindow, TeamMember
from .query import build_bug_query
from .team import TeamMemberLister, build_team_member_lister

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int | None, int | None], None]


class BugService:
    def __init__(self, api: AzureDevOpsAPI, team_lister: TeamMemberLister | None = None):
        self.api = api
        # Built on first use so an unknown team source only fails the team-member call
        self.team_lister = team_lister

    @classmethod
    def from_settings(cls, settings: DevOpsSettings) -> BugService:
        return cls(AzureDevOpsAPI(settings))

    # ------------------ Fetch Methods ------------------
    def fetch_page(
        self,
        skip: int = 0,
        take: int = 50,
        days: int = DEFAULT_DAYS,
        *,
        progress: ProgressCallback | None = None,
        now: datetime | None = None,
    ) -> BugPage:
        """Fetch one window of open bugs changed within ``days`` days.

        The query returns every matching id (up to ``QUERY_TOP``). One id past
        the window is kept to decide ``has_more`` without a count query, then
        details are fetched for the window only.
        """
        window = PageWindow(skip, take, days)
        query = build_bug_query(window.days, now=now)
        if progress:
            progress("Querying open bugs", None, None)
        ids = self.api.run_wiql(query)
        total = len(ids)
        if not ids:
            return BugPage(skip=window.skip, take=window.take, days_included=window.days)

        lookahead = ids[window.skip : window.skip + window.take + 1]
        has_more = len(lookahead) > window.take
        page_ids = lookahead[: window.take]
        logger.debug(
            "Bug window skip=%s take=%s: %d of %d ids, has_more=%s",
            window.skip,
            window.take,
            len(page_ids),
            total,
            has_more,
        )

        items: tuple[BugRecord, ...] = ()
        if page_ids:
            if progress:
                progress("Loading bug details", 0, len(page_ids))
            raw_items = self.api.get_work_items(page_ids, BUG_FIELDS)
            by_id = {bug.id: bug for bug in (map_work_item(r) for r in raw_items)}
            # Keep query order; the batch endpoint does not promise it
            items = tuple(by_id[i] for i in page_ids if i in by_id)
            if progress:
                progress("Loading bug details", len(items), len(page_ids))

        return BugPage(
            items=items,
            skip=window.skip,
            take=window.take,
            has_more=has_more,
            total=total,
            days_included=window.days,
            capped=total >= QUERY_TOP,
        )

    def list_team_members(self) -> list[TeamMember]:
        if self.team_lister is None:
            self.team_lister = build_team_member_lister(self.api.settings, self.api)
        return self.team_lister.list_team_members()

    # ------------------ Mutations ------------------
    def reassign(self, bug_id: int, new_assignee: str) -> None:
        """Replace the assignee of one bug. Callers refetch to see the change."""
        if not isinstance(new_assignee, str) or not new_assignee.strip():
            raise ValueError("newAssignee must be a non-empty display name")
        operations = [{"op": "add", "path": ASSIGNEE_PATCH_PATH, "value": new_assignee}]
        self.api.update_work_item(int(bug_id), operations)
        logger.info("Reassigned bug %s to %s", bug_id, new_assignee)
