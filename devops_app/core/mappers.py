"""Mapping raw Azure DevOps work item JSON into BugRecord / TeamMember instances."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import pandas as pd
import pytz

from .config import (
    BUG_CORE_COLUMNS,
    DEFAULT_PRIORITY,
    DEFAULT_TIMEZONE,
    FIELD_ASSIGNED_TO,
    FIELD_CHANGED_DATE,
    FIELD_PRIORITY,
    FIELD_STATE,
    FIELD_TITLE,
    PRIORITY_LABELS,
    STATE_BADGES,
    UNASSIGNED,
)
from .models import BugRecord, TeamMember


def _assignee_name(value: Any) -> str:
    if isinstance(value, Mapping):
        name = value.get("displayName")
        if isinstance(name, str) and name.strip():
            return name
    return UNASSIGNED


def _priority_value(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return DEFAULT_PRIORITY
    try:
        priority = int(value)
    except (TypeError, ValueError):
        return DEFAULT_PRIORITY
    # 0 means "not set" in the tracker
    return priority or DEFAULT_PRIORITY


def map_work_item(raw: Mapping[str, Any]) -> BugRecord:
    fields = raw.get("fields") if isinstance(raw, Mapping) else None
    if not isinstance(fields, Mapping):
        fields = {}
    raw_id = raw.get("id") if isinstance(raw, Mapping) else None
    try:
        bug_id = int(raw_id)
    except (TypeError, ValueError):
        bug_id = 0
    return BugRecord(
        id=bug_id,
        title=fields.get(FIELD_TITLE),
        assigned_to=_assignee_name(fields.get(FIELD_ASSIGNED_TO)),
        priority=_priority_value(fields.get(FIELD_PRIORITY)),
        state=fields.get(FIELD_STATE),
        changed_date=fields.get(FIELD_CHANGED_DATE),
    )


def map_team_identity(raw: Mapping[str, Any]) -> TeamMember:
    """Team membership entries wrap the user in an ``identity`` object."""
    identity = raw.get("identity") or {}
    return TeamMember(
        id=str(identity.get("id") or ""),
        display_name=identity.get("displayName") or "",
        unique_name=identity.get("uniqueName"),
    )


def map_graph_user(raw: Mapping[str, Any]) -> TeamMember:
    return TeamMember(
        id=str(raw.get("descriptor") or raw.get("originId") or ""),
        display_name=raw.get("displayName") or "",
        unique_name=raw.get("principalName") or raw.get("mailAddress"),
    )


def priority_label(priority: int | None) -> str:
    if priority in PRIORITY_LABELS:
        return PRIORITY_LABELS[priority]
    return PRIORITY_LABELS[1]


def state_badge_color(state: str | None) -> str:
    return STATE_BADGES.get(state or "", "gray")


def bugs_to_dataframe(
    bugs: Iterable[BugRecord | Mapping[str, Any]],
    timezone: str = DEFAULT_TIMEZONE,
) -> pd.DataFrame:
    """Tabulate bugs (records or their wire dicts) with display-friendly derived columns."""
    rows = [bug.to_dict() if isinstance(bug, BugRecord) else dict(bug) for bug in bugs]
    if not rows:
        return pd.DataFrame(columns=list(BUG_CORE_COLUMNS))
    df = pd.DataFrame(rows)
    df["priority_label"] = df["priority"].apply(priority_label)
    tz = pytz.timezone(timezone)
    changed = pd.to_datetime(df["changedDate"], errors="coerce", utc=True, format="ISO8601")
    df["changed"] = changed.dt.tz_convert(tz)
    age = pd.Timestamp.now(tz) - df["changed"]
    df["days_since_change"] = (age.dt.total_seconds() / 86400).round(1)
    return df
