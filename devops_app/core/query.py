"""WIQL query construction for the open bug list."""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytz

from .config import DEFAULT_DAYS, EXCLUDED_STATES, FIELD_CHANGED_DATE, QUERY_TOP


def cutoff_date(days: int = DEFAULT_DAYS, now: datetime | None = None) -> date:
    """Return the UTC calendar date ``days`` before ``now``.

    ``days`` is interpolated into WIQL unescaped, so only real integers are
    accepted (``bool`` is rejected even though it subclasses ``int``).
    """
    if isinstance(days, bool) or not isinstance(days, int):
        raise TypeError(f"days must be an int, got {type(days).__name__}")
    if days < 0:
        raise ValueError(f"days must be non-negative, got {days}")
    if now is None:
        now = datetime.now(pytz.UTC)
    elif now.tzinfo is None:
        now = pytz.UTC.localize(now)
    else:
        now = now.astimezone(pytz.UTC)
    return (now - timedelta(days=days)).date()


def build_bug_query(days: int = DEFAULT_DAYS, *, now: datetime | None = None) -> str:
    """Open bugs changed since the cutoff, most recently changed first."""
    since = cutoff_date(days, now).isoformat()
    state_clauses = " And ".join(f"[System.State] <> '{state}'" for state in EXCLUDED_STATES)
    return (
        f"Select Top {QUERY_TOP} [System.Id] From WorkItems "
        f"Where [System.WorkItemType] = 'Bug' "
        f"And {state_clauses} "
        f"And [{FIELD_CHANGED_DATE}] >= '{since}' "
        f"Order By [{FIELD_CHANGED_DATE}] Desc"
    )
