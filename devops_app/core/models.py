"""Domain data models for bugs, team members, and list pages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .config import DEFAULT_DAYS, DEFAULT_PRIORITY, MAX_TAKE, UNASSIGNED


@dataclass(frozen=True, slots=True)
class BugRecord:
    id: int
    title: str | None
    assigned_to: str = UNASSIGNED
    priority: int = DEFAULT_PRIORITY
    state: str | None = None
    changed_date: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "assignedTo": self.assigned_to,
            "priority": self.priority,
            "state": self.state,
            "changedDate": self.changed_date,
        }


@dataclass(frozen=True, slots=True)
class TeamMember:
    id: str
    display_name: str
    unique_name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "displayName": self.display_name, "uniqueName": self.unique_name}


@dataclass(frozen=True, slots=True)
class PageWindow:
    """Offset/limit slice over the ordered bug id list, plus the lookback it was queried with."""

    skip: int = 0
    take: int = MAX_TAKE
    days: int = DEFAULT_DAYS

    def __post_init__(self):
        if self.skip < 0:
            raise ValueError(f"skip must be non-negative, got {self.skip}")
        if not 1 <= self.take <= MAX_TAKE:
            raise ValueError(f"take must be between 1 and {MAX_TAKE}, got {self.take}")
        if self.days < 0:
            raise ValueError(f"days must be non-negative, got {self.days}")

    @classmethod
    def clamped(cls, skip: int = 0, take: int = MAX_TAKE, days: int = DEFAULT_DAYS) -> PageWindow:
        return cls(
            skip=max(0, skip),
            take=min(max(1, take), MAX_TAKE),
            days=days if days >= 0 else DEFAULT_DAYS,
        )

    def next(self) -> PageWindow:
        return PageWindow(self.skip + self.take, self.take, self.days)

    def previous(self) -> PageWindow:
        return PageWindow(max(0, self.skip - self.take), self.take, self.days)


@dataclass(frozen=True, slots=True)
class BugPage:
    items: tuple[BugRecord, ...] = field(default_factory=tuple)
    skip: int = 0
    take: int = MAX_TAKE
    has_more: bool = False
    total: int = 0
    days_included: int = DEFAULT_DAYS
    # True when the query hit its "Select Top" bound; total is then a lower bound
    capped: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "items": [bug.to_dict() for bug in self.items],
            "skip": self.skip,
            "take": self.take,
            "hasMore": self.has_more,
            "total": self.total,
            "daysIncluded": self.days_included,
            "capped": self.capped,
        }
