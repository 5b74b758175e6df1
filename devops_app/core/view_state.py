"""UI view model for the bug list: load state plus out-of-order completion guard."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .models import PageWindow


class LoadState(str, Enum):
    UNCONFIGURED = "unconfigured"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class FetchTicket:
    """Tag attached to one list request; only the latest ticket may update the view."""

    seq: int
    window: PageWindow


@dataclass(slots=True)
class BugListView:
    state: LoadState = LoadState.UNCONFIGURED
    window: PageWindow = field(default_factory=PageWindow)
    payload: dict[str, Any] | None = None
    error: str | None = None
    _seq: int = field(default=0, repr=False)

    def begin(self, window: PageWindow) -> FetchTicket:
        """Start a fetch for ``window``; any earlier in-flight ticket becomes stale."""
        self._seq += 1
        self.window = window
        self.state = LoadState.LOADING
        self.error = None
        return FetchTicket(self._seq, window)

    def is_current(self, ticket: FetchTicket) -> bool:
        return ticket.seq == self._seq and ticket.window == self.window

    def resolve(self, ticket: FetchTicket, payload: dict[str, Any]) -> bool:
        if not self.is_current(ticket):
            return False
        self.payload = payload
        self.error = None
        self.state = LoadState.LOADED
        return True

    def fail(self, ticket: FetchTicket, message: str) -> bool:
        if not self.is_current(ticket):
            return False
        self.payload = None
        self.error = message
        self.state = LoadState.ERROR
        return True

    def apply(self, ticket: FetchTicket, status: int, payload: Any) -> bool:
        """Route an endpoint ``(status, payload)`` result to resolve or fail."""
        if status == 200 and isinstance(payload, dict) and "error" not in payload:
            return self.resolve(ticket, payload)
        return self.fail(ticket, describe_error(payload))

    def reset(self) -> None:
        self._seq += 1
        self.state = LoadState.UNCONFIGURED
        self.payload = None
        self.error = None


def describe_error(payload: Any) -> str:
    if not isinstance(payload, dict):
        return "Unknown error occurred"
    error = payload.get("error") or "Unknown error occurred"
    details = payload.get("details")
    if isinstance(details, str) and details:
        return f"{error}: {details}"
    if isinstance(details, dict):
        missing = [k for k, present in details.items() if not present]
        if missing:
            return f"{error} ({', '.join(missing)} not set)"
    return str(error)
