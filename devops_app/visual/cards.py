"""Bug cards and the reassignment dialog."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

import streamlit as st

from devops_app.core.config import SETTINGS, UNASSIGNED
from devops_app.core.endpoints import BugEndpoints
from devops_app.core.mappers import priority_label, state_badge_color
from devops_app.core.view_state import describe_error

PRIORITY_COLORS = {"Low": "gray", "Medium": "blue", "High": "red"}

REASSIGN_NOTICE_KEY = "reassign_notice"
REFRESH_KEY = "bug_list_refresh"


def _badge(text: str, color: str) -> str:
    return f":{color}-background[{text}]"


def picker_options(current: str | None, members: Sequence[str]) -> tuple[list[str], int | None]:
    """Picker entries plus the index of the current assignee, if selectable."""
    options = [m for m in dict.fromkeys(members) if m]
    if current and current != UNASSIGNED and current not in options:
        options.insert(0, current)
    index = options.index(current) if current in options else None
    return options, index


@st.dialog("Reassign Bug")
def reassign_dialog(bug: dict[str, Any], members: list[str], endpoints: BugEndpoints) -> None:
    st.caption(f"#{bug['id']} {bug.get('title') or ''}")
    options, index = picker_options(bug.get("assignedTo"), members)
    if not options:
        st.warning("No team members available to assign.")
        return
    choice = st.selectbox("New assignee", options, index=index, placeholder="Select new assignee")
    if st.button("Confirm Reassignment", type="primary", disabled=not choice):
        with st.spinner("Reassigning..."):
            status, payload = endpoints.reassign_bug(bug["id"], {"newAssignee": choice})
        if status != 200:
            st.error(describe_error(payload))
            return
        st.session_state[REASSIGN_NOTICE_KEY] = f"Bug {bug['id']} reassigned to {choice}."
        st.session_state[REFRESH_KEY] = True
        st.rerun()


def render_bug_card(bug: dict[str, Any], on_reassign: Callable[[dict[str, Any]], None]) -> None:
    with st.container(border=True):
        st.markdown(f"**:material/bug_report: {bug.get('title') or '(untitled)'}**")
        left, right = st.columns([3, 1])
        left.markdown(f":material/person: {bug.get('assignedTo') or UNASSIGNED}")
        label = priority_label(bug.get("priority"))
        right.markdown(_badge(label, PRIORITY_COLORS.get(label, "gray")))
        left, right = st.columns([3, 1])
        state = bug.get("state") or "Unknown"
        left.markdown(_badge(state, state_badge_color(bug.get("state"))))
        if right.button("Reassign", key=f"reassign-{bug['id']}"):
            on_reassign(bug)


def render_bug_grid(items: Sequence[dict[str, Any]], on_reassign: Callable[[dict[str, Any]], None]) -> None:
    per_row = max(1, SETTINGS.max_cards_per_row)
    for start in range(0, len(items), per_row):
        cols = st.columns(per_row)
        for col, bug in zip(cols, items[start : start + per_row], strict=False):
            with col:
                render_bug_card(bug, on_reassign)
