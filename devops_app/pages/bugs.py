"""Bug tracker page.

Lists open bugs changed within a lookback window one page at a time, and lets
the user reassign a bug to a team member. Every successful reassignment is
followed by a full refetch of the current page.
"""

from __future__ import annotations

import streamlit as st

from devops_app.app import register_page
from devops_app.core.config import DEFAULT_DAYS, MAX_TAKE, QUERY_TOP, SETTINGS, DevOpsSettings
from devops_app.core.endpoints import BugEndpoints
from devops_app.core.mappers import bugs_to_dataframe
from devops_app.core.models import PageWindow
from devops_app.core.view_state import BugListView, LoadState, describe_error
from devops_app.visual.cards import REASSIGN_NOTICE_KEY, REFRESH_KEY, reassign_dialog, render_bug_grid
from devops_app.visual.column_metadata import apply_column_metadata
from devops_app.visual.progress import ProgressReporter
from devops_app.visual.tables import prepare_bug_table

PAGE_SIZES = (10, 25, MAX_TAKE)


def _load_page(endpoints: BugEndpoints, view: BugListView, window: PageWindow) -> None:
    ticket = view.begin(window)
    reporter = ProgressReporter(f"Fetching bugs changed in the last {window.days} days")
    status, payload = endpoints.list_bugs(
        {"skip": window.skip, "take": window.take, "days": window.days},
        progress=reporter.callback,
    )
    if not view.apply(ticket, status, payload):
        return
    if view.state is LoadState.LOADED:
        reporter.complete(f"Loaded {len(payload['items'])} bug(s).")
    else:
        reporter.error(view.error or "Failed to fetch bugs")


def _team_member_names(endpoints: BugEndpoints) -> list[str]:
    cached = st.session_state.get("team_members")
    if cached is not None and cached[0] is endpoints:
        status, payload = cached[1]
    else:
        status, payload = endpoints.list_team_members()
        st.session_state["team_members"] = (endpoints, (status, payload))
    if status != 200 or not isinstance(payload, list):
        st.warning(f"Failed to fetch team members: {describe_error(payload)}")
        if st.button("Reload team members"):
            st.session_state.pop("team_members", None)
            st.rerun()
        return []
    return [m["displayName"] for m in payload if m.get("displayName")]


def _total_label(payload: dict) -> str:
    if payload.get("capped"):
        return f"{QUERY_TOP}+"
    return str(payload.get("total", 0))


def _render_pager(window: PageWindow, payload: dict) -> None:
    items = payload.get("items") or []
    start = window.skip + 1 if items else 0
    end = window.skip + len(items)
    left, middle, right = st.columns([1, 3, 1])
    if left.button("Previous", disabled=window.skip == 0):
        st.session_state["bug_skip"] = window.previous().skip
        st.rerun()
    middle.caption(f"Showing {start}-{end} of {_total_label(payload)} bugs")
    if right.button("Next", disabled=not payload.get("hasMore")):
        st.session_state["bug_skip"] = window.next().skip
        st.rerun()


def _render_table(items: list[dict], settings: DevOpsSettings, members: list[str], endpoints: BugEndpoints):
    df = bugs_to_dataframe(items, timezone=settings.timezone)
    prepared, display_cols, cfg = prepare_bug_table(df, settings)
    column_config = apply_column_metadata(display_cols, cfg)
    st.dataframe(prepared[display_cols], hide_index=True, column_config=column_config)
    csv = prepared[display_cols].to_csv(index=False).encode(SETTINGS.download_encoding)
    st.download_button(
        "Download CSV",
        data=csv,
        file_name=f"devops_bugs_{settings.project}.csv",
        mime="text/csv",
    )
    by_id = {bug["id"]: bug for bug in items}
    choice = st.selectbox(
        "Bug to reassign",
        list(by_id),
        format_func=lambda i: f"#{i} {by_id[i].get('title') or ''}",
    )
    if st.button("Reassign", disabled=choice is None):
        reassign_dialog(by_id[choice], members, endpoints)


@register_page("Bug Tracker")
def bugs_page():
    st.title("Azure DevOps Bug Tracker")
    endpoints: BugEndpoints | None = st.session_state.get("bug_endpoints")
    view: BugListView = st.session_state.setdefault("bug_view", BugListView())
    if endpoints is None:
        view.reset()
        st.warning("Configure the Azure DevOps connection on the Setup page first.")
        return

    col_days, col_take, col_mode = st.columns(3)
    days = int(col_days.number_input("Changed in the last N days", min_value=1, value=DEFAULT_DAYS, step=1))
    take = int(col_take.selectbox("Bugs per page", PAGE_SIZES, index=len(PAGE_SIZES) - 1))
    mode = col_mode.radio("View", ("Cards", "Table"), horizontal=True)

    # A different lookback or page size starts again from the first page
    if (days, take) != (view.window.days, view.window.take):
        st.session_state["bug_skip"] = 0
    window = PageWindow.clamped(st.session_state.get("bug_skip", 0), take, days)

    notice = st.session_state.pop(REASSIGN_NOTICE_KEY, None)
    if notice:
        st.success(notice)

    refresh = st.button("Refresh", type="primary")
    if (
        refresh
        or st.session_state.pop(REFRESH_KEY, False)
        or view.state is LoadState.UNCONFIGURED
        or window != view.window
    ):
        _load_page(endpoints, view, window)

    if view.state is LoadState.ERROR:
        st.error(view.error)
        st.caption("Use Refresh to try again.")
        return
    if view.state is not LoadState.LOADED or view.payload is None:
        st.info("No bugs loaded yet.")
        return

    payload = view.payload
    items = payload.get("items") or []
    if not items:
        st.info(f"No open bugs changed in the last {payload.get('daysIncluded', days)} days.")
        if view.window.skip:
            _render_pager(view.window, payload)
        return

    members = _team_member_names(endpoints)
    _render_pager(view.window, payload)
    st.markdown("---")

    def _open_dialog(bug: dict) -> None:
        reassign_dialog(bug, members, endpoints)

    if mode == "Table":
        settings: DevOpsSettings = st.session_state.get("devops_settings") or endpoints.settings
        _render_table(items, settings, members, endpoints)
    else:
        render_bug_grid(items, _open_dialog)
