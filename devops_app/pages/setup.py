"""Connection setup page: collect Azure DevOps settings and initialize the endpoints."""

from __future__ import annotations

import os

import streamlit as st

from devops_app.app import register_page
from devops_app.core.config import (
    ENV_ORGANIZATION,
    ENV_PAT,
    ENV_PROJECT,
    SECRETS_SECTION,
    TEAM_SOURCE_DIRECTORY,
    TEAM_SOURCE_TEAM,
    DevOpsSettings,
)
from devops_app.core.endpoints import BugEndpoints
from devops_app.core.view_state import BugListView

TEAM_SOURCE_LABELS = {
    TEAM_SOURCE_TEAM: "Project default team",
    TEAM_SOURCE_DIRECTORY: "Organization directory users",
}


def load_startup_settings() -> DevOpsSettings:
    """Settings from Streamlit secrets (``[azure_devops]`` or top level), then the environment."""
    try:
        section = st.secrets.get(SECRETS_SECTION, {})
        top_level = dict(st.secrets)
    except FileNotFoundError:
        section, top_level = {}, {}
    return DevOpsSettings.from_mapping(section, top_level, os.environ)


def connect(settings: DevOpsSettings) -> None:
    st.session_state["devops_settings"] = settings
    st.session_state["bug_endpoints"] = BugEndpoints(settings)
    st.session_state["bug_view"] = BugListView()
    st.session_state.pop("team_members", None)
    st.session_state["bug_skip"] = 0


@register_page("Setup / Connection")
def setup_page():
    st.title("Configure Azure DevOps")
    st.caption("Credentials stay on the dashboard server; use Streamlit secrets in production.")

    current: DevOpsSettings = st.session_state.get("devops_settings") or load_startup_settings()

    with st.form("devops_setup"):
        organization = st.text_input(
            "Organization",
            value=current.organization,
            placeholder="Your Azure DevOps organization",
        )
        project = st.text_input("Project", value=current.project, placeholder="Your project name")
        pat = st.text_input(
            "Personal Access Token",
            type="password",
            value=current.pat,
            placeholder="Your PAT",
        )
        sources = list(TEAM_SOURCE_LABELS)
        team_source = st.selectbox(
            "Reassignment candidates",
            sources,
            index=sources.index(current.team_source) if current.team_source in sources else 0,
            format_func=TEAM_SOURCE_LABELS.get,
        )
        submitted = st.form_submit_button("Configure", type="primary")

    if submitted:
        settings = DevOpsSettings.from_mapping(
            {
                ENV_ORGANIZATION: organization,
                ENV_PROJECT: project,
                ENV_PAT: pat,
            }
        )
        if not settings.is_complete:
            st.error("Please fill in all fields")
            return
        settings = DevOpsSettings(
            organization=settings.organization,
            project=settings.project,
            pat=settings.pat,
            team_source=team_source,
            timezone=current.timezone,
        )
        connect(settings)
        st.success(f"Connected to {settings.organization}/{settings.project}.")

    if "bug_endpoints" in st.session_state:
        st.info("Azure DevOps connection ready. Open the Bug Tracker page.")
