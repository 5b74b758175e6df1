"""Convenience launcher for the Streamlit app.

Usage:
  streamlit run run_dashboard.py

Automatically imports every module in ``devops_app/pages`` so each page
decorated with ``@register_page`` registers itself without manual edits here.
"""

import logging
from importlib import import_module
from pathlib import Path

import streamlit as st

from devops_app.app import main

st.set_page_config(page_title="Azure DevOps Bug Tracker", layout="wide")
logger = logging.getLogger("devops_app")


def _auto_init_endpoints():
    """Build the connection once per session from Streamlit secrets / environment."""
    if "bug_endpoints" in st.session_state:
        return

    from devops_app.pages.setup import connect, load_startup_settings

    settings = load_startup_settings()
    if settings.is_complete:
        connect(settings)
        st.sidebar.success(f"Using Azure DevOps project {settings.organization}/{settings.project}.")
    else:
        st.sidebar.warning("Azure DevOps settings not found. Please use the Setup page.")


PAGES_DIR = Path(__file__).parent / "devops_app" / "pages"
for py in sorted(PAGES_DIR.glob("[!_]*.py")):
    mod_name = f"devops_app.pages.{py.stem}"
    try:
        import_module(mod_name)
    except Exception:  # pragma: no cover - keep the rest of the app usable
        logger.exception("Failed importing page %s", mod_name)

_auto_init_endpoints()

if __name__ == "__main__":
    main()
