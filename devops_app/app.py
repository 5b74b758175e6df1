"""Application entry point: page registry and router."""

from __future__ import annotations

import streamlit as st

PAGES = {}

SETUP_PAGE = "Setup / Connection"
PREFERRED_ORDER = (
    "Bug Tracker",
    SETUP_PAGE,
)


def register_page(label):
    def decorator(func):
        PAGES[label] = func
        return func

    return decorator


def ordered_pages() -> list[str]:
    ordered = [name for name in PREFERRED_ORDER if name in PAGES]
    trailing = sorted(name for name in PAGES if name not in PREFERRED_ORDER)
    return ordered + trailing


def main():
    st.sidebar.title("Azure DevOps Bugs")
    pages = ordered_pages()
    if not pages:
        st.write("No pages registered yet.")
        return
    # Land on setup until a connection exists
    if SETUP_PAGE in pages and "bug_endpoints" not in st.session_state:
        default = pages.index(SETUP_PAGE)
    else:
        default = 0
    page = st.sidebar.selectbox("Page", pages, index=default)
    PAGES[page]()


if __name__ == "__main__":
    main()
