"""Progress reporting for Streamlit pages, fed by BugService progress callbacks."""

from __future__ import annotations

import streamlit as st


class ProgressReporter:
    """Status box with a progress bar; finalizes once with success or error."""

    def __init__(self, title: str):
        self._status = st.status(title, expanded=False)
        self._bar = self._status.progress(0.0)
        self._finalized = False

    def callback(self, message: str, current: int | None = None, total: int | None = None) -> None:
        """Signature compatible with BugService progress callbacks."""
        if self._finalized:
            return
        self._status.update(label=message, state="running")
        if total:
            self._bar.progress(min(max((current or 0) / total, 0.0), 1.0))

    def complete(self, message: str) -> None:
        if self._finalized:
            return
        self._bar.progress(1.0)
        self._status.update(label=message, state="complete")
        self._finalized = True

    def error(self, message: str) -> None:
        if self._finalized:
            return
        self._status.update(label=message, state="error", expanded=True)
        self._finalized = True
