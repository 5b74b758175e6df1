"""Column labels and hover help for bug tables."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import streamlit as st

# Mapping of raw column keys to (label, help text, format key)
# format key: "int" -> integer, "float1" -> 1 decimal float, "datetime" -> timestamp, None -> text
COLUMN_METADATA: dict[str, tuple[str, str, str | None]] = {
    "id": ("ID", "Azure DevOps work item id.", "int"),
    "title": ("Title", "Bug title.", None),
    "assignedTo": ("Assigned To", "Current assignee display name.", None),
    "priority": ("Priority", "Numeric work item priority.", "int"),
    "priority_label": ("Priority", "Priority level of the bug.", None),
    "state": ("State", "Current work item state.", None),
    "changedDate": ("Changed", "Raw last-changed timestamp reported by Azure DevOps.", None),
    "changed": ("Changed", "Last change, in the dashboard time zone.", "datetime"),
    "days_since_change": ("Days Since Change", "Days elapsed since the last change.", "float1"),
}


def apply_column_metadata(
    columns: Iterable[str],
    existing: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Return a column_config dictionary with human labels and hover help."""

    config: dict[str, Any] = dict(existing or {})
    for col in columns:
        if col in config:
            continue
        meta = COLUMN_METADATA.get(col)
        if not meta:
            continue
        label, help_text, fmt = meta
        if fmt == "int":
            config[col] = st.column_config.NumberColumn(label, help=help_text, format="%d")
        elif fmt == "float1":
            config[col] = st.column_config.NumberColumn(label, help=help_text, format="%.1f")
        elif fmt == "datetime":
            config[col] = st.column_config.DatetimeColumn(label, help=help_text, format="YYYY-MM-DD HH:mm")
        else:
            config[col] = st.column_config.Column(label, help=help_text)
    return config
