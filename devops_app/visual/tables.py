"""Bug table helpers for Streamlit rendering."""

from __future__ import annotations

import pandas as pd
import streamlit as st

from devops_app.core.column_config import get_columns
from devops_app.core.config import DevOpsSettings


def add_work_item_link(df: pd.DataFrame, settings: DevOpsSettings, id_col: str = "id", label: str = "Work Item"):
    if df.empty or id_col not in df.columns:
        return df, {}
    out = df.copy()
    out[label] = out[id_col].apply(lambda i: settings.work_item_url(int(i)) if pd.notna(i) else "")
    cfg = {
        label: st.column_config.LinkColumn(
            label,
            display_text=r"edit/(\d+)$",
            help="Open in Azure DevOps",
            width="small",
        )
    }
    return out, cfg


def prepare_bug_table(
    df: pd.DataFrame,
    settings: DevOpsSettings,
) -> tuple[pd.DataFrame, list[str], dict[str, object]]:
    if df.empty:
        return df, [], {}

    table, cfg = add_work_item_link(df, settings)
    canonical = get_columns("bug_list") or []
    display_cols = [col for col in canonical if col in table.columns]
    if not display_cols:
        display_cols = [col for col in table.columns if col != "id"]
    return table, display_cols, cfg
