"""Load and expose bug table column sets from YAML (with fallbacks)."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from .config import BUG_CORE_COLUMNS, DISPLAY_ORDER_BUG_LIST

logger = logging.getLogger(__name__)

_CACHE: dict[str, list[str]] | None = None


def _defaults() -> dict[str, list[str]]:
    return {
        "core": list(BUG_CORE_COLUMNS),
        "bug_list": list(DISPLAY_ORDER_BUG_LIST),
    }


def load_column_sets(base_path: str | Path | None = None, *, reload: bool = False):
    global _CACHE
    if _CACHE is not None and not reload:
        return _CACHE
    base = Path(base_path or Path(__file__).resolve().parent.parent)
    yaml_path = base / "columns.yaml"
    if not yaml_path.exists():
        _CACHE = _defaults()
        return _CACHE
    try:
        data = yaml.safe_load(yaml_path.read_text()) or {}
    except yaml.YAMLError as exc:
        logger.warning("Ignoring unreadable %s: %s", yaml_path, exc)
        _CACHE = _defaults()
        return _CACHE
    sets = data.get("sets", {}) if isinstance(data, dict) else {}
    defaults = _defaults()
    _CACHE = {name: list(sets.get(name) or fallback) for name, fallback in defaults.items()}
    return _CACHE


def get_columns(set_name: str) -> list[str]:
    sets = load_column_sets()
    return sets.get(set_name, [])
