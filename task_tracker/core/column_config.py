"""Load and expose table column sets from YAML (with fallbacks)."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from .config import DISPLAY_ORDER_ENTRIES, DISPLAY_ORDER_TASK_LIST

logger = logging.getLogger(__name__)

_CACHE: dict[str, list[str]] | None = None


def _defaults() -> dict[str, list[str]]:
    return {
        "task_list": list(DISPLAY_ORDER_TASK_LIST),
        "entries": list(DISPLAY_ORDER_ENTRIES),
    }


def load_column_sets(base_path: str | Path | None = None, *, reload: bool = False) -> dict[str, list[str]]:
    global _CACHE
    if _CACHE is not None and not reload:
        return _CACHE
    base = Path(base_path or Path(__file__).resolve().parent.parent)
    yaml_path = base / "columns.yaml"
    sets = _defaults()
    if yaml_path.exists():
        try:
            data = yaml.safe_load(yaml_path.read_text()) or {}
        except (OSError, yaml.YAMLError) as exc:
            logger.warning("Ignoring unreadable column config %s: %s", yaml_path, exc)
            data = {}
        for name, columns in (data.get("sets") or {}).items():
            if isinstance(columns, list) and columns:
                sets[name] = [str(c) for c in columns]
    _CACHE = sets
    return _CACHE


def get_columns(set_name: str) -> list[str]:
    return list(load_column_sets().get(set_name, []))
