"""
Local snapshots of the raw API data.

The fetch command writes:

    <data_dir>/groups.json
    <data_dir>/sessions.json

exactly as the API returned them. Every calendar command re-reads these
files and runs them through the normalizer, so the calendar can be
browsed offline and normalization changes apply without re-fetching.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from loguru import logger

from trainingcal.config import DEFAULT_DATA_DIR


GROUPS_FILE = "groups.json"
SESSIONS_FILE = "sessions.json"


def snapshot_path(name: str, data_dir: str | Path | None = None) -> Path:
    """
    Return the path of one snapshot file.

    Using a function instead of a constant makes testing easier,
    because tests can pass a temporary directory.
    """
    base = Path(data_dir) if data_dir is not None else DEFAULT_DATA_DIR
    return base / name


def load_snapshot(name: str, data_dir: str | Path | None = None) -> Any:
    """
    Load one snapshot. Returns [] if the file does not exist or is unreadable.
    """
    path = snapshot_path(name, data_dir)

    # First run: nothing fetched yet
    if not path.exists():
        logger.info(f"No snapshot at {path}, run 'trainingcal fetch' first")
        return []

    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.warning(f"Could not read snapshot {path}: {exc}")
        return []


def save_snapshot(name: str, payload: Any, data_dir: str | Path | None = None) -> Path:
    """
    Save one snapshot, creating parent directories if needed.
    """
    path = snapshot_path(name, data_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    return path
