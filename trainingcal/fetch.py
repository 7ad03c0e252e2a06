from __future__ import annotations

from typing import Any, Optional, Tuple

import requests
from loguru import logger

from trainingcal.config import Settings, load_settings
from trainingcal.storage import GROUPS_FILE, SESSIONS_FILE, save_snapshot


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

GROUPS_PATH = "/groupes"
SCHEDULE_PATH = "/emplois-du-temps"
SESSIONS_PATH = "/sessions"
SESSIONS_SEARCH_PATH = "/sessions/search"


# ---------------------------------------------------------------------------
# Core logic
# ---------------------------------------------------------------------------


def _session(settings: Settings) -> requests.Session:
    http = requests.Session()
    http.headers["Accept"] = "application/json"
    if settings.api_token:
        http.headers["Authorization"] = f"Bearer {settings.api_token}"
    return http


def fetch_groups(http: requests.Session, settings: Settings, trainer_id: Optional[str] = None) -> Any:
    """
    Load all groups, or only the groups of one trainer.
    """
    path = GROUPS_PATH if trainer_id is None else f"{GROUPS_PATH}/formateur/{trainer_id}"
    resp = http.get(settings.api_url + path, timeout=settings.timeout)
    resp.raise_for_status()
    return resp.json()


def fetch_sessions(http: requests.Session, settings: Settings) -> Any:
    """
    Load all scheduled sessions.

    Older backends expose no schedule endpoint (404) and only allow
    searching sessions via POST (405 on GET), so both are tried in turn.
    """
    resp = http.get(settings.api_url + SCHEDULE_PATH, timeout=settings.timeout)
    if resp.status_code != 404:
        resp.raise_for_status()
        return resp.json()

    logger.info(f"{SCHEDULE_PATH} not available, falling back to {SESSIONS_PATH}")
    resp = http.get(settings.api_url + SESSIONS_PATH, timeout=settings.timeout)
    if resp.status_code == 405:
        logger.info(f"GET not allowed on {SESSIONS_PATH}, using POST {SESSIONS_SEARCH_PATH}")
        resp = http.post(settings.api_url + SESSIONS_SEARCH_PATH, json={}, timeout=settings.timeout)

    resp.raise_for_status()
    return resp.json()


def fetch_all(settings: Settings | None = None, trainer_id: Optional[str] = None) -> Tuple[int, int]:
    """
    Fetch groups and sessions and store them as local snapshots.

    Returns the number of top-level records written (groups, sessions).
    """
    settings = settings or load_settings()

    with _session(settings) as http:
        logger.info(f"Fetching groups from {settings.api_url}")
        groups = fetch_groups(http, settings, trainer_id)
        logger.info(f"Fetching sessions from {settings.api_url}")
        sessions = fetch_sessions(http, settings)

    save_snapshot(GROUPS_FILE, groups, settings.data_dir)
    save_snapshot(SESSIONS_FILE, sessions, settings.data_dir)

    return _count(groups), _count(sessions)


def _count(payload: Any) -> int:
    if isinstance(payload, list):
        return len(payload)
    if isinstance(payload, dict):
        embedded = payload.get("_embedded", payload)
        if isinstance(embedded, dict):
            return sum(len(v) for v in embedded.values() if isinstance(v, list))
    return 0
