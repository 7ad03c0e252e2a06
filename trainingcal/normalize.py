"""
Normalizing (raw API JSON -> canonical records).

- Accepts groups and sessions in whatever shape the training-center API
  returns them (English or French field names, HAL "_embedded" envelopes,
  weekday lists or comma-joined strings, ISO dates or datetimes)
- Produces GroupRecord and SessionRule values (see model.py)

Fault isolation:
- normalize_group / normalize_session raise on a broken record
- normalize_groups / normalize_sessions log and skip broken records,
  so one bad row never hides the rest of the calendar
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple

from loguru import logger

from trainingcal.caldate import CalendarDate, from_iso_string, is_ascii_digits
from trainingcal.errors import InvalidInput, InvalidRecord, InvalidTime, TrainingCalError, UnknownWeekday
from trainingcal.model import STATUS_ACTIVE, STATUSES, GroupRecord, SessionRule, SingleDate, Weekly


# ---------------------------------------------------------------------------
# Weekday tokens
# ---------------------------------------------------------------------------

# 0 = Sunday .. 6 = Saturday
WEEKDAY_NAMES: Dict[str, int] = {
    "sunday": 0,
    "monday": 1,
    "tuesday": 2,
    "wednesday": 3,
    "thursday": 4,
    "friday": 5,
    "saturday": 6,
    "dimanche": 0,
    "lundi": 1,
    "mardi": 2,
    "mercredi": 3,
    "jeudi": 4,
    "vendredi": 5,
    "samedi": 6,
    "sun": 0,
    "mon": 1,
    "tue": 2,
    "tues": 2,
    "wed": 3,
    "thu": 4,
    "thur": 4,
    "thurs": 4,
    "fri": 5,
    "sat": 6,
    "su": 0,
    "mo": 1,
    "tu": 2,
    "we": 3,
    "th": 4,
    "fr": 5,
    "sa": 6,
    "dim": 0,
    "lun": 1,
    "mar": 2,
    "mer": 3,
    "jeu": 4,
    "ven": 5,
    "sam": 6,
}


def parse_weekday(token: Any) -> int:
    """
    Map one weekday token to 0..6.

    Accepts English/French names and abbreviations (any case, trailing dot
    allowed) and the numbers 0..6.
    """
    if isinstance(token, bool):
        raise UnknownWeekday(f"Unknown weekday: {token!r}")
    if isinstance(token, int):
        if 0 <= token <= 6:
            return token
        raise UnknownWeekday(f"Unknown weekday: {token!r}")

    text = str(token).strip().lower().rstrip(".")
    if is_ascii_digits(text) and 0 <= int(text) <= 6:
        return int(text)
    if text in WEEKDAY_NAMES:
        return WEEKDAY_NAMES[text]
    raise UnknownWeekday(f"Unknown weekday: {token!r}")


def parse_weekdays(value: Any, record_id: str = "?") -> frozenset[int]:
    """
    Parse a weekday list or comma-joined string.

    Unknown tokens are dropped with a warning, the rest are kept.
    """
    if value is None:
        return frozenset()

    if isinstance(value, str):
        tokens: List[Any] = [t for t in value.replace(";", ",").split(",") if t.strip()]
    elif isinstance(value, (list, tuple, set, frozenset)):
        tokens = list(value)
    else:
        tokens = [value]

    days: set[int] = set()
    for token in tokens:
        try:
            days.add(parse_weekday(token))
        except UnknownWeekday:
            logger.warning(f"Session {record_id}: dropping unknown weekday {token!r}")
    return frozenset(days)


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------


def _first(raw: Dict[str, Any], *keys: str) -> Any:
    """Value of the first key that is present and not empty."""
    for key in keys:
        value = raw.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        if isinstance(value, (list, tuple, set, frozenset, dict)) and not value:
            continue
        return value
    return None


def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def normalize_id(value: Any) -> Optional[str]:
    # 7 and "7" must denote the same record
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return _opt_str(value)


def _opt_date(value: Any) -> Optional[CalendarDate]:
    if value is None:
        return None
    return from_iso_string(str(value))


def parse_time(value: Any) -> str:
    """
    Normalize a wall-clock time to 'HH:MM'.

    'HH:MM:SS' (as sent by the backend) loses its seconds; '9:00' is padded.
    """
    text = str(value or "").strip()
    parts = text.split(":")
    if len(parts) not in (2, 3) or not all(is_ascii_digits(p) for p in parts):
        raise InvalidTime(f"Invalid time format: {value!r}")
    h = int(parts[0])
    m = int(parts[1])
    if not (0 <= h <= 23 and 0 <= m <= 59):
        raise InvalidTime(f"Invalid time value: {value!r}")
    return f"{h:02d}:{m:02d}"


def _status(value: Any, record_id: str) -> str:
    if value is None or not str(value).strip():
        return STATUS_ACTIVE
    status = str(value).strip().lower()
    if status == "canceled":
        status = "cancelled"
    if status not in STATUSES:
        logger.warning(f"Session {record_id}: unknown status {value!r}, treating as {STATUS_ACTIVE!r}")
        return STATUS_ACTIVE
    return status


# ---------------------------------------------------------------------------
# Single records
# ---------------------------------------------------------------------------


def normalize_group(raw: Dict[str, Any]) -> GroupRecord:
    """
    Map one raw group object to a GroupRecord.

    startDate/endDate are authoritative; formationStartDate/formationEndDate
    and dateDebut/dateFin are only used when the primary field is absent.
    Raises InvalidRecord / InvalidDate for a record that cannot be used.
    """
    if not isinstance(raw, dict):
        raise InvalidRecord(f"Group record is not an object: {raw!r}")

    group_id = normalize_id(raw.get("id"))
    if group_id is None:
        raise InvalidRecord(f"Group record without id: {raw!r}")

    name = _opt_str(_first(raw, "name", "groupeName", "nom")) or f"Group {group_id}"

    return GroupRecord(
        id=group_id,
        name=name,
        trainer_id=normalize_id(_first(raw, "trainerId", "formateurId")),
        trainer_name=_opt_str(_first(raw, "trainerName", "formateurName")),
        formation_id=normalize_id(_first(raw, "formationId", "trainingId")),
        formation_title=_opt_str(_first(raw, "formationTitle", "trainingName")),
        period_start=_opt_date(_first(raw, "startDate", "formationStartDate", "dateDebut")),
        period_end=_opt_date(_first(raw, "endDate", "formationEndDate", "dateFin")),
    )


def normalize_session(raw: Dict[str, Any]) -> SessionRule:
    """
    Map one raw session (emploi du temps) object to a SessionRule.

    A single 'date' wins over weekday fields. A record with neither yields
    recurrence=None, which is valid and simply produces no occurrences.
    """
    if not isinstance(raw, dict):
        raise InvalidRecord(f"Session record is not an object: {raw!r}")

    session_id = normalize_id(raw.get("id"))
    if session_id is None:
        raise InvalidRecord(f"Session record without id: {raw!r}")

    group_id = normalize_id(_first(raw, "groupId", "groupeId"))
    if group_id is None:
        raise InvalidRecord(f"Session {session_id} has no group reference")

    start_time = parse_time(_first(raw, "startTime", "heureDebut"))
    end_time = parse_time(_first(raw, "endTime", "heureFin"))
    if start_time >= end_time:
        raise InvalidTime(f"Session {session_id}: start {start_time} is not before end {end_time}")

    recurrence = None
    single = _first(raw, "date")
    if single is not None:
        recurrence = SingleDate(from_iso_string(str(single)))
    else:
        weekdays = parse_weekdays(_first(raw, "days", "weekdays", "dayOfWeek", "jours"), session_id)
        if weekdays:
            recurrence = Weekly(weekdays)
        else:
            logger.warning(f"Session {session_id}: no usable recurrence, it will not appear on the calendar")

    title = _opt_str(_first(raw, "title", "sessionTitle", "formationTitle")) or "Training Session"

    return SessionRule(
        id=session_id,
        title=title,
        group_id=group_id,
        status=_status(raw.get("status"), session_id),
        recurrence=recurrence,
        start_time=start_time,
        end_time=end_time,
        period_override_start=_opt_date(_first(raw, "periodStart", "startDate")),
        period_override_end=_opt_date(_first(raw, "periodEnd", "endDate")),
        location=_opt_str(_first(raw, "location", "salle")),
    )


# ---------------------------------------------------------------------------
# Batches
# ---------------------------------------------------------------------------


def unwrap_records(payload: Any, key: str) -> List[Any]:
    """
    Extract the record list from an API payload.

    Accepted shapes:
    - [ ... ]
    - {"_embedded": {key: [ ... ]}} (or any list inside "_embedded")
    - {key: [ ... ]}
    - any object whose first list-valued field holds the records

    Raises InvalidInput when no list can be found.
    """
    if isinstance(payload, list):
        return payload

    if isinstance(payload, dict):
        embedded = payload.get("_embedded")
        if isinstance(embedded, dict):
            if isinstance(embedded.get(key), list):
                return embedded[key]
            for value in embedded.values():
                if isinstance(value, list):
                    return value
        if isinstance(payload.get(key), list):
            return payload[key]
        for value in payload.values():
            if isinstance(value, list):
                return value

    raise InvalidInput(f"Expected a list of {key}, got {type(payload).__name__}")


def _normalize_all(raw: Iterable[Any], fn, kind: str) -> List[Any]:
    out: List[Any] = []
    seen: set[str] = set()
    for item in raw:
        try:
            record = fn(item)
        except TrainingCalError as exc:
            logger.warning(f"Skipping {kind} record: {exc}")
            continue
        if record.id in seen:
            logger.warning(f"Skipping duplicate {kind} id {record.id!r}")
            continue
        seen.add(record.id)
        out.append(record)
    return out


def normalize_groups(payload: Any) -> List[GroupRecord]:
    return _normalize_all(unwrap_records(payload, "groupes"), normalize_group, "group")


def normalize_sessions(payload: Any) -> List[SessionRule]:
    return _normalize_all(unwrap_records(payload, "emplois"), normalize_session, "session")


# ---------------------------------------------------------------------------
# Filter options
# ---------------------------------------------------------------------------


def filter_options(groups: Iterable[GroupRecord]) -> Tuple[List[Tuple[str, str]], List[Tuple[str, str]]]:
    """
    Unique (id, name) trainers and (id, title) formations referenced by groups.

    Used to populate trainer/formation filter choices. Order follows first
    appearance.
    """
    trainers: Dict[str, str] = {}
    formations: Dict[str, str] = {}
    for g in groups:
        if g.trainer_id and g.trainer_name and g.trainer_id not in trainers:
            trainers[g.trainer_id] = g.trainer_name
        if g.formation_id and g.formation_title and g.formation_id not in formations:
            formations[g.formation_id] = g.formation_title
    return list(trainers.items()), list(formations.items())
