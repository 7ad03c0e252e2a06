"""
Occurrence expansion.

Turns a SessionRule into the concrete, dated Occurrences that fall inside
both its effective period and the caller's query range (typically one
visible month).

Rules:
- Weekly sessions are scanned one calendar day at a time over the
  effective range, so boundary days are never skipped or duplicated
- SingleDate sessions yield at most one occurrence
- Occurrence ids are '<sessionId>__<YYYY-MM-DD>', stable across calls
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from loguru import logger

from trainingcal.caldate import CalendarDate, Period, intersect, is_within, iter_days, to_iso_string, weekday_of
from trainingcal.errors import InvalidInput, TrainingCalError
from trainingcal.model import GroupRecord, Occurrence, SessionRule, SingleDate, Weekly
from trainingcal.periods import resolve_period


UNKNOWN_GROUP = "Unknown Group"


def identify(session: SessionRule, date: CalendarDate) -> str:
    return f"{session.id}__{to_iso_string(date)}"


def _occurrence(session: SessionRule, date: CalendarDate, group: Optional[GroupRecord]) -> Occurrence:
    return Occurrence(
        id=identify(session, date),
        session_id=session.id,
        group_id=session.group_id,
        date=date,
        weekday=weekday_of(date),
        start_time=session.start_time,
        end_time=session.end_time,
        status=session.status,
        title=session.title,
        group_name=group.name if group else UNKNOWN_GROUP,
        trainer_id=group.trainer_id if group else None,
        trainer_name=group.trainer_name if group else None,
        formation_id=group.formation_id if group else None,
        formation_title=group.formation_title if group else None,
        location=session.location,
    )


def expand(
    session: SessionRule,
    period: Optional[Period],
    query_range: Period,
    group: Optional[GroupRecord] = None,
) -> List[Occurrence]:
    """
    Materialize the occurrences of one session inside query_range.

    period is the session's effective period (None = empty). query_range
    must be bounded on both ends.
    """
    if not query_range.is_bounded:
        raise InvalidInput("Query range needs both a start and an end date")

    if period is None or session.recurrence is None:
        return []

    effective = intersect(period, query_range)
    if effective is None:
        return []

    rule = session.recurrence
    if isinstance(rule, SingleDate):
        if is_within(rule.date, effective):
            return [_occurrence(session, rule.date, group)]
        return []

    if isinstance(rule, Weekly):
        return [_occurrence(session, d, group) for d in iter_days(effective) if weekday_of(d) in rule.weekdays]

    raise InvalidInput(f"Unsupported recurrence: {rule!r}")


def expand_all(
    groups: Iterable[GroupRecord],
    sessions: Iterable[SessionRule],
    query_range: Period,
) -> List[Occurrence]:
    """
    Expand a whole snapshot of groups and sessions for one query range.

    Sessions whose group is not in the snapshot are skipped, since an
    occurrence must belong to exactly one group. A failure in one session
    is logged and does not affect the others. Output is ordered by
    (date, start time, id) with duplicate ids removed.
    """
    if not query_range.is_bounded:
        raise InvalidInput("Query range needs both a start and an end date")

    group_by_id: Dict[str, GroupRecord] = {g.id: g for g in groups}

    out: Dict[str, Occurrence] = {}
    for session in sessions:
        group = group_by_id.get(session.group_id)
        if group is None:
            logger.warning(f"Session {session.id}: unknown group {session.group_id!r}, skipped")
            continue

        try:
            occurrences = expand(session, resolve_period(session, group), query_range, group)
        except TrainingCalError as exc:
            logger.warning(f"Session {session.id}: expansion failed: {exc}")
            continue

        for occ in occurrences:
            out.setdefault(occ.id, occ)

    return sorted(out.values(), key=Occurrence.sort_key)
