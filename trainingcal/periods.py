"""
Effective period resolution.

A session may only produce occurrences inside the validity window of its
group (the formation period), further narrowed by the session's own
optional override. Either side may set only one bound.
"""

from __future__ import annotations

from typing import Optional

from loguru import logger

from trainingcal.caldate import Period, intersect
from trainingcal.model import GroupRecord, SessionRule


def group_period(group: Optional[GroupRecord]) -> Period:
    if group is None:
        return Period()
    return Period(group.period_start, group.period_end)


def session_period(session: SessionRule) -> Period:
    return Period(session.period_override_start, session.period_override_end)


def resolve_period(session: SessionRule, group: Optional[GroupRecord]) -> Optional[Period]:
    """
    Intersect the group's period with the session override.

    Returns None when the intersection is empty (e.g. a group whose end was
    edited to lie before its start). Missing periods on both sides give an
    unbounded Period; the query range then bounds the expansion.
    """
    base = group_period(group)

    # A group with start > end is already empty on its own
    if base.is_empty:
        logger.debug(f"Session {session.id}: group period {base.start}..{base.end} is empty")
        return None

    period = intersect(base, session_period(session))
    if period is None:
        logger.debug(f"Session {session.id}: effective period is empty")
    return period
