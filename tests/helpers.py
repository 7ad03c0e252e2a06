"""
Small builders shared by the test modules.
"""

from __future__ import annotations

from trainingcal.caldate import from_iso_string
from trainingcal.model import GroupRecord, SessionRule, SingleDate, Weekly


def d(s: str):
    return from_iso_string(s)


def group(gid: str = "1", start: str | None = None, end: str | None = None, **kw) -> GroupRecord:
    return GroupRecord(
        id=gid,
        name=kw.pop("name", f"Group {gid}"),
        period_start=d(start) if start else None,
        period_end=d(end) if end else None,
        **kw,
    )


def weekly(sid: str, days, group_id: str = "1", start: str | None = None, end: str | None = None, **kw) -> SessionRule:
    return SessionRule(
        id=sid,
        title=kw.pop("title", f"Session {sid}"),
        group_id=group_id,
        status=kw.pop("status", "active"),
        recurrence=Weekly(frozenset(days)),
        start_time=kw.pop("start_time", "09:00"),
        end_time=kw.pop("end_time", "12:00"),
        period_override_start=d(start) if start else None,
        period_override_end=d(end) if end else None,
        **kw,
    )


def single(sid: str, date: str, group_id: str = "1", **kw) -> SessionRule:
    return SessionRule(
        id=sid,
        title=kw.pop("title", f"Session {sid}"),
        group_id=group_id,
        status=kw.pop("status", "active"),
        recurrence=SingleDate(d(date)),
        start_time=kw.pop("start_time", "09:00"),
        end_time=kw.pop("end_time", "12:00"),
        **kw,
    )
