"""
Central data model definitions used across the project.

This module defines the canonical shapes that every layer shares:
- GroupRecord / SessionRule: what the normalizer produces from raw API data
- Weekly / SingleDate: the two recurrence rules a session can carry
- Occurrence: one concrete, dated instance of a session on the calendar

All records are frozen: the engine only ever builds new values.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Optional, Union

from trainingcal.caldate import CalendarDate


STATUS_ACTIVE = "active"
STATUS_COMPLETED = "completed"
STATUS_CANCELLED = "cancelled"
STATUS_PENDING = "pending"

STATUSES = (STATUS_ACTIVE, STATUS_COMPLETED, STATUS_CANCELLED, STATUS_PENDING)


@dataclass(frozen=True)
class GroupRecord:
    """
    A learner group attached to one formation (training) and one trainer.
    """

    id: str
    name: str
    trainer_id: Optional[str] = None
    trainer_name: Optional[str] = None
    formation_id: Optional[str] = None
    formation_title: Optional[str] = None
    period_start: Optional[CalendarDate] = None
    period_end: Optional[CalendarDate] = None


@dataclass(frozen=True)
class Weekly:
    """Recurs on every date whose weekday (0 = Sunday) is in the set."""

    weekdays: FrozenSet[int]

    def __post_init__(self) -> None:
        if not self.weekdays:
            raise ValueError("Weekly recurrence needs at least one weekday")
        if any(not 0 <= w <= 6 for w in self.weekdays):
            raise ValueError(f"Weekdays must be in 0..6: {sorted(self.weekdays)!r}")


@dataclass(frozen=True)
class SingleDate:
    """Occurs once, on the given date."""

    date: CalendarDate


Recurrence = Union[Weekly, SingleDate]


@dataclass(frozen=True)
class SessionRule:
    """
    A scheduled training slot of a group.

    start_time / end_time are wall-clock 'HH:MM' strings with
    start_time < end_time. recurrence is None when the upstream record
    carried no usable weekday or date; such a session yields nothing.
    """

    id: str
    title: str
    group_id: str
    status: str
    recurrence: Optional[Recurrence]
    start_time: str
    end_time: str
    period_override_start: Optional[CalendarDate] = None
    period_override_end: Optional[CalendarDate] = None
    location: Optional[str] = None


@dataclass(frozen=True)
class Occurrence:
    """
    One concrete session instance on one date.

    Display fields (group/trainer/formation) are copied from the group at
    expansion time.
    """

    id: str
    session_id: str
    group_id: str
    date: CalendarDate
    weekday: int
    start_time: str
    end_time: str
    status: str
    title: str
    group_name: str
    trainer_id: Optional[str] = None
    trainer_name: Optional[str] = None
    formation_id: Optional[str] = None
    formation_title: Optional[str] = None
    location: Optional[str] = None

    def sort_key(self) -> tuple[CalendarDate, str, str]:
        return (self.date, self.start_time, self.id)
