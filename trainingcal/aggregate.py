"""
Calendar aggregation: day index and month grid for the month view.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from trainingcal.caldate import CalendarDate, days_in_month, weekday_of
from trainingcal.model import Occurrence


def build_index(occurrences: Iterable[Occurrence]) -> Dict[CalendarDate, List[Occurrence]]:
    """
    Group occurrences by date. Each day is ordered by start time.

    Always build a fresh index when the occurrence set changes.
    """
    index: Dict[CalendarDate, List[Occurrence]] = defaultdict(list)
    for occ in occurrences:
        index[occ.date].append(occ)

    for day in index.values():
        day.sort(key=Occurrence.sort_key)

    return dict(index)


def occurrences_on(index: Dict[CalendarDate, List[Occurrence]], date: CalendarDate) -> List[Occurrence]:
    return list(index.get(date, []))


def month_grid(year: int, month: int, first_weekday: int = 0) -> List[List[Optional[CalendarDate]]]:
    """
    Week rows of a month, padded with None before the 1st and after the last day.

    first_weekday uses the same numbering as the rest of the engine
    (0 = Sunday, 1 = Monday).
    """
    first = CalendarDate(year, month, 1)
    lead = (weekday_of(first) - first_weekday) % 7

    cells: List[Optional[CalendarDate]] = [None] * lead
    cells.extend(CalendarDate(year, month, d) for d in range(1, days_in_month(year, month) + 1))
    cells.extend([None] * (-len(cells) % 7))

    return [cells[i : i + 7] for i in range(0, len(cells), 7)]
