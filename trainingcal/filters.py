"""
List-view filtering.

All given criteria are combined with AND; a criterion left as None imposes
no constraint. The text criterion is a case-insensitive substring match
against title, group, trainer, formation and location.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

from trainingcal.caldate import Period, is_within
from trainingcal.model import Occurrence
from trainingcal.normalize import normalize_id


@dataclass(frozen=True)
class FilterCriteria:
    group_id: Optional[Any] = None
    trainer_id: Optional[Any] = None
    formation_id: Optional[Any] = None
    period: Optional[Period] = None
    text: Optional[str] = None
    status: Optional[str] = None


def _same_id(expected: Any, actual: Optional[str]) -> bool:
    return actual is not None and normalize_id(expected) == actual


def _haystack(occ: Occurrence) -> str:
    fields = (occ.title, occ.group_name, occ.trainer_name, occ.formation_title, occ.location)
    return " ".join(f for f in fields if f).lower()


def matches(occ: Occurrence, criteria: FilterCriteria) -> bool:
    if criteria.group_id is not None and not _same_id(criteria.group_id, occ.group_id):
        return False
    if criteria.trainer_id is not None and not _same_id(criteria.trainer_id, occ.trainer_id):
        return False
    if criteria.formation_id is not None and not _same_id(criteria.formation_id, occ.formation_id):
        return False
    if criteria.period is not None and not is_within(occ.date, criteria.period):
        return False
    if criteria.status is not None and occ.status != criteria.status.strip().lower():
        return False

    query = (criteria.text or "").strip().lower()
    if query and query not in _haystack(occ):
        return False

    return True


def filter_occurrences(occurrences: Iterable[Occurrence], criteria: Optional[FilterCriteria] = None) -> List[Occurrence]:
    """
    Return the matching occurrences ordered by (date, start time, id).
    """
    criteria = criteria or FilterCriteria()
    return sorted((o for o in occurrences if matches(o, criteria)), key=Occurrence.sort_key)
