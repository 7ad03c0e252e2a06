"""
Terminal rendering of the calendar views (rich tables).

- month_table: the month grid, one cell per day with its sessions
- occurrences_table: the flat list view
"""

from __future__ import annotations

from typing import Dict, Iterable, List

from rich import box
from rich.markup import escape
from rich.table import Table

from trainingcal.aggregate import month_grid, occurrences_on
from trainingcal.caldate import CalendarDate, to_iso_string
from trainingcal.model import STATUS_ACTIVE, STATUS_CANCELLED, STATUS_COMPLETED, STATUS_PENDING, Occurrence


STATUS_STYLES = {
    STATUS_ACTIVE: "green",
    STATUS_COMPLETED: "blue",
    STATUS_PENDING: "yellow",
    STATUS_CANCELLED: "red strike",
}

# Indexed by weekday number (0 = Sunday)
WEEKDAY_SHORT = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]


def _styled(occ: Occurrence, text: str) -> str:
    style = STATUS_STYLES.get(occ.status, "white")
    return f"[{style}]{escape(text)}[/]"


def _cell(date: CalendarDate, day: List[Occurrence]) -> str:
    lines = [f"[bold]{date.day}[/]"]
    for occ in day:
        lines.append(_styled(occ, f"{occ.start_time} {occ.group_name}"))
    return "\n".join(lines)


def month_table(
    year: int,
    month: int,
    index: Dict[CalendarDate, List[Occurrence]],
    first_weekday: int = 1,
) -> Table:
    """
    Month grid. first_weekday: 0 = weeks start on Sunday, 1 = on Monday.
    """
    table = Table(title=f"{MONTH_NAMES[month - 1]} {year}", box=box.SIMPLE, show_lines=True)
    for i in range(7):
        table.add_column(WEEKDAY_SHORT[(first_weekday + i) % 7], vertical="top")

    for week in month_grid(year, month, first_weekday):
        row = []
        for date in week:
            row.append("" if date is None else _cell(date, occurrences_on(index, date)))
        table.add_row(*row)

    return table


def occurrences_table(occurrences: Iterable[Occurrence], title: str = "Sessions") -> Table:
    table = Table(title=title, box=box.SIMPLE)
    table.add_column("Date")
    table.add_column("Time")
    table.add_column("Session")
    table.add_column("Group")
    table.add_column("Trainer")
    table.add_column("Location")
    table.add_column("Status")

    for occ in occurrences:
        table.add_row(
            f"{WEEKDAY_SHORT[occ.weekday]} {to_iso_string(occ.date)}",
            f"{occ.start_time}-{occ.end_time}",
            escape(occ.title),
            escape(occ.group_name),
            escape(occ.trainer_name or "-"),
            escape(occ.location or "-"),
            _styled(occ, occ.status),
        )

    return table
