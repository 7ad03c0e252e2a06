"""
iCalendar (.ics) export.

We convert occurrences into a calendar file that can be imported into
Google Calendar, Outlook or Apple Calendar.

Times are written as floating local times (no 'Z', no TZID): the engine
only knows wall-clock times and the importing calendar places them in
its own timezone.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from trainingcal.caldate import to_iso_string
from trainingcal.model import STATUS_CANCELLED, Occurrence


def _ics_escape(text: str) -> str:
    """
    Escape text for ICS fields (very small subset, sufficient for our use).
    """
    return (
        text.replace("\\", "\\\\").replace("\r\n", "\\n").replace("\n", "\\n").replace(";", "\\;").replace(",", "\\,")
    )


def _dt_local(occ: Occurrence, time_hh_mm: str) -> str:
    """
    Occurrence date + 'HH:MM' as ICS local datetime 'YYYYMMDDTHHMM00'.
    """
    return to_iso_string(occ.date).replace("-", "") + "T" + time_hh_mm.replace(":", "") + "00"


def _summary(occ: Occurrence) -> str:
    return f"{occ.title} - {occ.group_name}" if occ.group_name else occ.title


def _description(occ: Occurrence) -> str:
    lines = []
    if occ.formation_title:
        lines.append(f"Formation: {occ.formation_title}")
    if occ.trainer_name:
        lines.append(f"Trainer: {occ.trainer_name}")
    lines.append(f"Status: {occ.status}")
    return "\n".join(lines)


def export_occurrences_to_ics(occurrences: Iterable[Occurrence], out_path: str | Path) -> int:
    """
    Export occurrences to an .ics file. Returns number of exported events.
    """
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    dtstamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")

    lines: list[str] = []
    lines.append("BEGIN:VCALENDAR")
    lines.append("VERSION:2.0")
    lines.append("PRODID:-//trainingcal//EN")
    lines.append("CALSCALE:GREGORIAN")

    count = 0
    for occ in occurrences:
        lines.append("BEGIN:VEVENT")
        lines.append(f"UID:{_ics_escape(occ.id)}")
        lines.append(f"DTSTAMP:{dtstamp}")
        lines.append(f"DTSTART:{_dt_local(occ, occ.start_time)}")
        lines.append(f"DTEND:{_dt_local(occ, occ.end_time)}")
        lines.append(f"SUMMARY:{_ics_escape(_summary(occ))}")
        if occ.location:
            lines.append(f"LOCATION:{_ics_escape(occ.location)}")
        lines.append(f"DESCRIPTION:{_ics_escape(_description(occ))}")
        if occ.status == STATUS_CANCELLED:
            lines.append("STATUS:CANCELLED")
        lines.append("END:VEVENT")
        count += 1

    lines.append("END:VCALENDAR")

    # ICS standard uses CRLF
    out.write_text("\r\n".join(lines) + "\r\n", encoding="utf-8")
    return count
