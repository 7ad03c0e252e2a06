"""
CLI (Command Line Interface).

Terminal access to the training calendar, e.g.:

    trainingcal fetch
    trainingcal month 2025-01 --trainer 3
    trainingcal list --week 2025-01-08 --text workshop
    trainingcal day 2025-02-14
    trainingcal options
    trainingcal export january.ics --month 2025-01

Note:
- fetch downloads the raw API data into local snapshots
- every other command works offline on those snapshots
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional, Tuple

import requests
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from trainingcal.aggregate import build_index
from trainingcal.caldate import Period, day_range, from_iso_string, month_range, parse_month, today, week_range
from trainingcal.config import Settings, load_settings
from trainingcal.errors import TrainingCalError
from trainingcal.expand import expand_all
from trainingcal.export_ics import export_occurrences_to_ics
from trainingcal.fetch import fetch_all
from trainingcal.filters import FilterCriteria, filter_occurrences
from trainingcal.logging_utils import setup_logger
from trainingcal.model import STATUSES, GroupRecord, Occurrence
from trainingcal.normalize import filter_options, normalize_groups, normalize_sessions
from trainingcal.render import month_table, occurrences_table
from trainingcal.storage import GROUPS_FILE, SESSIONS_FILE, load_snapshot


console = Console()


def _load_groups(settings: Settings) -> List[GroupRecord]:
    return normalize_groups(load_snapshot(GROUPS_FILE, settings.data_dir))


def _load_occurrences(settings: Settings, query_range: Period) -> List[Occurrence]:
    """
    Normalize the local snapshots and expand them for one query range.
    """
    groups = _load_groups(settings)
    sessions = normalize_sessions(load_snapshot(SESSIONS_FILE, settings.data_dir))
    return expand_all(groups, sessions, query_range)


def _criteria(args: argparse.Namespace, period: Optional[Period] = None) -> FilterCriteria:
    return FilterCriteria(
        group_id=args.group,
        trainer_id=args.trainer,
        formation_id=args.formation,
        period=period,
        text=args.text,
        status=args.status,
    )


def _query_range(args: argparse.Namespace) -> Tuple[Period, str]:
    """
    Pick the query range of a list/export command. Defaults to this month.
    """
    if (args.start or args.end) and (args.today or args.week or args.month):
        raise TrainingCalError("--start/--end cannot be combined with --today, --week or --month.")
    if args.today:
        d = today()
        return day_range(d), f"Today ({d})"
    if args.week:
        period = week_range(from_iso_string(args.week))
        return period, f"Week {period.start} - {period.end}"
    if args.start or args.end:
        if not (args.start and args.end):
            raise TrainingCalError("Please provide both --start and --end.")
        period = Period(from_iso_string(args.start), from_iso_string(args.end))
        if period.is_empty:
            raise TrainingCalError("--start must not be after --end.")
        return period, f"{period.start} - {period.end}"

    if args.month:
        year, month = parse_month(args.month)
    else:
        t = today()
        year, month = t.year, t.month
    return month_range(year, month), f"{year:04d}-{month:02d}"


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _cmd_fetch(args: argparse.Namespace, settings: Settings) -> int:
    """
    Download groups and sessions and store them as snapshots.
    """
    n_groups, n_sessions = fetch_all(settings, trainer_id=args.trainer)
    console.print(f"Fetched {n_groups} groups and {n_sessions} sessions into {settings.data_dir}")
    return 0


def _cmd_month(args: argparse.Namespace, settings: Settings) -> int:
    """
    Render the month grid.
    """
    if args.month:
        year, month = parse_month(args.month)
    else:
        t = today()
        year, month = t.year, t.month

    occurrences = _load_occurrences(settings, month_range(year, month))
    index = build_index(filter_occurrences(occurrences, _criteria(args)))

    console.print(month_table(year, month, index, first_weekday=0 if args.sunday_first else 1))
    return 0


def _cmd_list(args: argparse.Namespace, settings: Settings) -> int:
    """
    Print the filtered list view for a range.
    """
    query_range, label = _query_range(args)
    occurrences = filter_occurrences(_load_occurrences(settings, query_range), _criteria(args, query_range))

    if not occurrences:
        console.print("No sessions.")
        return 0

    console.print(occurrences_table(occurrences, title=f"Sessions: {label} ({len(occurrences)})"))
    return 0


def _cmd_day(args: argparse.Namespace, settings: Settings) -> int:
    """
    Print the sessions of a single day.
    """
    d = from_iso_string(args.date) if args.date else today()
    index = build_index(filter_occurrences(_load_occurrences(settings, day_range(d)), _criteria(args)))
    day = index.get(d, [])

    if not day:
        console.print(f"No sessions on {d}.")
        return 0

    console.print(occurrences_table(day, title=f"Sessions on {d}"))
    return 0


def _cmd_options(args: argparse.Namespace, settings: Settings) -> int:
    """
    Print the values accepted by --group, --trainer and --formation.
    """
    groups = _load_groups(settings)
    trainers, formations = filter_options(groups)

    console.print("[bold]Groups[/]")
    for g in groups:
        console.print(f"  {g.id} | {g.name}")
    console.print("[bold]Trainers[/]")
    for tid, name in trainers:
        console.print(f"  {tid} | {name}")
    console.print("[bold]Formations[/]")
    for fid, title in formations:
        console.print(f"  {fid} | {title}")
    return 0


def _cmd_export(args: argparse.Namespace, settings: Settings) -> int:
    """
    Export the filtered occurrences of a range into an iCalendar (.ics) file.
    """
    out_path = (args.out or "").strip()
    if not out_path:
        console.print("Please provide output .ics path.")
        return 1

    query_range, label = _query_range(args)
    occurrences = filter_occurrences(_load_occurrences(settings, query_range), _criteria(args, query_range))

    if not occurrences:
        console.print(f"No sessions to export for {label}.")
        return 0

    n = export_occurrences_to_ics(occurrences, out_path)
    console.print(f"Exported {n} sessions to: {out_path}")
    return 0


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def _add_filters(p: argparse.ArgumentParser) -> None:
    p.add_argument("--group", type=str, help="Only this group id")
    p.add_argument("--trainer", type=str, help="Only groups of this trainer id")
    p.add_argument("--formation", type=str, help="Only groups of this formation id")
    p.add_argument("--text", type=str, help="Case-insensitive text search")
    p.add_argument("--status", type=str, choices=STATUSES, help="Only sessions with this status")


def _add_range(p: argparse.ArgumentParser) -> None:
    g = p.add_mutually_exclusive_group()
    g.add_argument("--today", action="store_true", help="Only today")
    g.add_argument("--week", type=str, metavar="YYYY-MM-DD", help="The Monday-Sunday week containing this date")
    g.add_argument("--month", type=str, metavar="YYYY-MM", help="A whole month (default: current month)")
    p.add_argument("--start", type=str, metavar="YYYY-MM-DD", help="Explicit range start")
    p.add_argument("--end", type=str, metavar="YYYY-MM-DD", help="Explicit range end")


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="trainingcal", description="Training calendar CLI")
    parser.add_argument("--data-dir", type=Path, help="Snapshot directory (default: TRAININGCAL_DATA_DIR)")
    parser.add_argument("--api-url", type=str, help="API base URL (default: TRAININGCAL_API_URL)")
    parser.add_argument("--log-level", type=str, help="DEBUG, INFO, WARNING, ERROR")
    parser.add_argument("--log-file", type=Path, help="Also write logs to this file")
    sub = parser.add_subparsers(dest="command", required=True)

    p_fetch = sub.add_parser("fetch", help="Download groups and sessions from the API")
    p_fetch.add_argument("--trainer", type=str, help="Only fetch the groups of this trainer id")

    p_month = sub.add_parser("month", help="Show the month grid")
    p_month.add_argument("month", type=str, nargs="?", metavar="YYYY-MM", help="Month (default: current)")
    p_month.add_argument("--sunday-first", action="store_true", help="Start weeks on Sunday")
    _add_filters(p_month)

    p_list = sub.add_parser("list", help="List sessions of a range")
    _add_range(p_list)
    _add_filters(p_list)

    p_day = sub.add_parser("day", help="List sessions of one day")
    p_day.add_argument("date", type=str, nargs="?", metavar="YYYY-MM-DD", help="Day (default: today)")
    _add_filters(p_day)

    sub.add_parser("options", help="Show known groups, trainers and formations")

    p_export = sub.add_parser("export", help="Export sessions of a range to .ics")
    p_export.add_argument("out", type=str, help="Output file path (e.g. out.ics)")
    _add_range(p_export)
    _add_filters(p_export)

    return parser


COMMANDS = {
    "fetch": _cmd_fetch,
    "month": _cmd_month,
    "list": _cmd_list,
    "day": _cmd_day,
    "options": _cmd_options,
    "export": _cmd_export,
}


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings()
    except ValidationError as exc:
        console.print(f"[red]Invalid TRAININGCAL_* setting:[/] {escape(str(exc))}")
        raise SystemExit(1)
    overrides = {}
    if args.data_dir is not None:
        overrides["data_dir"] = args.data_dir
    if args.api_url:
        overrides["api_url"] = args.api_url.rstrip("/")
    if args.log_level:
        overrides["log_level"] = args.log_level.upper()
    if overrides:
        settings = settings.model_copy(update=overrides)

    setup_logger(settings.log_level, args.log_file)

    handler = COMMANDS.get(args.command)
    if handler is None:
        raise SystemExit(2)

    try:
        raise SystemExit(handler(args, settings))
    except TrainingCalError as exc:
        console.print(f"[red]Error:[/] {exc}")
        raise SystemExit(1)
    except requests.RequestException as exc:
        console.print(f"[red]API request failed:[/] {exc}")
        raise SystemExit(1)
