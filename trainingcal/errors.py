"""
Error kinds raised by the calendar engine.

Only structurally invalid input reaches the caller. Per-record problems
(bad dates, unknown weekdays, ...) are caught by the batch normalizers,
logged, and the offending record or token is skipped.
"""

from __future__ import annotations


class TrainingCalError(Exception):
    """Base class for all trainingcal errors."""


class InvalidDate(TrainingCalError, ValueError):
    """A date string or date triple does not denote a valid calendar date."""


class InvalidTime(TrainingCalError, ValueError):
    """A wall-clock time is not 'HH:MM' or the range is not start < end."""


class UnknownWeekday(TrainingCalError, ValueError):
    """A weekday token could not be mapped to 0..6."""


class InvalidRecord(TrainingCalError, ValueError):
    """A raw group/session record is missing a required field."""


class InvalidInput(TrainingCalError, TypeError):
    """Top-level input has the wrong structure (e.g. not a list)."""
