"""
Date and time-of-day conversion for the schedule API.

The backend stores dates as YYYY-MM-DD and times as HH:MM:SS. The UI only
collects minutes, so outgoing times always carry ":00" seconds, while
incoming times may or may not include seconds.
"""

from datetime import date, datetime, time
from typing import Callable

from quickplan.core.exceptions import DataIntegrityError, TimeParseError

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT_WITH_SECONDS = "%H:%M:%S"
TIME_FORMAT_WITHOUT_SECONDS = "%H:%M"


def _strptime_time(fmt: str) -> Callable[[str], time]:
    def parse(value: str) -> time:
        return datetime.strptime(value, fmt).time()

    return parse


# Tried in order; the first one that parses wins.
TIME_PARSERS: list[Callable[[str], time]] = [
    _strptime_time(TIME_FORMAT_WITH_SECONDS),
    _strptime_time(TIME_FORMAT_WITHOUT_SECONDS),
    time.fromisoformat,
]


def format_date(value: date) -> str:
    """Format a date as YYYY-MM-DD."""
    return value.strftime(DATE_FORMAT)


def format_time(value: time) -> str:
    """
    Format a time of day as HH:MM:SS.

    Sub-second precision is dropped.
    """
    return value.replace(microsecond=0).strftime(TIME_FORMAT_WITH_SECONDS)


def parse_date(value: str) -> date:
    """
    Parse a YYYY-MM-DD date.

    Raises:
        DataIntegrityError: If the value is not a valid date
    """
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except (TypeError, ValueError) as e:
        raise DataIntegrityError(f"Unparsable date value: {value!r}") from e


def parse_time(value: str) -> time:
    """
    Parse a time of day sent by the backend.

    Accepts HH:MM:SS, then HH:MM, then any ISO 8601 time.

    Raises:
        TimeParseError: If no format matches
    """
    for parser in TIME_PARSERS:
        try:
            return parser(value)
        except (TypeError, ValueError):
            continue
    raise TimeParseError(value, attempts=len(TIME_PARSERS))
