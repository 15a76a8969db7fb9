from datetime import datetime, timedelta, timezone

from run_import.exceptions import ParseError

DATE_RANGE_SEPARATOR = " - "


def date_range_to_timestamp(date_range: str) -> int:
    """
    Parse a timestamp from the start date of a date range.

    The export writes local wall-clock times without a zone. The start side is
    read literally as UTC, so the result does not depend on the host timezone.

    Args:
        date_range (str): Start and end date, eg. "2021-07-10 09:05:06 - 2021-07-10 10:10:43"

    Returns:
        int: Epoch seconds of the start date, eg. 1625907906

    Raises:
        ParseError: If the range does not have exactly two sides or the start is not a date-time.
    """
    sides = date_range.split(DATE_RANGE_SEPARATOR)
    if len(sides) != 2:
        raise ParseError(f"Expected '<start>{DATE_RANGE_SEPARATOR}<end>', got {date_range!r}")

    start = sides[0].strip()
    if "T" not in start and " " not in start:
        raise ParseError(f"Start {start!r} has no time")
    try:
        parsed = datetime.fromisoformat(start)
    except ValueError as e:
        raise ParseError(f"Invalid start date {start!r}") from e

    # Any offset in the string is dropped, the wall-clock time is kept
    return int(parsed.replace(tzinfo=timezone.utc).timestamp())


def day_start(timestamp: int) -> datetime:
    moment = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def day_end(timestamp: int) -> datetime:
    return day_start(timestamp) + timedelta(days=1) - timedelta(milliseconds=1)
