"""Utilities for parsing swim times, strokes, dates and event descriptions."""

import re
from datetime import date, datetime

from swimcoach.exceptions import DateFormatError, EventFormatError, TimeFormatError
from swimcoach.models.event import Stroke

# Stroke codes as written by the entries export and the results report.
# Matching is case-sensitive.
STROKE_CODES: dict[str, Stroke] = {
    # Freestyle
    "Fr": Stroke.FREESTYLE,
    "Free": Stroke.FREESTYLE,
    # Backstroke
    "Bk": Stroke.BACKSTROKE,
    "Back": Stroke.BACKSTROKE,
    # Breaststroke
    "Br": Stroke.BREASTSTROKE,
    "Breast": Stroke.BREASTSTROKE,
    # Butterfly
    "FL": Stroke.BUTTERFLY,
    "Fly": Stroke.BUTTERFLY,
    # Individual Medley
    "IM": Stroke.MEDLEY,
    "I.M": Stroke.MEDLEY,
}

# Dates in entries files look like "Mar-01-24"
ENTRY_DATE_FORMAT = "%b-%d-%y"

# Clock times keep at most this many characters; anything after is an annotation
TIME_FIELD_WIDTH = 8

# Matches MM:SS.cc or SS.cc
TIME_PATTERN_MINUTES = re.compile(r"^(\d+):(\d{1,2})\.(\d{1,2})$")
TIME_PATTERN_SECONDS = re.compile(r"^(\d+)\.(\d{1,2})$")


def normalize_stroke(code: str) -> Stroke:
    """Map a source stroke code to a Stroke.

    Never raises; unrecognized codes map to Stroke.UNKNOWN.
    """
    return STROKE_CODES.get(code.strip(), Stroke.UNKNOWN)


def parse_time_string(time_str: str) -> int:
    """Parse a clock time string into milliseconds.

    Supports formats:
    - "" -> 0
    - "59.45" -> 59450
    - "01:02.34" -> 62340
    - "12:34.5" -> 754500 (one digit is tenths)

    Args:
        time_str: Time string in MM:SS.cc or SS.cc format, suffix already removed

    Returns:
        Time in milliseconds

    Raises:
        TimeFormatError: If any numeric segment is malformed
    """
    text = time_str.strip()
    if not text:
        return 0

    match = TIME_PATTERN_MINUTES.match(text)
    if match:
        minutes = int(match.group(1))
        seconds = int(match.group(2))
        fraction = match.group(3)
    else:
        match = TIME_PATTERN_SECONDS.match(text)
        if not match:
            raise TimeFormatError(time_str)
        minutes = 0
        seconds = int(match.group(1))
        fraction = match.group(2)

    if seconds >= 60:
        raise TimeFormatError(time_str)

    # One digit after the point is tenths
    centiseconds = int(fraction) * 10 if len(fraction) == 1 else int(fraction)
    return minutes * 60_000 + seconds * 1_000 + centiseconds * 10


def truncate_time_field(raw: str) -> str:
    """Keep the clock part of a time field, dropping trailing annotations."""
    return raw.strip()[:TIME_FIELD_WIDTH]


def parse_entry_date(text: str, row_number: int | None = None) -> date:
    """Parse a Mon-DD-YY date such as "Jan-02-00".

    Args:
        text: Date text
        row_number: Source row, carried into the error

    Returns:
        The calendar date

    Raises:
        DateFormatError: If the text does not match the format
    """
    try:
        return datetime.strptime(text.strip(), ENTRY_DATE_FORMAT).date()
    except ValueError as e:
        raise DateFormatError(text, row_number) from e


def _parse_distance(token: str, descriptor: str, row_number: int | None) -> int:
    try:
        distance = int(token)
    except ValueError as e:
        raise EventFormatError(
            f"Invalid distance: '{token}' in '{descriptor}'", descriptor, row_number
        ) from e
    if distance <= 0:
        raise EventFormatError(
            f"Invalid distance: {distance} in '{descriptor}'", descriptor, row_number
        )
    return distance


def parse_event_descriptor(
    descriptor: str, row_number: int | None = None
) -> tuple[int, Stroke]:
    """Parse an entries event column like "100 Free" into distance and stroke.

    The first whitespace token is the distance, the last is the stroke code.

    Raises:
        EventFormatError: If the distance is missing or not a positive integer
    """
    parts = descriptor.split()
    if len(parts) < 2:
        raise EventFormatError(
            f"Invalid event: '{descriptor}'. Expected '<distance> <stroke>'",
            descriptor,
            row_number,
        )
    distance = _parse_distance(parts[0], descriptor, row_number)
    return distance, normalize_stroke(parts[-1])


def parse_result_event(descriptor: str) -> tuple[str, int, Stroke]:
    """Parse a results event cell like "M 100 Free" into gender, distance, stroke.

    Raises:
        EventFormatError: If the distance is missing or not a positive integer
    """
    parts = descriptor.split()
    if len(parts) < 3:
        raise EventFormatError(
            f"Invalid event: '{descriptor}'. Expected '<gender> <distance> <stroke>'",
            descriptor,
        )
    distance = _parse_distance(parts[1], descriptor, None)
    return parts[0].upper(), distance, normalize_stroke(parts[-1])

