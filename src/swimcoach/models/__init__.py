"""Pydantic models for the meet import pipeline."""

from swimcoach.models.entries_load import SWIMMER_ID_SEPARATOR, EntriesLoad
from swimcoach.models.event import Course, Stroke
from swimcoach.models.swim_time import SwimTime, format_milliseconds
from swimcoach.models.swimmer import Gender, Swimmer

__all__ = [
    # Audit
    "EntriesLoad",
    "SWIMMER_ID_SEPARATOR",
    # Event
    "Course",
    "Stroke",
    # Swim Time
    "SwimTime",
    "format_milliseconds",
    # Swimmer
    "Gender",
    "Swimmer",
]
