"""Enums describing a swimming event."""

from enum import StrEnum


class Stroke(StrEnum):
    """Swimming strokes as stored in the database."""

    FREESTYLE = "FREESTYLE"
    BACKSTROKE = "BACKSTROKE"
    BREASTSTROKE = "BREASTSTROKE"
    BUTTERFLY = "BUTTERFLY"
    MEDLEY = "MEDLEY"  # Individual Medley
    UNKNOWN = "UNKNOWN"  # Unrecognized source code, never persisted

    @property
    def is_known(self) -> bool:
        return self is not Stroke.UNKNOWN


class Course(StrEnum):
    """Pool length class of a performance."""

    SHORT = "SHORT"  # 25 m / 25 yd pools
    LONG = "LONG"  # 50 m pools
