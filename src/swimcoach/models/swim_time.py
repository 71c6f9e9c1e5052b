"""Swim time model for recorded performances."""

from datetime import date

from pydantic import BaseModel, Field, computed_field, field_validator

from swimcoach.models.event import Course, Stroke


def format_milliseconds(milliseconds: int) -> str:
    """Format a millisecond count as MM:SS.cc or SS.cc.

    Sub-centisecond remainders are truncated.
    """
    total_seconds, remainder = divmod(milliseconds, 1000)
    centiseconds = remainder // 10

    if total_seconds >= 60:
        minutes, seconds = divmod(total_seconds, 60)
        return f"{minutes}:{seconds:02d}.{centiseconds:02d}"
    return f"{total_seconds}.{centiseconds:02d}"


class SwimTime(BaseModel):
    """A swimmer's timed performance for one event.

    The store keeps the first row imported for each
    (swimmer_id, stroke, distance, course, time_ms) key.
    """

    swimmer_id: str
    stroke: Stroke
    distance: int = Field(gt=0)
    course: Course
    time_ms: int = Field(ge=0)
    swim_date: date | None = None

    @field_validator("stroke")
    @classmethod
    def reject_unknown_stroke(cls, v: Stroke) -> Stroke:
        if not v.is_known:
            raise ValueError("Stroke is not recognized")
        return v

    @computed_field
    @property
    def time_formatted(self) -> str:
        """Format time as MM:SS.cc or SS.cc."""
        return format_milliseconds(self.time_ms)

    @property
    def key(self) -> tuple[str, Stroke, int, Course, int]:
        """Uniqueness key enforced by the store."""
        return (self.swimmer_id, self.stroke, self.distance, self.course, self.time_ms)

    def __str__(self) -> str:
        return f"{self.distance} {self.stroke.value.title()} {self.course.value}: {self.time_formatted}"
