"""Typed row schemas and result summaries for import operations."""

from datetime import date
from enum import StrEnum
from typing import ClassVar

from pydantic import BaseModel, computed_field

from swimcoach.exceptions import RowFormatError
from swimcoach.models.event import Course, Stroke
from swimcoach.models.swim_time import SwimTime
from swimcoach.models.swimmer import Swimmer
from swimcoach.services.event_parser import (
    parse_entry_date,
    parse_event_descriptor,
    truncate_time_field,
)

# =============================================================================
# Row schemas
# =============================================================================


class RowSchema:
    """Named, typed access to one positional source row.

    Subclasses declare ``columns`` (field name -> zero-based index). Accessors
    return stripped text; conversions raise ImportParseError subclasses that
    carry the row number.
    """

    columns: ClassVar[dict[str, int]] = {}

    def __init__(self, values: list[str], row_number: int):
        self.values = values
        self.row_number = row_number

    @classmethod
    def width(cls) -> int:
        """Minimum number of cells a row needs."""
        return max(cls.columns.values()) + 1 if cls.columns else 0

    @classmethod
    def from_values(cls, values: list[str], row_number: int):
        """Wrap a raw row, rejecting rows too short for the column contract.

        Raises:
            RowFormatError: If the row has fewer cells than the schema needs
        """
        if len(values) < cls.width():
            raise RowFormatError(
                f"Expected at least {cls.width()} columns, got {len(values)}",
                ",".join(values),
                row_number,
            )
        return cls(values, row_number)

    def get(self, field: str) -> str:
        """Get the stripped text of a named column."""
        return self.values[self.columns[field]].strip()


class CourseSlot(BaseModel):
    """One best-time slot of an entries row."""

    course: Course
    time_field: str  # Column name of the time, for error reporting
    raw_time: str
    raw_date: str

    @property
    def clock(self) -> str:
        """Time text without trailing annotations."""
        return truncate_time_field(self.raw_time)


class EntriesRow(RowSchema):
    """A row of a meet entries export."""

    columns = {
        "swimmer_id": 0,
        "full_name": 4,
        "gender": 5,
        "birth_date": 7,
        "event": 9,
        "short_time": 12,
        "short_date": 13,
        "long_time": 14,
        "long_date": 15,
    }

    @property
    def swimmer_id(self) -> str:
        return self.get("swimmer_id")

    def split_name(self) -> tuple[str, str]:
        """Split "Last First" into (first_name, last_name).

        The first token is the last name and the final token is the first
        name; tokens in between are dropped.

        Raises:
            RowFormatError: If the name has fewer than two tokens
        """
        full_name = self.get("full_name")
        parts = full_name.split()
        if len(parts) < 2:
            raise RowFormatError(
                f"Name '{full_name}' is not 'Last First'", full_name, self.row_number
            )
        return parts[-1], parts[0]

    def birth_date(self) -> date:
        """Parse the birth date column.

        Raises:
            DateFormatError: If the date is not Mon-DD-YY
        """
        return parse_entry_date(self.get("birth_date"), self.row_number)

    def to_swimmer(self) -> Swimmer:
        """Build the swimmer identity this row describes.

        Raises:
            ImportParseError: If the name or birth date cannot be parsed
            ValueError: If the id is empty or the gender is not a single letter
        """
        first_name, last_name = self.split_name()
        return Swimmer(
            id=self.swimmer_id,
            first_name=first_name,
            last_name=last_name,
            gender=self.get("gender").upper(),
            birth_date=self.birth_date(),
        )

    def event(self) -> tuple[int, Stroke]:
        """Parse the event column into distance and stroke.

        Raises:
            EventFormatError: If the distance cannot be parsed
        """
        return parse_event_descriptor(self.get("event"), self.row_number)

    def course_slots(self) -> list[CourseSlot]:
        """Best-time slots that carry a time, SHORT before LONG."""
        slots = [
            CourseSlot(
                course=Course.SHORT,
                time_field="short_time",
                raw_time=self.get("short_time"),
                raw_date=self.get("short_date"),
            ),
            CourseSlot(
                course=Course.LONG,
                time_field="long_time",
                raw_time=self.get("long_time"),
                raw_date=self.get("long_date"),
            ),
        ]
        return [slot for slot in slots if slot.raw_time]


class ResultsRow(BaseModel):
    """A table row of a results document."""

    table_index: int
    row_number: int  # 1-based, counted across the whole document
    cells: list[str]
    header_name: str | None = None  # Bold text, set on swimmer header rows

    @property
    def is_header(self) -> bool:
        return self.header_name is not None

    @property
    def lookup_name(self) -> str:
        """Name part of the header text, before the first comma."""
        return (self.header_name or "").split(",", 1)[0].strip()


class ParsedResult(BaseModel):
    """A performance read from a results document."""

    table_index: int
    row_number: int
    swimmer_id: str
    swimmer_name: str
    gender: str
    distance: int
    stroke: Stroke
    course: Course | None
    time_ms: int

    def to_swim_time(self, swim_date: date | None) -> SwimTime:
        """Build the record to store.

        Raises:
            ValueError: If the course is unset or the stroke is unknown
        """
        if self.course is None:
            raise ValueError("Course marker is not L or S")
        return SwimTime(
            swimmer_id=self.swimmer_id,
            stroke=self.stroke,
            distance=self.distance,
            course=self.course,
            time_ms=self.time_ms,
            swim_date=swim_date,
        )


# =============================================================================
# Import summaries
# =============================================================================


class Severity(StrEnum):
    """Issue severity levels."""

    ERROR = "error"
    WARNING = "warning"


class ImportSource(StrEnum):
    """Kind of file an import consumed."""

    ENTRIES = "entries"
    RESULTS = "results"


class ImportIssue(BaseModel):
    """A skipped unit or a failure during import."""

    row_number: int
    field: str
    message: str
    severity: Severity = Severity.WARNING


class ImportSummary(BaseModel):
    """Structured outcome of importing one file."""

    source: ImportSource
    file_name: str | None = None
    success: bool = True
    dry_run: bool = False

    rows_processed: int = 0
    rows_skipped: int = 0
    swimmer_ids: set[str] = set()
    times_inserted: int = 0
    times_duplicate: int = 0
    duration_ms: int = 0
    audit_recorded: bool = False

    skipped: list[ImportIssue] = []
    errors: list[ImportIssue] = []
    performances: list[ParsedResult] = []

    @computed_field
    @property
    def swimmer_count(self) -> int:
        return len(self.swimmer_ids)

    @computed_field
    @property
    def first_error(self) -> str | None:
        """Message of the first storage error, if any."""
        return self.errors[0].message if self.errors else None

    def add_skipped(
        self, row: int, field: str, message: str, whole_row: bool = False
    ) -> None:
        """Record a skipped field, slot or row (doesn't fail the import)."""
        self.skipped.append(
            ImportIssue(
                row_number=row,
                field=field,
                message=message,
                severity=Severity.WARNING,
            )
        )
        if whole_row:
            self.rows_skipped += 1

    def add_error(self, row: int, field: str, message: str) -> None:
        """Record a storage failure."""
        self.errors.append(
            ImportIssue(
                row_number=row,
                field=field,
                message=message,
                severity=Severity.ERROR,
            )
        )
        self.success = False

    def add_inserted(self, inserted: bool) -> None:
        """Count a performance write."""
        if inserted:
            self.times_inserted += 1
        else:
            self.times_duplicate += 1
