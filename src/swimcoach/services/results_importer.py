"""Imports meet results reports rendered as HTML tables."""

import re
import time
from collections.abc import Iterator
from datetime import date
from pathlib import Path

from bs4 import BeautifulSoup

from swimcoach.dao.swim_time_dao import SwimTimeDAO
from swimcoach.dao.swimmer_dao import SwimmerDAO
from swimcoach.exceptions import (
    ImportParseError,
    RowFormatError,
    StorageError,
    SwimmerNotFoundError,
    TimeFormatError,
)
from swimcoach.logging import bound_context, get_logger
from swimcoach.models.event import Course
from swimcoach.models.swimmer import Swimmer
from swimcoach.services.event_parser import (
    TIME_FIELD_WIDTH,
    parse_result_event,
    parse_time_string,
)
from swimcoach.services.import_schemas import (
    ImportSource,
    ImportSummary,
    ParsedResult,
    ResultsRow,
)

logger = get_logger(__name__)

# Result time cell: "01:23.45L" (MM:SS.cc followed by a one-character course marker)
RESULT_TIME_PATTERN = re.compile(r"^[0-5]\d:[0-5]\d\.\d{2}\S$")

COURSE_MARKERS: dict[str, Course] = {
    "L": Course.LONG,
    "S": Course.SHORT,
}

TIME_CELL = 0
EVENT_CELL = 2


def parse_results_document(html: str | bytes) -> Iterator[ResultsRow]:
    """Yield the rows of every table in a results document, in document order.

    Rows of nested tables belong to the nested table only. A row whose own
    cells contain bold text is a swimmer header (bold text inside a nested
    table does not count); the bold text is kept as ``header_name``.
    """
    soup = BeautifulSoup(html, "html.parser")
    row_number = 0

    for table_index, table in enumerate(soup.find_all("table"), start=1):
        for tr in table.find_all("tr"):
            if tr.find_parent("table") is not table:
                continue
            row_number += 1

            cells = [td for td in tr.find_all("td") if td.find_parent("tr") is tr]
            bold = next(
                (b for td in cells for b in td.find_all("b") if b.find_parent("td") is td),
                None,
            )

            yield ResultsRow(
                table_index=table_index,
                row_number=row_number,
                cells=[td.get_text(" ", strip=True) for td in cells],
                header_name=bold.get_text(" ", strip=True) if bold is not None else None,
            )


def parse_result_row(row: ResultsRow, swimmer: Swimmer) -> ParsedResult:
    """Read one data row for the current swimmer.

    Args:
        row: A non-header row
        swimmer: The swimmer named by the last header row

    Returns:
        The parsed performance; course is None when the marker is not L/S

    Raises:
        TimeFormatError: Cell 0 is not a result time
        EventFormatError: Cell 2 has no valid distance
        RowFormatError: The row has no event cell
    """
    clock = row.cells[TIME_CELL] if row.cells else ""
    if not RESULT_TIME_PATTERN.match(clock):
        raise TimeFormatError(clock, row.row_number)
    time_ms = parse_time_string(clock[:TIME_FIELD_WIDTH])
    course = COURSE_MARKERS.get(clock[TIME_FIELD_WIDTH:])

    if len(row.cells) <= EVENT_CELL:
        raise RowFormatError("Missing event cell", " | ".join(row.cells), row.row_number)
    gender, distance, stroke = parse_result_event(row.cells[EVENT_CELL])

    return ParsedResult(
        table_index=row.table_index,
        row_number=row.row_number,
        swimmer_id=swimmer.id,
        swimmer_name=swimmer.full_name,
        gender=gender,
        distance=distance,
        stroke=stroke,
        course=course,
        time_ms=time_ms,
    )


class ResultsImporter:
    """Walks results tables, resolving swimmer headers and storing their times."""

    def __init__(self, swimmer_dao: SwimmerDAO, swim_time_dao: SwimTimeDAO):
        self.swimmer_dao = swimmer_dao
        self.swim_time_dao = swim_time_dao

    async def import_path(
        self,
        html_path: Path,
        meet_date: date | None = None,
        dry_run: bool = False,
    ) -> ImportSummary:
        """Import a results document from disk."""
        return await self.import_document(
            html_path.read_bytes(),
            file_name=html_path.name,
            meet_date=meet_date,
            dry_run=dry_run,
        )

    async def import_document(
        self,
        html: str | bytes,
        file_name: str | None = None,
        meet_date: date | None = None,
        dry_run: bool = False,
    ) -> ImportSummary:
        """Import every accepted performance of a results document.

        The current swimmer resets at each table. Data rows are only read
        while a header has resolved to a swimmer.

        Args:
            html: The document
            file_name: Name reported in logs and the summary
            meet_date: Date stored on each performance
            dry_run: Parse and resolve swimmers without writing

        Returns:
            ImportSummary; accepted rows are listed in ``performances``
        """
        started = time.perf_counter()
        summary = ImportSummary(
            source=ImportSource.RESULTS, file_name=file_name, dry_run=dry_run
        )

        with bound_context(import_source=ImportSource.RESULTS.value, file_name=file_name):
            logger.info("results_import_started", dry_run=dry_run)

            current_table = 0
            swimmer: Swimmer | None = None

            for row in parse_results_document(html):
                if row.table_index != current_table:
                    current_table = row.table_index
                    swimmer = None

                if not row.cells:
                    continue
                summary.rows_processed += 1

                if row.is_header:
                    swimmer = await self._resolve_swimmer(row, summary)
                    continue

                if swimmer is None:
                    summary.add_skipped(
                        row.row_number, "swimmer", "No resolved swimmer for row", whole_row=True
                    )
                    continue

                try:
                    parsed = parse_result_row(row, swimmer)
                except TimeFormatError as e:
                    logger.debug("results_row_not_a_time", row=row.row_number, cell=e.value)
                    summary.add_skipped(row.row_number, "time", str(e), whole_row=True)
                    continue
                except ImportParseError as e:
                    logger.error(
                        "results_row_invalid",
                        row=row.row_number,
                        swimmer=swimmer.full_name,
                        error=str(e),
                    )
                    summary.add_skipped(row.row_number, "event", str(e), whole_row=True)
                    continue

                summary.performances.append(parsed)
                summary.swimmer_ids.add(parsed.swimmer_id)

                if not dry_run:
                    await self._store(parsed, meet_date, summary)

            summary.duration_ms = int((time.perf_counter() - started) * 1000)
            logger.info(
                "results_import_finished",
                rows=summary.rows_processed,
                accepted=len(summary.performances),
                times_inserted=summary.times_inserted,
                skipped=len(summary.skipped),
                errors=len(summary.errors),
                duration_ms=summary.duration_ms,
            )

        return summary

    async def _resolve_swimmer(
        self, row: ResultsRow, summary: ImportSummary
    ) -> Swimmer | None:
        """Resolve a header row to a swimmer; None invalidates following rows."""
        name = row.lookup_name
        try:
            swimmer = await self.swimmer_dao.find_by_name(name)
        except SwimmerNotFoundError as e:
            logger.warning("results_swimmer_not_found", row=row.row_number, name=name, error=str(e))
            summary.add_skipped(row.row_number, "swimmer", str(e))
            return None
        except StorageError as e:
            logger.error("results_swimmer_lookup_failed", row=row.row_number, name=name, error=str(e))
            summary.add_error(row.row_number, "swimmer", str(e))
            return None

        logger.debug("results_swimmer_resolved", row=row.row_number, swimmer_id=swimmer.id)
        return swimmer

    async def _store(
        self, parsed: ParsedResult, meet_date: date | None, summary: ImportSummary
    ) -> None:
        try:
            swim_time = parsed.to_swim_time(meet_date)
        except ValueError as e:
            logger.warning("results_row_not_storable", row=parsed.row_number, error=str(e))
            summary.add_skipped(parsed.row_number, "performance", str(e))
            return

        try:
            inserted = await self.swim_time_dao.insert(swim_time)
        except StorageError as e:
            logger.error("swim_time_insert_failed", row=parsed.row_number, error=str(e))
            summary.add_error(parsed.row_number, "time", str(e))
            return

        summary.add_inserted(inserted)
