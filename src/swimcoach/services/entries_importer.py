"""Imports meet entries files: swimmer identities and declared best times."""

import csv
import io
import time
from collections.abc import Iterable
from datetime import timedelta
from pathlib import Path

from swimcoach.dao.swim_time_dao import SwimTimeDAO
from swimcoach.dao.swimmer_dao import SwimmerDAO
from swimcoach.exceptions import (
    FileDecodeError,
    ImportParseError,
    RowFormatError,
    StorageError,
)
from swimcoach.logging import bound_context, get_logger
from swimcoach.models.swim_time import SwimTime
from swimcoach.services.audit_recorder import AuditRecorder
from swimcoach.services.event_parser import parse_entry_date, parse_time_string
from swimcoach.services.import_schemas import (
    EntriesRow,
    ImportSource,
    ImportSummary,
)

logger = get_logger(__name__)


class EntriesImporter:
    """Streams an entries file row by row into the store.

    Every row contributes a swimmer upsert and up to two best-time inserts
    (short and long course). One audit row is appended per file.
    """

    def __init__(
        self,
        swimmer_dao: SwimmerDAO,
        swim_time_dao: SwimTimeDAO,
        audit_recorder: AuditRecorder,
        delimiter: str = ",",
        encoding: str = "utf-8-sig",
    ):
        self.swimmer_dao = swimmer_dao
        self.swim_time_dao = swim_time_dao
        self.audit_recorder = audit_recorder
        self.delimiter = delimiter
        self.encoding = encoding

    def decode(self, content: bytes, file_name: str | None = None) -> io.StringIO:
        """Decode a whole entries file before any of its rows is imported.

        Raises:
            FileDecodeError: If the content is not text in the configured encoding
        """
        try:
            text = content.decode(self.encoding)
        except UnicodeDecodeError as e:
            logger.warning("entries_file_undecodable", file_name=file_name, encoding=self.encoding)
            raise FileDecodeError(file_name, self.encoding) from e
        return io.StringIO(text, newline="")

    async def import_path(self, csv_path: Path) -> ImportSummary:
        """Import an entries file from disk.

        Raises:
            FileDecodeError: If the file is not text in the configured encoding;
                nothing is written in that case
        """
        lines = self.decode(csv_path.read_bytes(), file_name=csv_path.name)
        return await self.import_stream(lines, file_name=csv_path.name)

    async def import_stream(
        self, lines: Iterable[str], file_name: str | None = None
    ) -> ImportSummary:
        """Import an entries file from an iterable of text lines.

        The first line is the header and is not imported. Rows are processed
        strictly in order; each storage call completes before the next row.

        Args:
            lines: Text lines (an open file or io.StringIO)
            file_name: Name reported in logs and the summary

        Returns:
            ImportSummary with counts, skipped units and storage errors
        """
        started = time.perf_counter()
        summary = ImportSummary(source=ImportSource.ENTRIES, file_name=file_name)

        with bound_context(import_source=ImportSource.ENTRIES.value, file_name=file_name):
            logger.info("entries_import_started")
            reader = csv.reader(lines, delimiter=self.delimiter, strict=True)

            row_number = 0
            while True:
                row_number += 1
                try:
                    values = next(reader)
                except StopIteration:
                    break
                except csv.Error as e:
                    logger.error("entries_row_malformed", row=row_number, error=str(e))
                    summary.add_skipped(row_number, "row", str(e), whole_row=True)
                    continue
                except UnicodeDecodeError as e:
                    # The rest of the stream cannot be read; the audit row is still written
                    logger.error("entries_file_undecodable", row=row_number, error=str(e))
                    summary.add_error(row_number, "file", f"File is not {self.encoding} text: {e}")
                    break

                if row_number == 1:
                    continue  # Header

                try:
                    row = EntriesRow.from_values(values, row_number)
                except RowFormatError as e:
                    logger.error("entries_row_malformed", row=row_number, error=str(e))
                    summary.add_skipped(row_number, "row", str(e), whole_row=True)
                    continue

                await self._import_row(row, summary)

            elapsed = timedelta(seconds=time.perf_counter() - started)
            summary.duration_ms = int(elapsed.total_seconds() * 1000)

            try:
                await self.audit_recorder.record(
                    summary.swimmer_ids, summary.rows_processed, elapsed
                )
                summary.audit_recorded = True
            except StorageError as e:
                logger.error("entries_load_failed", error=str(e))
                summary.add_error(0, "audit", str(e))

            logger.info(
                "entries_import_finished",
                rows=summary.rows_processed,
                swimmers=summary.swimmer_count,
                times_inserted=summary.times_inserted,
                skipped=len(summary.skipped),
                errors=len(summary.errors),
                duration_ms=summary.duration_ms,
            )

        return summary

    async def _import_row(self, row: EntriesRow, summary: ImportSummary) -> None:
        """Import the swimmer and best times of one row.

        A bad swimmer identity does not stop the times; the row is counted
        either way.
        """
        if not row.swimmer_id:
            logger.warning("entry_swimmer_id_missing", row=row.row_number)
            summary.add_skipped(row.row_number, "swimmer_id", "Swimmer id is empty", whole_row=True)
        else:
            await self._import_swimmer(row, summary)
            await self._import_times(row, summary)
            summary.swimmer_ids.add(row.swimmer_id)

        summary.rows_processed += 1

    async def _import_swimmer(self, row: EntriesRow, summary: ImportSummary) -> None:
        try:
            swimmer = row.to_swimmer()
        except ValueError as e:
            logger.warning("entry_swimmer_invalid", row=row.row_number, error=str(e))
            summary.add_skipped(row.row_number, "swimmer", str(e))
            return

        try:
            await self.swimmer_dao.upsert(swimmer)
        except StorageError as e:
            logger.error("swimmer_upsert_failed", row=row.row_number, swimmer_id=swimmer.id, error=str(e))
            summary.add_error(row.row_number, "swimmer", str(e))

    async def _import_times(self, row: EntriesRow, summary: ImportSummary) -> None:
        try:
            distance, stroke = row.event()
        except ImportParseError as e:
            logger.warning("entry_event_invalid", row=row.row_number, error=str(e))
            summary.add_skipped(row.row_number, "event", str(e))
            return

        if not stroke.is_known:
            message = f"Unknown stroke in event '{row.get('event')}'"
            logger.warning("entry_stroke_unknown", row=row.row_number, event=row.get("event"))
            summary.add_skipped(row.row_number, "event", message)
            return

        for slot in row.course_slots():
            try:
                swim_date = parse_entry_date(slot.raw_date, row.row_number)
                time_ms = parse_time_string(slot.clock)
            except ImportParseError as e:
                logger.warning(
                    "entry_best_time_invalid",
                    row=row.row_number,
                    course=slot.course.value,
                    error=str(e),
                )
                summary.add_skipped(row.row_number, slot.time_field, str(e))
                continue

            swim_time = SwimTime(
                swimmer_id=row.swimmer_id,
                stroke=stroke,
                distance=distance,
                course=slot.course,
                time_ms=time_ms,
                swim_date=swim_date,
            )
            try:
                inserted = await self.swim_time_dao.insert(swim_time)
            except StorageError as e:
                logger.error(
                    "swim_time_insert_failed",
                    row=row.row_number,
                    course=slot.course.value,
                    error=str(e),
                )
                summary.add_error(row.row_number, slot.time_field, str(e))
                continue

            summary.add_inserted(inserted)
