"""Service layer for the meet import pipeline."""

from swimcoach.services.audit_recorder import AuditRecorder
from swimcoach.services.entries_importer import EntriesImporter
from swimcoach.services.event_parser import (
    normalize_stroke,
    parse_entry_date,
    parse_event_descriptor,
    parse_result_event,
    parse_time_string,
)
from swimcoach.services.import_schemas import (
    EntriesRow,
    ImportIssue,
    ImportSource,
    ImportSummary,
    ParsedResult,
    ResultsRow,
)
from swimcoach.services.results_importer import ResultsImporter, parse_results_document

__all__ = [
    "AuditRecorder",
    "EntriesImporter",
    "EntriesRow",
    "ImportIssue",
    "ImportSource",
    "ImportSummary",
    "normalize_stroke",
    "ParsedResult",
    "parse_entry_date",
    "parse_event_descriptor",
    "parse_result_event",
    "parse_results_document",
    "parse_time_string",
    "ResultsImporter",
    "ResultsRow",
]
