"""FastAPI dependencies for dependency injection.

Usage in routes:
    from swimcoach.api.dependencies import EntriesImporterDep

    @router.post("/imports/entries")
    async def import_entries(importer: EntriesImporterDep, ...):
        return await importer.import_stream(lines)
"""

from typing import Annotated

from fastapi import Depends, Request
from supabase import AsyncClient

from swimcoach.config import Settings, get_settings
from swimcoach.dao.entries_load_dao import EntriesLoadDAO
from swimcoach.dao.swim_time_dao import SwimTimeDAO
from swimcoach.dao.swimmer_dao import SwimmerDAO
from swimcoach.services.audit_recorder import AuditRecorder
from swimcoach.services.entries_importer import EntriesImporter
from swimcoach.services.results_importer import ResultsImporter


def get_settings_dep() -> Settings:
    """Get application settings (dependency wrapper)."""
    return get_settings()


SettingsDep = Annotated[Settings, Depends(get_settings_dep)]


def get_supabase(request: Request) -> AsyncClient:
    """Get the Supabase client created at startup."""
    return request.app.state.supabase


SupabaseDep = Annotated[AsyncClient, Depends(get_supabase)]


def get_swimmer_dao(client: SupabaseDep, settings: SettingsDep) -> SwimmerDAO:
    """Get SwimmerDAO instance."""
    return SwimmerDAO(
        client,
        retry_attempts=settings.storage_retry_attempts,
        retry_backoff=settings.storage_retry_backoff,
    )


def get_swim_time_dao(client: SupabaseDep, settings: SettingsDep) -> SwimTimeDAO:
    """Get SwimTimeDAO instance."""
    return SwimTimeDAO(
        client,
        retry_attempts=settings.storage_retry_attempts,
        retry_backoff=settings.storage_retry_backoff,
    )


def get_entries_load_dao(client: SupabaseDep) -> EntriesLoadDAO:
    """Get EntriesLoadDAO instance."""
    return EntriesLoadDAO(client)


SwimmerDAODep = Annotated[SwimmerDAO, Depends(get_swimmer_dao)]
SwimTimeDAODep = Annotated[SwimTimeDAO, Depends(get_swim_time_dao)]
EntriesLoadDAODep = Annotated[EntriesLoadDAO, Depends(get_entries_load_dao)]


def get_entries_importer(
    swimmer_dao: SwimmerDAODep,
    swim_time_dao: SwimTimeDAODep,
    entries_load_dao: EntriesLoadDAODep,
    settings: SettingsDep,
) -> EntriesImporter:
    """Get an EntriesImporter wired to the request's DAOs."""
    return EntriesImporter(
        swimmer_dao,
        swim_time_dao,
        AuditRecorder(entries_load_dao),
        delimiter=settings.entries_delimiter,
        encoding=settings.entries_encoding,
    )


def get_results_importer(
    swimmer_dao: SwimmerDAODep, swim_time_dao: SwimTimeDAODep
) -> ResultsImporter:
    """Get a ResultsImporter wired to the request's DAOs."""
    return ResultsImporter(swimmer_dao, swim_time_dao)


EntriesImporterDep = Annotated[EntriesImporter, Depends(get_entries_importer)]
ResultsImporterDep = Annotated[ResultsImporter, Depends(get_results_importer)]
