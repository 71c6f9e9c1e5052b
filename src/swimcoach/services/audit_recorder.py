"""Records one audit row per completed entries import."""

from collections.abc import Iterable
from datetime import timedelta

from swimcoach.dao.entries_load_dao import EntriesLoadDAO
from swimcoach.logging import get_logger
from swimcoach.models.entries_load import SWIMMER_ID_SEPARATOR, EntriesLoad

logger = get_logger(__name__)


class AuditRecorder:
    """Appends EntriesLoad rows."""

    def __init__(self, entries_load_dao: EntriesLoadDAO):
        self.entries_load_dao = entries_load_dao

    async def record(
        self,
        swimmer_ids: Iterable[str],
        entries_count: int,
        duration: timedelta,
    ) -> EntriesLoad:
        """Persist the summary of one import run.

        Args:
            swimmer_ids: Distinct swimmer ids touched by the run, any order
            entries_count: Rows processed
            duration: Wall-clock time of the run

        Returns:
            The stored audit record

        Raises:
            StorageError: If the insert fails (not retried)
        """
        ids = set(swimmer_ids)
        load = EntriesLoad(
            num_swimmers=len(ids),
            num_entries=entries_count,
            duration_ms=duration // timedelta(milliseconds=1),
            swimmers=SWIMMER_ID_SEPARATOR.join(ids),
        )
        stored = await self.entries_load_dao.create(load)
        logger.info(
            "entries_load_recorded",
            num_swimmers=load.num_swimmers,
            num_entries=load.num_entries,
            duration_ms=load.duration_ms,
        )
        return stored
