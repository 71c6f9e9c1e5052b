"""Data Access Object for entries import audits."""

from datetime import datetime

from supabase import AsyncClient

from swimcoach.dao.base import BaseDAO
from swimcoach.models.entries_load import EntriesLoad


class EntriesLoadDAO(BaseDAO[EntriesLoad]):
    """DAO for EntriesLoad audit rows. Append-only."""

    table_name = "entries_load"
    model_class = EntriesLoad

    def __init__(self, client: AsyncClient):
        # Appends are not idempotent, so there is nothing to retry
        super().__init__(client)

    def _to_model(self, row: dict) -> EntriesLoad:
        """Convert database row to EntriesLoad model."""
        created_at = row.get("created_at")
        return EntriesLoad(
            id=row.get("id"),
            num_swimmers=row["num_swimmers"],
            num_entries=row["num_entries"],
            duration_ms=row["duration_ms"],
            swimmers=row.get("swimmers") or "",
            created_at=datetime.fromisoformat(created_at) if created_at else None,
        )

    def _to_db(self, model: EntriesLoad) -> dict:
        """Convert EntriesLoad model to database row."""
        return {
            "num_swimmers": model.num_swimmers,
            "num_entries": model.num_entries,
            "duration_ms": model.duration_ms,
            "swimmers": model.swimmers,
        }
