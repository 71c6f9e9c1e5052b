"""Data Access Object for Swim Times."""

from datetime import date

from supabase import AsyncClient

from swimcoach.dao.base import BaseDAO
from swimcoach.models.event import Course, Stroke
from swimcoach.models.swim_time import SwimTime

# Unique key of the swimmer_times table
SWIM_TIME_CONFLICT_KEY = "swimmer_id,stroke,distance,course,time_ms"


class SwimTimeDAO(BaseDAO[SwimTime]):
    """DAO for SwimTime entities."""

    table_name = "swimmer_times"
    model_class = SwimTime

    def __init__(
        self,
        client: AsyncClient,
        retry_attempts: int = 1,
        retry_backoff: float = 0.0,
    ):
        super().__init__(client, retry_attempts, retry_backoff)

    async def insert(self, swim_time: SwimTime) -> bool:
        """Insert a performance, ignoring duplicates of its unique key.

        Args:
            swim_time: Performance to store

        Returns:
            True if inserted, False if the same performance was already stored
        """
        return await self.insert_ignore(swim_time, on_conflict=SWIM_TIME_CONFLICT_KEY)

    async def find_by_swimmer(self, swimmer_id: str) -> list[SwimTime]:
        """Find all times for a swimmer, fastest first.

        Args:
            swimmer_id: The swimmer's id

        Returns:
            List of SwimTimes for that swimmer
        """
        result = await self._execute(
            lambda: self.table.select("*").eq("swimmer_id", swimmer_id).order("time_ms"),
            idempotent=True,
        )
        return [self._to_model(row) for row in result.data]

    def _to_model(self, row: dict) -> SwimTime:
        """Convert database row to SwimTime model."""
        return SwimTime(
            swimmer_id=row["swimmer_id"],
            stroke=Stroke(row["stroke"]),
            distance=row["distance"],
            course=Course(row["course"]),
            time_ms=row["time_ms"],
            swim_date=date.fromisoformat(row["swim_date"]) if row.get("swim_date") else None,
        )

    def _to_db(self, model: SwimTime) -> dict:
        """Convert SwimTime model to database row."""
        return {
            "swimmer_id": model.swimmer_id,
            "stroke": model.stroke.value,
            "distance": model.distance,
            "course": model.course.value,
            "time_ms": model.time_ms,
            "swim_date": model.swim_date.isoformat() if model.swim_date else None,
        }
