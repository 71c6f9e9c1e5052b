"""Audit record for one entries file import."""

from datetime import datetime

from pydantic import BaseModel, Field

SWIMMER_ID_SEPARATOR = ", "


class EntriesLoad(BaseModel):
    """Summary of a completed entries import, appended once per file."""

    id: int | None = None
    num_swimmers: int = Field(ge=0)
    num_entries: int = Field(ge=0)
    duration_ms: int = Field(ge=0)
    swimmers: str = ""  # Comma-joined swimmer ids, unordered
    created_at: datetime | None = None

    @property
    def swimmer_ids(self) -> set[str]:
        """Split the stored id list back into a set."""
        if not self.swimmers:
            return set()
        return {s.strip() for s in self.swimmers.split(",") if s.strip()}
