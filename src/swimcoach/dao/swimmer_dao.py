"""Data Access Object for Swimmers."""

from datetime import date

from supabase import AsyncClient

from swimcoach.dao.base import BaseDAO
from swimcoach.exceptions import AmbiguousSwimmerError, SwimmerNotFoundError
from swimcoach.models.swimmer import Swimmer


def split_full_name(full_name: str) -> tuple[str, str]:
    """Split "First Last" on its first space into (first, last).

    Everything after the first space is the last name, so "Ana de Souza"
    yields ("Ana", "de Souza"). A single token yields an empty last name.
    """
    first, _, last = full_name.strip().partition(" ")
    return first.strip(), last.strip()


class SwimmerDAO(BaseDAO[Swimmer]):
    """DAO for Swimmer entities (the swimmer directory)."""

    table_name = "swimmers"
    model_class = Swimmer

    def __init__(
        self,
        client: AsyncClient,
        retry_attempts: int = 1,
        retry_backoff: float = 0.0,
    ):
        super().__init__(client, retry_attempts, retry_backoff)

    async def upsert(self, swimmer: Swimmer) -> str:
        """Insert a swimmer unless the id already exists.

        An existing row is never updated, even when names or gender differ.

        Args:
            swimmer: Swimmer to insert

        Returns:
            The swimmer id
        """
        await self.insert_ignore(swimmer, on_conflict="id")
        return swimmer.id

    async def find_by_first_last(self, first_name: str, last_name: str) -> list[Swimmer]:
        """Find swimmers by exact first and last name.

        Args:
            first_name: First name (case-sensitive)
            last_name: Last name (case-sensitive)

        Returns:
            List of matching Swimmers
        """
        result = await self._execute(
            lambda: self.table.select("*")
            .eq("first_name", first_name)
            .eq("last_name", last_name),
            idempotent=True,
        )
        return [self._to_model(row) for row in result.data]

    async def find_by_name(self, full_name: str) -> Swimmer:
        """Resolve a "First Last" name to exactly one swimmer.

        Args:
            full_name: Name as printed in a results document

        Returns:
            The matching Swimmer

        Raises:
            SwimmerNotFoundError: No swimmer has this name
            AmbiguousSwimmerError: Several swimmers share this name
        """
        first_name, last_name = split_full_name(full_name)
        if not first_name or not last_name:
            raise SwimmerNotFoundError(full_name)

        matches = await self.find_by_first_last(first_name, last_name)
        if not matches:
            raise SwimmerNotFoundError(full_name)
        if len(matches) > 1:
            raise AmbiguousSwimmerError(full_name, len(matches))
        return matches[0]

    def _to_model(self, row: dict) -> Swimmer:
        """Convert database row to Swimmer model."""
        return Swimmer(
            id=row["id"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            gender=row["gender"],
            birth_date=date.fromisoformat(row["birth_date"]),
        )

    def _to_db(self, model: Swimmer) -> dict:
        """Convert Swimmer model to database row."""
        return {
            "id": model.id,
            "first_name": model.first_name,
            "last_name": model.last_name,
            "gender": model.gender,
            "birth_date": model.birth_date.isoformat(),
        }
