"""Base DAO with async Supabase client connection."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, Generic, TypeVar

import httpx
from postgrest.exceptions import APIError
from pydantic import BaseModel
from supabase import AsyncClient, acreate_client

from swimcoach.exceptions import StorageError
from swimcoach.logging import get_logger

T = TypeVar("T", bound=BaseModel)

logger = get_logger(__name__)

# Postgres SQLSTATE classes that indicate a transient condition:
# 08 connection exception, 40 transaction rollback, 53 insufficient resources,
# 57 operator intervention. PGRST000-003 are PostgREST connection errors.
TRANSIENT_SQLSTATE_PREFIXES = ("08", "40", "53", "57", "PGRST00")


async def create_supabase_client(url: str, key: str) -> AsyncClient:
    """Create an async Supabase client.

    The client is created by the caller (API lifespan, CLI command) and handed
    to every DAO; nothing here caches it.
    """
    if not url or not key:
        raise RuntimeError("SUPABASE_URL and SUPABASE_KEY must be set")
    return await acreate_client(url, key)


async def close_supabase_client(client: AsyncClient) -> None:
    """Close the HTTP session the client opened for table queries."""
    await client.postgrest.aclose()


def is_transient(error: Exception) -> bool:
    """Check whether a storage failure may succeed if repeated."""
    if isinstance(error, httpx.TransportError):
        return True
    if isinstance(error, APIError):
        code = str(error.code or "")
        return code.startswith(TRANSIENT_SQLSTATE_PREFIXES)
    return False


class BaseDAO(Generic[T]):
    """Base Data Access Object with the operations the importers rely on."""

    table_name: str
    model_class: type[T]

    def __init__(
        self,
        client: AsyncClient,
        retry_attempts: int = 1,
        retry_backoff: float = 0.0,
    ):
        """Initialize the DAO.

        Args:
            client: Async Supabase client
            retry_attempts: Attempts for idempotent writes (1 = no retry)
            retry_backoff: Seconds between attempts, multiplied by the attempt number
        """
        self.client = client
        self.retry_attempts = max(1, retry_attempts)
        self.retry_backoff = retry_backoff

    @property
    def table(self):
        """Get the table reference."""
        return self.client.table(self.table_name)

    async def _execute(
        self,
        build_query: Callable[[], Any],
        *,
        idempotent: bool = False,
    ) -> Any:
        """Run a query, retrying transient failures of idempotent calls.

        Reads and insert-or-ignore writes are idempotent; plain inserts are not.

        Args:
            build_query: Returns a fresh request builder for each attempt
            idempotent: Whether repeating the call cannot change the outcome

        Returns:
            The PostgREST response

        Raises:
            StorageError: The call failed and was not (or no longer) retried
        """
        attempts = self.retry_attempts if idempotent else 1
        attempt = 1

        while True:
            try:
                request: Awaitable[Any] = build_query().execute()
                return await request
            except (APIError, httpx.HTTPError) as e:
                retryable = idempotent and is_transient(e)
                if not retryable or attempt >= attempts:
                    raise StorageError(
                        f"{self.table_name}: {e}", retryable=retryable
                    ) from e
                logger.warning(
                    "storage_retry",
                    table=self.table_name,
                    attempt=attempt,
                    error=str(e),
                )
                await asyncio.sleep(self.retry_backoff * attempt)
                attempt += 1

    async def get_by_id(self, id: str | int) -> T | None:
        """Get a single record by primary key.

        Returns:
            The model instance or None if not found
        """
        result = await self._execute(
            lambda: self.table.select("*").eq("id", id), idempotent=True
        )

        if not result.data:
            return None

        return self._to_model(result.data[0])

    async def insert_ignore(self, model: T, on_conflict: str) -> bool:
        """Insert a record unless one with the same conflict key exists.

        Args:
            model: The model instance to insert
            on_conflict: Comma-separated columns of the unique key

        Returns:
            True if a row was inserted, False if an existing row won
        """
        data = self._to_db(model)
        result = await self._execute(
            lambda: self.table.upsert(data, on_conflict=on_conflict, ignore_duplicates=True),
            idempotent=True,
        )
        return bool(result.data)

    async def create(self, model: T) -> T:
        """Append a new record. Not retried.

        Returns:
            The created model with store-assigned fields populated
        """
        data = self._to_db(model)
        result = await self._execute(lambda: self.table.insert(data))
        return self._to_model(result.data[0])

    def _to_model(self, row: dict) -> T:
        """Convert a database row to a model instance.

        Override this method for custom mapping logic.
        """
        return self.model_class(**row)

    def _to_db(self, model: T) -> dict:
        """Convert a model instance to a database row.

        Override this method for custom mapping logic.
        """
        return model.model_dump(mode="json", exclude_none=True)
