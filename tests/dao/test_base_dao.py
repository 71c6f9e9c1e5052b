"""Tests for storage error handling and retries."""

import httpx
import pytest
from postgrest.exceptions import APIError

from swimcoach.dao.base import close_supabase_client, create_supabase_client, is_transient
from swimcoach.dao.swimmer_dao import SwimmerDAO
from swimcoach.exceptions import StorageError
from swimcoach.models import Gender, Swimmer

SWIMMER = Swimmer(
    id="S1", first_name="John", last_name="Doe", gender=Gender.MALE, birth_date="2000-01-02"
)


class TestIsTransient:
    def test_transport_errors(self):
        assert is_transient(httpx.ConnectError("refused"))
        assert is_transient(httpx.ReadTimeout("slow"))

    @pytest.mark.parametrize("code", ["08006", "40001", "53300", "57014", "PGRST001"])
    def test_transient_sqlstates(self, code):
        assert is_transient(APIError({"code": code, "message": "x"}))

    @pytest.mark.parametrize("code", ["23505", "42501", "PGRST116", None])
    def test_permanent_errors(self, code):
        assert not is_transient(APIError({"code": code, "message": "x"}))


class TestRetry:
    async def test_idempotent_write_retried(self, swimmer_dao, fake_client):
        fake_client.fail(
            "swimmers",
            httpx.ConnectError("refused"),
            APIError({"code": "40001", "message": "serialization failure"}),
        )

        await swimmer_dao.upsert(SWIMMER)

        assert fake_client.tables["swimmers"].executed == 3
        assert len(fake_client.rows("swimmers")) == 1

    async def test_gives_up_after_attempts(self, swimmer_dao, fake_client):
        fake_client.fail("swimmers", *[httpx.ConnectError("refused") for _ in range(3)])

        with pytest.raises(StorageError) as exc_info:
            await swimmer_dao.upsert(SWIMMER)

        assert exc_info.value.retryable
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
        assert fake_client.tables["swimmers"].executed == 3

    async def test_permanent_error_not_retried(self, swimmer_dao, fake_client):
        fake_client.fail("swimmers", APIError({"code": "42501", "message": "denied"}))

        with pytest.raises(StorageError) as exc_info:
            await swimmer_dao.upsert(SWIMMER)

        assert not exc_info.value.retryable
        assert fake_client.tables["swimmers"].executed == 1

    async def test_single_attempt_by_default(self, fake_client):
        dao = SwimmerDAO(fake_client)
        fake_client.fail("swimmers", httpx.ConnectError("refused"))

        with pytest.raises(StorageError):
            await dao.upsert(SWIMMER)

        assert fake_client.tables["swimmers"].executed == 1

    async def test_backoff_scales_with_attempt(self, fake_client, monkeypatch):
        delays = []

        async def fake_sleep(seconds):
            delays.append(seconds)

        monkeypatch.setattr("swimcoach.dao.base.asyncio.sleep", fake_sleep)
        dao = SwimmerDAO(fake_client, retry_attempts=3, retry_backoff=0.5)
        fake_client.fail("swimmers", httpx.ConnectError("a"), httpx.ConnectError("b"))

        await dao.upsert(SWIMMER)

        assert delays == [0.5, 1.0]


async def test_create_client_requires_credentials():
    with pytest.raises(RuntimeError):
        await create_supabase_client("", "")


async def test_close_client(fake_client):
    await close_supabase_client(fake_client)

    assert fake_client.postgrest.closed
