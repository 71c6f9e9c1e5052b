"""Shared fixtures: an in-memory store and DAOs/importers bound to it."""

import os

import pytest

# Settings require Supabase credentials; tests never reach a real project
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-key")

from fakes import FakeAsyncClient  # noqa: E402

from swimcoach.config import get_settings  # noqa: E402
from swimcoach.dao import EntriesLoadDAO, SwimmerDAO, SwimTimeDAO  # noqa: E402
from swimcoach.models import Gender, Swimmer  # noqa: E402
from swimcoach.services import AuditRecorder, EntriesImporter, ResultsImporter  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_settings():
    """Reload settings for every test so monkeypatched env vars apply."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fake_client() -> FakeAsyncClient:
    """Provide an empty in-memory store."""
    return FakeAsyncClient()


@pytest.fixture
def swimmer_dao(fake_client) -> SwimmerDAO:
    """Provide a SwimmerDAO that retries without waiting."""
    return SwimmerDAO(fake_client, retry_attempts=3, retry_backoff=0)


@pytest.fixture
def swim_time_dao(fake_client) -> SwimTimeDAO:
    """Provide a SwimTimeDAO that retries without waiting."""
    return SwimTimeDAO(fake_client, retry_attempts=3, retry_backoff=0)


@pytest.fixture
def entries_load_dao(fake_client) -> EntriesLoadDAO:
    """Provide an EntriesLoadDAO."""
    return EntriesLoadDAO(fake_client)


@pytest.fixture
def entries_importer(swimmer_dao, swim_time_dao, entries_load_dao) -> EntriesImporter:
    """Provide an EntriesImporter over the in-memory store."""
    return EntriesImporter(swimmer_dao, swim_time_dao, AuditRecorder(entries_load_dao))


@pytest.fixture
def results_importer(swimmer_dao, swim_time_dao) -> ResultsImporter:
    """Provide a ResultsImporter over the in-memory store."""
    return ResultsImporter(swimmer_dao, swim_time_dao)


@pytest.fixture
def john_doe(fake_client) -> Swimmer:
    """Store a swimmer named John Doe."""
    swimmer = Swimmer(
        id="S1",
        first_name="John",
        last_name="Doe",
        gender=Gender.MALE,
        birth_date="2000-01-02",
    )
    fake_client.rows("swimmers").append(
        {
            "id": "S1",
            "first_name": "John",
            "last_name": "Doe",
            "gender": "M",
            "birth_date": "2000-01-02",
        }
    )
    return swimmer
