"""Tests for the upload and health endpoints."""

import httpx
import pytest
from fastapi.testclient import TestClient

from swimcoach.api.app import create_app
from swimcoach.api.dependencies import get_supabase
from swimcoach.config import get_settings

from fakes import entries_file, entry_line, result_line, results_document, swimmer_header


@pytest.fixture
def api_client(fake_client) -> TestClient:
    """Provide a test client backed by the in-memory store."""
    app = create_app()
    app.dependency_overrides[get_supabase] = lambda: fake_client
    return TestClient(app)


class TestHealth:
    def test_health(self, api_client):
        response = api_client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_ready(self, api_client):
        response = api_client.get("/health/ready")

        assert response.status_code == 200
        assert response.json()["database"] == "connected"

    def test_not_ready_when_store_unreachable(self, api_client, fake_client):
        fake_client.fail("swimmers", httpx.ConnectError("refused"))

        response = api_client.get("/health/ready")

        assert response.status_code == 503


class TestEntriesUpload:
    def test_upload_entries(self, api_client, fake_client):
        response = api_client.post(
            "/api/v1/imports/entries",
            files={"meet-entries-file": ("meet.csv", entries_file(entry_line()), "text/csv")},
        )

        assert response.status_code == 200
        (summary,) = response.json()
        assert summary["file_name"] == "meet.csv"
        assert summary["success"] is True
        assert summary["swimmer_ids"] == ["S1"]
        assert summary["times_inserted"] == 1
        assert summary["audit_recorded"] is True
        assert fake_client.rows("swimmers")[0]["last_name"] == "Doe"

    def test_upload_several_files(self, api_client, fake_client):
        response = api_client.post(
            "/api/v1/imports/entries",
            files=[
                ("meet-entries-file", ("a.csv", entries_file(entry_line()), "text/csv")),
                (
                    "meet-entries-file",
                    ("b.csv", entries_file(entry_line(swimmer_id="S2", name="Roe Jane")), "text/csv"),
                ),
            ],
        )

        assert response.status_code == 200
        assert [s["file_name"] for s in response.json()] == ["a.csv", "b.csv"]
        assert len(fake_client.rows("entries_load")) == 2

    def test_storage_failure_reported_in_summary(self, api_client, fake_client):
        fake_client.fail("entries_load", httpx.ConnectError("refused"))

        response = api_client.post(
            "/api/v1/imports/entries",
            files={"meet-entries-file": ("meet.csv", entries_file(entry_line()), "text/csv")},
        )

        (summary,) = response.json()
        assert response.status_code == 200
        assert summary["success"] is False
        assert summary["audit_recorded"] is False
        assert "refused" in summary["first_error"]

    def test_undecodable_file_rejected(self, api_client):
        response = api_client.post(
            "/api/v1/imports/entries",
            files={"meet-entries-file": ("meet.csv", b"\xff\xfe\xfa", "text/csv")},
        )

        assert response.status_code == 422

    def test_latin1_file_rejected_before_writes(self, api_client, fake_client):
        content = entries_file(entry_line(), entry_line(swimmer_id="S2", name="N\xe9e Ana"))

        response = api_client.post(
            "/api/v1/imports/entries",
            files={"meet-entries-file": ("meet.csv", content.encode("latin-1"), "text/csv")},
        )

        assert response.status_code == 422
        assert response.json()["detail"] == "meet.csv is not utf-8-sig text"
        assert fake_client.rows("swimmers") == []
        assert fake_client.rows("entries_load") == []

    def test_missing_file_field(self, api_client):
        response = api_client.post(
            "/api/v1/imports/entries",
            files={"file": ("meet.csv", entries_file(entry_line()), "text/csv")},
        )

        assert response.status_code == 422

    def test_delimiter_from_settings(self, api_client, fake_client, monkeypatch):
        monkeypatch.setenv("ENTRIES_DELIMITER", ";")
        get_settings.cache_clear()
        content = entries_file(entry_line()).replace(",", ";")

        response = api_client.post(
            "/api/v1/imports/entries",
            files={"meet-entries-file": ("meet.csv", content, "text/csv")},
        )

        assert response.json()[0]["times_inserted"] == 1


class TestResultsUpload:
    def _document(self) -> str:
        return results_document([swimmer_header("John Doe"), result_line("01:23.45L")])

    def test_upload_results(self, api_client, fake_client, john_doe):
        response = api_client.post(
            "/api/v1/imports/results",
            files={"meet-results-file": ("results.html", self._document(), "text/html")},
            data={"meet_date": "2024-03-01"},
        )

        assert response.status_code == 200
        (summary,) = response.json()
        assert summary["times_inserted"] == 1
        assert summary["performances"][0]["course"] == "LONG"
        assert fake_client.rows("swimmer_times")[0]["swim_date"] == "2024-03-01"

    def test_dry_run(self, api_client, fake_client, john_doe):
        response = api_client.post(
            "/api/v1/imports/results",
            files={"meet-results-file": ("results.html", self._document(), "text/html")},
            data={"dry_run": "true"},
        )

        (summary,) = response.json()
        assert summary["dry_run"] is True
        assert summary["performances"][0]["time_ms"] == 83450
        assert fake_client.rows("swimmer_times") == []


class TestLifespan:
    def test_client_closed_on_shutdown(self, fake_client, monkeypatch):
        async def fake_create_client(url, key):
            return fake_client

        monkeypatch.setattr("swimcoach.api.app.create_supabase_client", fake_create_client)

        with TestClient(create_app()) as client:
            assert client.get("/health").status_code == 200
            assert not fake_client.postgrest.closed

        assert fake_client.postgrest.closed
