"""Global exception handler unit tests

Unhandled exceptions become a 500 JSON response that still carries CORS
and request id headers.
"""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from tutorbook.entrypoints.api.app import app
from tutorbook.entrypoints.api.deps import get_workspace
from tutorbook.services.workspace import Workspace

_ORIGIN = "http://localhost:3000"


@pytest.fixture
def client_with_broken_workspace():
    """Workspace whose dashboard() raises RuntimeError"""
    broken = MagicMock(spec=Workspace)
    broken.dashboard.side_effect = RuntimeError("event source unavailable")

    app.dependency_overrides[get_workspace] = lambda: broken

    # raise_server_exceptions=False so the 500 comes back as a response
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c

    app.dependency_overrides.clear()


class TestUnhandledExceptionHandler:
    """Global exception handler tests"""

    def test_500_returns_json(self, client_with_broken_workspace):
        response = client_with_broken_workspace.get(
            "/api/dashboard",
            headers={"Origin": _ORIGIN},
        )
        assert response.status_code == 500
        body = response.json()
        assert body["detail"] == "Internal server error"
        assert body["request_id"] == response.headers["x-request-id"]

    def test_500_has_cors_header(self, client_with_broken_workspace):
        response = client_with_broken_workspace.get(
            "/api/dashboard",
            headers={"Origin": _ORIGIN},
        )
        assert response.status_code == 500
        assert "access-control-allow-origin" in response.headers

    def test_incoming_request_id_is_kept(self, client_with_broken_workspace):
        response = client_with_broken_workspace.get(
            "/api/dashboard",
            headers={"Origin": _ORIGIN, "X-Request-ID": "dash-42"},
        )
        assert response.json()["request_id"] == "dash-42"
        assert response.headers["x-request-id"] == "dash-42"

    def test_500_logs_request_context(self, client_with_broken_workspace, caplog):
        client_with_broken_workspace.get("/api/dashboard", headers={"X-Request-ID": "dash-7"})

        (record,) = [r for r in caplog.records if r.getMessage().startswith("Unhandled")]
        assert record.extra_fields == {
            "request_id": "dash-7",
            "method": "GET",
            "path": "/api/dashboard",
        }


class TestRequestHeaders:
    """Headers on successful responses"""

    @pytest.fixture
    def client(self, mock_student_directory, mock_event_source, mock_notice_source):
        ws = Workspace(mock_student_directory, mock_event_source, mock_notice_source)
        ws.sync()
        app.dependency_overrides[get_workspace] = lambda: ws

        with TestClient(app) as c:
            yield c

        app.dependency_overrides.clear()

    def test_request_id_generated(self, client):
        response = client.get("/api/dashboard", headers={"Origin": _ORIGIN})
        assert response.status_code == 200
        assert len(response.headers["x-request-id"]) == 12

    def test_csv_filename_exposed_to_frontend(self, client):
        response = client.get(
            "/api/reports/export", params={"month": 10}, headers={"Origin": _ORIGIN}
        )
        exposed = response.headers["access-control-expose-headers"]
        assert "Content-Disposition" in exposed
