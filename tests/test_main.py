from unittest.mock import patch

from fastapi.testclient import TestClient

from marketplace.main import app


def test_root(client):
    assert client.get("/").json() == {"status": "healthy", "app": "Freelance Marketplace"}


def test_health_reports_database(client):
    body = client.get("/health").json()
    assert body["status"] == "healthy"
    assert body["database"] == "connected"


def test_unknown_route_uses_error_shape(client):
    resp = client.get("/api/does-not-exist")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Not Found"}


def test_validation_error_lists_fields(client, make_user):
    resp = client.post("/api/projects", json={"title": "Only a title"}, headers=make_user("client")["headers"])
    assert resp.status_code == 400
    fields = {tuple(d["loc"])[-1] for d in resp.json()["details"]}
    assert {"description", "budget", "deadline", "category", "skills"} <= fields


def test_unexpected_errors_are_generic():
    client = TestClient(app, raise_server_exceptions=False)
    with patch("marketplace.api.routes.agency_routes.list_agencies", side_effect=RuntimeError("boom")):
        resp = client.get("/api/agencies")

    assert resp.status_code == 500
    assert resp.json() == {"error": "An unexpected error occurred"}
