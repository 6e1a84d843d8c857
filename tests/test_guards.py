"""Tests for the shared role guard."""

from marketplace.core.guards import AccessDecision, dashboard_for_role, resolve_access


def test_no_session_redirects_to_sign_in():
    decision = resolve_access(None, ["client"])
    assert decision == AccessDecision(allowed=False, redirect_to="/auth", reason="unauthenticated")


def test_wrong_role_redirects_to_own_dashboard():
    decision = resolve_access({"user_id": "u1", "role": "talent"}, ["agency"])
    assert not decision.allowed
    assert decision.redirect_to == "/talent/dashboard"
    assert decision.reason == "forbidden"


def test_matching_role_is_allowed():
    decision = resolve_access({"user_id": "u1", "role": "agency"}, ["agency", "client"])
    assert decision.allowed
    assert decision.redirect_to is None


def test_no_required_roles_only_needs_a_session():
    assert resolve_access({"user_id": "u1", "role": "trainer"}, []).allowed


def test_unknown_role_goes_to_generic_dashboard():
    assert dashboard_for_role("martian") == "/dashboard"
    assert dashboard_for_role(None) == "/dashboard"


def test_api_route_without_token_is_401(client):
    resp = client.post("/api/projects", json={})
    assert resp.status_code == 401
    assert resp.json() == {"error": "Unauthorized"}


def test_api_route_with_wrong_role_is_403(client, make_user):
    talent = make_user("talent")
    resp = client.post("/api/projects", json={}, headers=talent["headers"])
    assert resp.status_code == 403
    assert resp.json()["error"] == "Clients only"


def test_page_without_session_redirects_to_sign_in(client):
    resp = client.get("/views/agency/browse-clients", follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/auth"


def test_page_with_wrong_role_redirects_to_own_dashboard(client, make_user):
    talent = make_user("talent")
    resp = client.get("/views/agency/browse-clients", headers=talent["headers"], follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/talent/dashboard"


def test_invalid_token_is_treated_as_no_session(client):
    resp = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401
