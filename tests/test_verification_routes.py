from unittest.mock import patch

import pytest
from pymongo.errors import PyMongoError

from helpers import talent_profile_id
from marketplace.services.mongo_service import VerificationReviewService, VerificationSubmissionService


@pytest.fixture
def talent(make_user):
    return make_user("talent", name="Ada Lovelace")


@pytest.fixture
def admin(make_user):
    return make_user("admin")


def _status(client, user):
    return client.get("/api/verification/status", headers=user["headers"]).json()


def test_new_talent_status(client, talent):
    body = _status(client, talent)
    assert body["verification_status"] == "pending"
    assert body["platform_access"] is False
    assert body["status_info"]["label"] == "Pending Verification"
    assert body["progress"]["completion_percentage"] == 0
    assert body["verification"] is None
    assert [item["id"] for item in body["checklist"]] == [
        "portfolio", "code_repository", "skill_tests", "linkedin", "identity"
    ]


def test_invalid_handles_are_all_reported(client, talent):
    resp = client.post("/api/verification/submit", json={
        "github_username": "-bad-",
        "gitlab_username": "no spaces allowed",
        "linkedin_url": "https://example.com/ada",
    }, headers=talent["headers"])

    assert resp.status_code == 400
    assert resp.json() == {"errors": [
        "Invalid GitHub username format", "Invalid GitLab username format", "Invalid LinkedIn URL format"
    ]}
    assert _status(client, talent)["verification_status"] == "pending"


def test_submission_moves_to_review_and_is_archived(client, talent):
    resp = client.post("/api/verification/submit", json={
        "portfolio_url": "https://ada.dev",
        "github_username": "https://github.com/ada-l",
        "linkedin_url": "https://www.linkedin.com/in/ada-lovelace",
    }, headers=talent["headers"])
    assert resp.status_code == 200
    assert resp.json()["success"] is True

    assert _status(client, talent)["verification_status"] == "in_review"

    archived = VerificationSubmissionService().list_for_user(talent["id"])
    assert len(archived) == 1
    assert archived[0]["talent_profile_id"] == talent_profile_id(talent["id"])
    assert archived[0]["payload"]["github_username"] == "https://github.com/ada-l"


def test_resubmission_keeps_earlier_handles(client, talent):
    client.post("/api/verification/submit", json={"github_username": "ada-l"}, headers=talent["headers"])
    client.post("/api/verification/submit", json={"gitlab_username": "ada.l"}, headers=talent["headers"])

    assert len(VerificationSubmissionService().list_for_user(talent["id"])) == 2


def test_status_requires_talent_profile(client, make_user):
    assert client.get("/api/verification/status", headers=make_user("client")["headers"]).status_code == 404


def test_admin_sees_pending_talents(client, talent, admin):
    resp = client.get("/api/admin/verify-talent", headers=admin["headers"])
    assert resp.status_code == 200
    body = resp.json()
    assert body["count"] == 1
    assert body["pending_talents"][0]["user_id"] == talent["id"]

    assert client.get("/api/admin/verify-talent", headers=talent["headers"]).status_code == 403


def test_approval_grants_access(client, talent, admin):
    profile_id = talent_profile_id(talent["id"])
    resp = client.post("/api/admin/verify-talent", json={
        "talent_profile_id": profile_id,
        "decision": "approved",
        "portfolio_score": 80,
        "code_sample_score": 70,
    }, headers=admin["headers"])

    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Talent verified successfully"
    assert body["platform_access"] is True
    assert body["verification"]["overall_score"] == 75.0

    status = _status(client, talent)
    assert status["verification_status"] == "verified"
    assert status["platform_access"] is True
    assert status["progress"]["portfolio_reviewed"] is True

    assert client.get(f"/api/talents/{talent['id']}").status_code == 200
    assert client.get("/api/admin/verify-talent", headers=admin["headers"]).json()["count"] == 0

    review = VerificationReviewService().latest(profile_id)
    assert review["reviewer_id"] == admin["id"]
    assert review["review"]["decision"] == "approved"


def test_rejection_records_reason(client, talent, admin):
    resp = client.post("/api/admin/verify-talent", json={
        "talent_profile_id": talent_profile_id(talent["id"]),
        "decision": "rejected",
        "rejection_reason": "Portfolio links are broken",
    }, headers=admin["headers"])

    assert resp.json()["message"] == "Talent rejected successfully"
    status = _status(client, talent)
    assert status["verification_status"] == "rejected"
    assert status["platform_access"] is False
    assert status["verification"]["rejection_reason"] == "Portfolio links are broken"


def test_review_of_unknown_profile(client, admin):
    resp = client.post(
        "/api/admin/verify-talent", json={"talent_profile_id": "missing", "decision": "approved"},
        headers=admin["headers"]
    )
    assert resp.status_code == 404


def test_newline_suffixed_handles_are_rejected(client, talent):
    resp = client.post("/api/verification/submit", json={
        "github_username": "ada\n",
        "gitlab_username": "ada.l\n",
        "linkedin_url": "https://linkedin.com/in/ada\n",
    }, headers=talent["headers"])

    assert resp.status_code == 400
    assert len(resp.json()["errors"]) == 3
    assert _status(client, talent)["verification_status"] == "pending"


def test_admin_sees_archived_history(client, talent, admin):
    profile_id = talent_profile_id(talent["id"])
    client.post("/api/verification/submit", json={"github_username": "ada-l"}, headers=talent["headers"])
    client.post("/api/verification/submit", json={"gitlab_username": "ada.l"}, headers=talent["headers"])
    client.post("/api/admin/verify-talent", json={
        "talent_profile_id": profile_id, "decision": "rejected", "rejection_reason": "Needs more samples",
    }, headers=admin["headers"])

    resp = client.get(f"/api/admin/verify-talent/{profile_id}", headers=admin["headers"])
    assert resp.status_code == 200
    body = resp.json()
    assert body["verification_status"] == "rejected"
    assert body["verification"]["github_username"] == "ada-l"
    assert len(body["submissions"]) == 2
    assert all(isinstance(doc["_id"], str) for doc in body["submissions"])
    assert body["latest_review"]["reviewer_id"] == admin["id"]
    assert body["latest_review"]["review"]["rejection_reason"] == "Needs more samples"


def test_history_is_admin_only(client, talent, admin):
    profile_id = talent_profile_id(talent["id"])
    assert client.get(f"/api/admin/verify-talent/{profile_id}", headers=talent["headers"]).status_code == 403
    assert client.get("/api/admin/verify-talent/missing", headers=admin["headers"]).status_code == 404


def test_history_without_archive_entries(client, talent, admin):
    body = client.get(
        f"/api/admin/verify-talent/{talent_profile_id(talent['id'])}", headers=admin["headers"]
    ).json()
    assert body["submissions"] == []
    assert body["latest_review"] is None
    assert body["verification"] is None


def test_history_survives_archive_outage(client, talent, admin):
    profile_id = talent_profile_id(talent["id"])
    with patch.object(VerificationSubmissionService, "list_for_user", side_effect=PyMongoError("down")):
        resp = client.get(f"/api/admin/verify-talent/{profile_id}", headers=admin["headers"])

    assert resp.status_code == 200
    assert resp.json()["submissions"] == []
    assert resp.json()["latest_review"] is None
