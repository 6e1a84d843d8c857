import pytest


@pytest.fixture
def owned_project(make_user, make_project):
    owner = make_user("client", name="Cleo Client")
    return owner, make_project(owner, title="Storefront")


def _add(client, user, project_id, **overrides):
    payload = {
        "project_id": project_id,
        "title": "Design",
        "amount": 500,
        "start_date": "2030-01-01T00:00:00",
        "end_date": "2030-01-15T00:00:00",
    }
    payload.update(overrides)
    return client.post("/api/milestones", json=payload, headers=user["headers"])


def _list(client, user, project_id):
    return client.get(f"/api/milestones?project_id={project_id}", headers=user["headers"])


def _update(client, user, milestone_id, **fields):
    return client.put("/api/milestones", json={"milestone_id": milestone_id, **fields}, headers=user["headers"])


def _accepted_talent(client, make_user, owner, project_id):
    talent = make_user("talent")
    application = client.post(
        "/api/applications", json={"project_id": project_id}, headers=talent["headers"]
    ).json()["application"]
    resp = client.patch(
        "/api/applications", json={"application_id": application["id"], "status": "accepted"},
        headers=owner["headers"]
    )
    assert resp.status_code == 200
    return talent


def test_owner_adds_milestone(client, owned_project):
    owner, project = owned_project
    resp = _add(client, owner, project["id"], description="Wireframes")

    assert resp.status_code == 201
    milestone = resp.json()["milestone"]
    assert milestone["status"] == "pending"
    assert milestone["amount"] == 500
    assert milestone["description"] == "Wireframes"
    assert milestone["created_by"] == owner["id"]
    assert milestone["completed_at"] is None


def test_milestones_are_ordered_by_start_date(client, owned_project):
    owner, project = owned_project
    _add(client, owner, project["id"], title="Launch", start_date="2030-03-01T00:00:00")
    _add(client, owner, project["id"], title="Design", start_date="2030-01-01T00:00:00")

    titles = [m["title"] for m in _list(client, owner, project["id"]).json()["milestones"]]
    assert titles == ["Design", "Launch"]


def test_accepted_talent_can_read_but_not_write(client, make_user, owned_project):
    owner, project = owned_project
    _add(client, owner, project["id"])
    talent = _accepted_talent(client, make_user, owner, project["id"])

    assert len(_list(client, talent, project["id"]).json()["milestones"]) == 1
    assert _add(client, talent, project["id"]).status_code == 403


def test_outsider_is_forbidden(client, make_user, owned_project):
    owner, project = owned_project
    milestone = _add(client, owner, project["id"]).json()["milestone"]
    outsider = make_user("talent")

    resp = _list(client, outsider, project["id"])
    assert resp.status_code == 403
    assert resp.json() == {"error": "You do not have access to this project"}
    assert _update(client, outsider, milestone["id"], title="Mine").status_code == 403
    assert client.delete(
        f"/api/milestones?milestone_id={milestone['id']}", headers=outsider["headers"]
    ).status_code == 403


def test_pending_applicant_is_not_a_member(client, make_user, owned_project):
    _, project = owned_project
    talent = make_user("talent")
    client.post("/api/applications", json={"project_id": project["id"]}, headers=talent["headers"])

    assert _list(client, talent, project["id"]).status_code == 403


def test_completed_at_follows_status(client, owned_project):
    owner, project = owned_project
    milestone_id = _add(client, owner, project["id"]).json()["milestone"]["id"]

    completed = _update(client, owner, milestone_id, status="completed").json()["milestone"]
    assert completed["status"] == "completed"
    assert completed["completed_at"] is not None

    again = _update(client, owner, milestone_id, status="completed").json()["milestone"]
    assert again["completed_at"] == completed["completed_at"]

    reopened = _update(client, owner, milestone_id, status="in_progress").json()["milestone"]
    assert reopened["status"] == "in_progress"
    assert reopened["completed_at"] is None


def test_update_only_touches_sent_fields(client, owned_project):
    owner, project = owned_project
    milestone_id = _add(client, owner, project["id"], description="Wireframes").json()["milestone"]["id"]

    updated = _update(client, owner, milestone_id, amount=750).json()["milestone"]
    assert updated["amount"] == 750
    assert updated["title"] == "Design"
    assert updated["description"] == "Wireframes"

    cleared = _update(client, owner, milestone_id, description="").json()["milestone"]
    assert cleared["description"] is None


def test_owner_deletes_milestone(client, owned_project):
    owner, project = owned_project
    milestone_id = _add(client, owner, project["id"]).json()["milestone"]["id"]

    resp = client.delete(f"/api/milestones?milestone_id={milestone_id}", headers=owner["headers"])
    assert resp.status_code == 200
    assert resp.json()["success"] is True
    assert _list(client, owner, project["id"]).json()["milestones"] == []


def test_missing_ids_and_unknown_records(client, owned_project):
    owner, project = owned_project

    assert client.get("/api/milestones", headers=owner["headers"]).json() == {"error": "Project ID is required"}
    assert client.delete("/api/milestones", headers=owner["headers"]).status_code == 400
    assert _list(client, owner, "missing").status_code == 404
    assert _add(client, owner, "missing").status_code == 404
    assert _update(client, owner, "missing", title="X").json() == {"error": "Milestone not found"}


def test_missing_fields_are_rejected(client, owned_project):
    owner, project = owned_project
    resp = client.post("/api/milestones", json={"project_id": project["id"], "title": "No money"},
                       headers=owner["headers"])
    assert resp.status_code == 400
    assert resp.json()["error"] == "All required fields must be provided"


def test_milestones_require_login(client, owned_project):
    _, project = owned_project
    assert client.get(f"/api/milestones?project_id={project['id']}").status_code == 401
