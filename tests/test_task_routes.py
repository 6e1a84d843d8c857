import pytest


@pytest.fixture
def owned_project(make_user, make_project):
    owner = make_user("client")
    return owner, make_project(owner)


def _add(client, user, project_id, **fields):
    return client.post(
        "/api/tasks", json={"project_id": project_id, "title": "Set up CI", **fields}, headers=user["headers"]
    )


def _patch(client, user, task_id, **fields):
    return client.patch("/api/tasks", json={"task_id": task_id, **fields}, headers=user["headers"])


def test_new_task_defaults(client, owned_project):
    owner, project = owned_project
    resp = _add(client, owner, project["id"])

    assert resp.status_code == 201
    task = resp.json()["task"]
    assert task["status"] == "todo"
    assert task["priority"] == "medium"
    assert task["due_date"] is None
    assert task["assigned_to"] is None
    assert task["created_by"] == owner["id"]


def test_tasks_listed_newest_first(client, owned_project):
    owner, project = owned_project
    _add(client, owner, project["id"], title="First")
    _add(client, owner, project["id"], title="Second")

    resp = client.get(f"/api/tasks?project_id={project['id']}", headers=owner["headers"])
    assert [t["title"] for t in resp.json()["tasks"]] == ["Second", "First"]


def test_patch_moves_task_across_the_board(client, make_user, owned_project):
    owner, project = owned_project
    talent = make_user("talent")
    task_id = _add(client, owner, project["id"], description="GitHub Actions").json()["task"]["id"]

    task = _patch(client, owner, task_id, status="in_progress", assigned_to=talent["id"]).json()["task"]
    assert task["status"] == "in_progress"
    assert task["assigned_to"] == talent["id"]
    assert task["description"] == "GitHub Actions"

    task = _patch(client, owner, task_id, assigned_to=None, due_date="2030-05-01T00:00:00").json()["task"]
    assert task["assigned_to"] is None
    assert task["due_date"].startswith("2030-05-01")
    assert task["status"] == "in_progress"


def test_put_overwrites_the_edit_form_fields(client, owned_project):
    owner, project = owned_project
    task_id = _add(
        client, owner, project["id"], description="Old", due_date="2030-05-01T00:00:00", status="done"
    ).json()["task"]["id"]

    resp = client.put(
        "/api/tasks", json={"task_id": task_id, "title": "Set up CD", "priority": "high"}, headers=owner["headers"]
    )
    assert resp.status_code == 200
    task = resp.json()["task"]
    assert task["title"] == "Set up CD"
    assert task["priority"] == "high"
    assert task["description"] is None
    assert task["due_date"] is None
    assert task["status"] == "done"


def test_only_the_owner_manages_tasks(client, make_user, owned_project):
    owner, project = owned_project
    task_id = _add(client, owner, project["id"]).json()["task"]["id"]
    other = make_user("client")

    resp = client.get(f"/api/tasks?project_id={project['id']}", headers=other["headers"])
    assert resp.status_code == 403
    assert resp.json() == {"error": "Only the project owner can manage tasks"}
    assert _add(client, other, project["id"]).status_code == 403
    assert _patch(client, other, task_id, status="done").status_code == 403
    assert client.delete(f"/api/tasks?task_id={task_id}", headers=other["headers"]).status_code == 403


def test_owner_deletes_task(client, owned_project):
    owner, project = owned_project
    task_id = _add(client, owner, project["id"]).json()["task"]["id"]

    assert client.delete(f"/api/tasks?task_id={task_id}", headers=owner["headers"]).status_code == 200
    assert client.get(f"/api/tasks?project_id={project['id']}", headers=owner["headers"]).json()["tasks"] == []
    assert _patch(client, owner, task_id, status="done").json() == {"error": "Task not found"}


def test_unknown_assignee_is_rejected(client, owned_project):
    owner, project = owned_project
    resp = _add(client, owner, project["id"], assigned_to="nobody")
    assert resp.status_code == 400
    assert resp.json() == {"error": "Assignee not found"}


def test_invalid_status_is_a_validation_error(client, owned_project):
    owner, project = owned_project
    task_id = _add(client, owner, project["id"]).json()["task"]["id"]
    assert _patch(client, owner, task_id, status="blocked").status_code == 400


def test_missing_ids(client, owned_project):
    owner, _ = owned_project
    assert client.get("/api/tasks", headers=owner["headers"]).json() == {"error": "Project ID is required"}
    assert client.delete("/api/tasks", headers=owner["headers"]).json() == {"error": "Task ID is required"}
    assert _add(client, owner, "missing").status_code == 404
