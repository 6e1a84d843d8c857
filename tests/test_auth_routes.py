from sqlalchemy import text

from marketplace.db.database import get_db_session


def test_register_creates_user_and_role_profile(client):
    resp = client.post("/api/auth/register", json={
        "email": "ada@marketplace.io", "password": "password123", "name": "Ada Lovelace", "role": "talent",
    })
    assert resp.status_code == 201
    user_id = resp.json()["user_id"]

    with get_db_session() as db:
        profile = db.execute(
            text("SELECT first_name, last_name, tier, active_picks FROM talent_profiles WHERE user_id = :id"),
            {"id": user_id}
        ).fetchone()
    assert tuple(profile) == ("Ada", "Lovelace", "bronze", 0)


def test_register_agency_uses_agency_name(client):
    resp = client.post("/api/auth/register", json={
        "email": "hq@acme.io", "password": "password123", "name": "Acme", "role": "agency",
        "agency_name": "Acme Devs",
    })
    assert resp.status_code == 201

    agencies = client.get("/api/agencies").json()["agencies"]
    assert agencies[0]["profile"]["agency_name"] == "Acme Devs"


def test_duplicate_email_is_rejected(client):
    payload = {"email": "dup@marketplace.io", "password": "password123", "name": "Dup", "role": "client"}
    assert client.post("/api/auth/register", json=payload).status_code == 201

    resp = client.post("/api/auth/register", json=payload)
    assert resp.status_code == 400
    assert resp.json() == {"error": "User already exists"}


def test_admin_cannot_self_register(client):
    resp = client.post("/api/auth/register", json={
        "email": "root@marketplace.io", "password": "password123", "name": "Root", "role": "admin",
    })
    assert resp.status_code == 400


def test_short_password_is_a_validation_error(client):
    resp = client.post("/api/auth/register", json={
        "email": "short@marketplace.io", "password": "short", "name": "Short", "role": "client",
    })
    assert resp.status_code == 400
    assert resp.json()["error"] == "All required fields must be provided"


def test_login_and_me(client, make_user):
    user = make_user("client", name="Cleo Client")

    resp = client.get("/api/auth/me", headers=user["headers"])
    assert resp.status_code == 200
    body = resp.json()
    assert body["user_id"] == user["id"]
    assert body["role"] == "client"
    assert body["name"] == "Cleo Client"


def test_login_with_wrong_password(client, make_user):
    user = make_user("client")
    resp = client.post("/api/auth/login", json={"email": user["email"], "password": "wrong-password"})
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid email or password"}


def test_deactivated_account(client, make_user):
    user = make_user("talent")
    with get_db_session() as db:
        db.execute(text("UPDATE users SET is_active = :a WHERE id = :id"), {"a": False, "id": user["id"]})

    assert client.post("/api/auth/login", json={"email": user["email"], "password": "password123"}).status_code == 403
    assert client.get("/api/auth/me", headers=user["headers"]).status_code == 403


def test_deactivated_account_with_wrong_password_looks_like_bad_credentials(client, make_user):
    user = make_user("talent")
    with get_db_session() as db:
        db.execute(text("UPDATE users SET is_active = :a WHERE id = :id"), {"a": False, "id": user["id"]})

    resp = client.post("/api/auth/login", json={"email": user["email"], "password": "wrong-password"})
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid email or password"}
