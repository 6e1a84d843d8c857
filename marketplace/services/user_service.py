"""
User Service - account creation and participant lookups shared by several routers.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import text

from marketplace.core.auth import hash_password
from marketplace.db.database import new_id

PROFILE_TABLES = {
    "client": "client_profiles",
    "talent": "talent_profiles",
    "agency": "agency_profiles",
    "trainer": "trainer_profiles",
}


class EmailTakenError(Exception):
    pass


def _split_name(name: Optional[str]):
    parts = (name or "").strip().split(" ", 1)
    first = parts[0] or None
    last = parts[1] if len(parts) > 1 else None
    return first, last


def create_user(
    db,
    email: str,
    password: str,
    name: str,
    role: str,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    company_name: Optional[str] = None,
    agency_name: Optional[str] = None,
) -> str:
    """
    Insert a user and the empty profile row for its role. Returns the user id.

    Raises EmailTakenError when the email is already registered.
    """
    if db.execute(text("SELECT id FROM users WHERE email = :email"), {"email": email}).fetchone():
        raise EmailTakenError(email)

    now = datetime.utcnow()
    user_id = new_id()
    db.execute(
        text("""
            INSERT INTO users (id, email, name, password_hash, role, is_active, created_at)
            VALUES (:id, :email, :name, :password_hash, :role, :is_active, :created_at)
        """),
        {
            "id": user_id, "email": email, "name": name,
            "password_hash": hash_password(password), "role": role,
            "is_active": True, "created_at": now,
        }
    )

    if not first_name and not last_name:
        first_name, last_name = _split_name(name)

    params = {"id": new_id(), "user_id": user_id, "first": first_name, "last": last_name, "now": now}
    if role == "client":
        db.execute(
            text("""
                INSERT INTO client_profiles (id, user_id, first_name, last_name, company_name, created_at)
                VALUES (:id, :user_id, :first, :last, :company_name, :now)
            """),
            {**params, "company_name": company_name}
        )
    elif role == "talent":
        db.execute(
            text("""
                INSERT INTO talent_profiles (id, user_id, first_name, last_name, created_at)
                VALUES (:id, :user_id, :first, :last, :now)
            """),
            params
        )
    elif role == "agency":
        db.execute(
            text("""
                INSERT INTO agency_profiles (id, user_id, first_name, last_name, agency_name, created_at)
                VALUES (:id, :user_id, :first, :last, :agency_name, :now)
            """),
            {**params, "agency_name": agency_name or name}
        )
    elif role == "trainer":
        db.execute(
            text("""
                INSERT INTO trainer_profiles (id, user_id, first_name, last_name, created_at, updated_at)
                VALUES (:id, :user_id, :first, :last, :now, :now)
            """),
            params
        )

    return user_id


def display_name(user: dict, profile: Optional[dict]) -> str:
    """Best human label for a user: profile names, then company/agency name, then account name/email."""
    profile = profile or {}
    first, last = profile.get("first_name"), profile.get("last_name")
    if first and last:
        return f"{first} {last}"
    for key in ("company_name", "agency_name"):
        if profile.get(key):
            return profile[key]
    return user.get("name") or user.get("email") or "Unknown User"


def get_participant(db, user_id: str) -> Optional[dict]:
    """User summary with role and display name, or None for unknown ids."""
    user = db.execute(
        text("SELECT id, name, email, role FROM users WHERE id = :id"),
        {"id": user_id}
    ).mappings().fetchone()
    if not user:
        return None

    user = dict(user)
    profile = None
    table = PROFILE_TABLES.get(user["role"])
    if table:
        columns = "first_name, last_name"
        if table == "client_profiles":
            columns += ", company_name"
        elif table == "agency_profiles":
            columns += ", agency_name"
        row = db.execute(
            text(f"SELECT {columns} FROM {table} WHERE user_id = :id"),
            {"id": user_id}
        ).mappings().fetchone()
        profile = dict(row) if row else None

    user["display_name"] = display_name(user, profile)
    return user
