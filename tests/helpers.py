"""Direct database tweaks for states the API does not expose."""

from sqlalchemy import text

from marketplace.db.database import get_db_session


def set_project_status(project_id, status):
    with get_db_session() as db:
        db.execute(text("UPDATE projects SET status = :s WHERE id = :id"), {"s": status, "id": project_id})


def set_talent_fields(user_id, **fields):
    assignments = ", ".join(f"{k} = :{k}" for k in fields)
    with get_db_session() as db:
        db.execute(
            text(f"UPDATE talent_profiles SET {assignments} WHERE user_id = :uid"),
            {**fields, "uid": user_id},
        )


def talent_profile_id(user_id):
    with get_db_session() as db:
        return db.execute(
            text("SELECT id FROM talent_profiles WHERE user_id = :uid"), {"uid": user_id}
        ).scalar()
