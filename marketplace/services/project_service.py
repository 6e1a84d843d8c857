"""
Project Service - shared project queries and access checks for the API and page views.
"""

from typing import List, Optional

from sqlalchemy import text

from marketplace.db.database import fetch_all, from_json_list
from marketplace.schemas.schemas import ProjectResponse, UserSummary

PROJECT_SELECT = """
    SELECT p.id, p.title, p.description, p.budget, p.deadline, p.category, p.skills,
           p.project_type, p.status, p.minimum_tier, p.created_at,
           u.id AS client_id, u.name AS client_name, u.email AS client_email
    FROM projects p
    JOIN users u ON p.client_id = u.id
"""


def project_from_row(r: dict) -> ProjectResponse:
    return ProjectResponse(
        id=r["id"], title=r["title"], description=r["description"],
        budget=float(r["budget"]), deadline=r["deadline"], category=r["category"],
        skills=from_json_list(r["skills"]), project_type=r["project_type"],
        status=r["status"], minimum_tier=r["minimum_tier"],
        client=UserSummary(id=r["client_id"], name=r["client_name"], email=r["client_email"]),
        created_at=r["created_at"]
    )


def list_projects(client_id: Optional[str] = None) -> List[ProjectResponse]:
    """All projects newest first, optionally only one client's."""
    sql = PROJECT_SELECT
    params = {}
    if client_id:
        sql += " WHERE p.client_id = :client_id"
        params["client_id"] = client_id
    sql += " ORDER BY p.created_at DESC"
    return [project_from_row(r) for r in fetch_all(sql, params)]


def get_project(project_id: str) -> Optional[ProjectResponse]:
    rows = fetch_all(PROJECT_SELECT + " WHERE p.id = :id", {"id": project_id})
    return project_from_row(rows[0]) if rows else None


def project_client_id(db, project_id: str) -> Optional[str]:
    """Owning client's user id, or None when the project does not exist."""
    return db.execute(text("SELECT client_id FROM projects WHERE id = :id"), {"id": project_id}).scalar()


def is_project_member(db, project_id: str, user_id: str) -> bool:
    """True when ``user_id`` has an accepted application on the project."""
    row = db.execute(
        text("""
            SELECT id FROM applications
            WHERE project_id = :pid AND talent_id = :uid AND status = 'accepted'
        """),
        {"pid": project_id, "uid": user_id}
    ).fetchone()
    return row is not None
