"""
Application Routes

POST /applications - Apply to a project (talent or agency)
GET /applications - List applications (?talent_id, ?project_id, ?status)
PATCH /applications - Accept/reject an application (owning client)
POST /applications/pick - Pick an application (tier-capped)
DELETE /applications/pick - Release a pick (?application_id=)
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import text

from marketplace.db.database import get_db_session, fetch_all, new_id
from marketplace.core.auth import get_current_user
from marketplace.core.guards import require_roles
from marketplace.core.logging import get_logger
from marketplace.core.tiers import can_pick_project, get_max_concurrent_picks
from marketplace.services.notification_service import create_notification
from marketplace.services.project_service import get_project
from marketplace.schemas.schemas import (
    ApplicantSummary, ApplicationCreate, ApplicationCreatedResponse, ApplicationListResponse,
    ApplicationResponse, ApplicationStatus, ApplicationStatusUpdate, MessageResponse,
    PickRequest, PickResponse, ProjectStatus
)

router = APIRouter(prefix="/applications", tags=["Applications"])
logger = get_logger(__name__)

APPLICATION_SELECT = """
    SELECT a.id, a.project_id, a.talent_id, a.cover_letter, a.proposed_rate, a.status,
           a.is_picked, a.picked_at, a.created_at,
           u.name AS talent_name, u.email AS talent_email,
           t.first_name, t.last_name, t.title AS talent_title, t.tier
    FROM applications a
    JOIN users u ON a.talent_id = u.id
    LEFT JOIN talent_profiles t ON t.user_id = u.id
"""


def _application_from_row(r: dict) -> ApplicationResponse:
    return ApplicationResponse(
        id=r["id"], project_id=r["project_id"], talent_id=r["talent_id"],
        cover_letter=r["cover_letter"],
        proposed_rate=float(r["proposed_rate"]) if r["proposed_rate"] is not None else None,
        status=r["status"], is_picked=bool(r["is_picked"]), picked_at=r["picked_at"],
        created_at=r["created_at"], project=get_project(r["project_id"]),
        talent=ApplicantSummary(
            id=r["talent_id"], name=r["talent_name"], email=r["talent_email"],
            first_name=r["first_name"], last_name=r["last_name"],
            title=r["talent_title"], tier=r["tier"]
        )
    )


def _load_application(application_id: str) -> ApplicationResponse:
    rows = fetch_all(APPLICATION_SELECT + " WHERE a.id = :id", {"id": application_id})
    return _application_from_row(rows[0])


def _set_project_status(db, project_id: str, status: ProjectStatus, now: datetime) -> None:
    db.execute(
        text("UPDATE projects SET status = :status, updated_at = :now WHERE id = :id"),
        {"status": status.value, "now": now, "id": project_id}
    )


@router.post("", response_model=ApplicationCreatedResponse, status_code=201)
async def apply_to_project(
    application: ApplicationCreate, user: dict = Depends(require_roles("talent", "agency"))
):
    """Apply to an open project. One application per project; the client gets notified."""
    application_id = new_id()
    now = datetime.utcnow()
    with get_db_session() as db:
        project = db.execute(
            text("SELECT id, title, status, client_id FROM projects WHERE id = :id"),
            {"id": application.project_id}
        ).mappings().fetchone()
        if not project:
            raise HTTPException(status_code=404, detail="Project not found")
        if project["status"] != ProjectStatus.open.value:
            raise HTTPException(status_code=400, detail="This project is no longer accepting applications")

        existing = db.execute(
            text("SELECT id FROM applications WHERE project_id = :pid AND talent_id = :tid"),
            {"pid": application.project_id, "tid": user["user_id"]}
        ).fetchone()
        if existing:
            raise HTTPException(status_code=400, detail="You have already applied to this project")

        db.execute(
            text("""
                INSERT INTO applications (id, project_id, talent_id, cover_letter, proposed_rate,
                    status, is_picked, created_at, updated_at)
                VALUES (:id, :pid, :tid, :cover, :rate, 'pending', :is_picked, :now, :now)
            """),
            {
                "id": application_id, "pid": application.project_id, "tid": user["user_id"],
                "cover": application.cover_letter, "rate": application.proposed_rate,
                "is_picked": False, "now": now
            }
        )

        applicant_name, applicant_type = user.get("name") or "Someone", "developer"
        if user["role"] == "agency":
            applicant_name, applicant_type = user.get("name") or "An agency", "agency"
        else:
            profile = db.execute(
                text("SELECT first_name, last_name FROM talent_profiles WHERE user_id = :id"),
                {"id": user["user_id"]}
            ).fetchone()
            if profile and profile[0] and profile[1]:
                applicant_name = f"{profile[0]} {profile[1]}"

        create_notification(
            db,
            user_id=project["client_id"],
            type="project_picked",
            title="Your Project Has Been Picked",
            message=f'{applicant_name} ({applicant_type}) has picked your project "{project["title"]}".',
            related_project_id=project["id"],
        )

    logger.info("User %s applied to project %s", user["user_id"], application.project_id)
    return ApplicationCreatedResponse(
        message="Application submitted successfully", application=_load_application(application_id)
    )


@router.get("", response_model=ApplicationListResponse)
async def list_applications(
    talent_id: Optional[str] = Query(None),
    project_id: Optional[str] = Query(None),
    status: Optional[ApplicationStatus] = Query(None),
    user: dict = Depends(get_current_user),
):
    """List applications newest first with optional filters."""
    sql = APPLICATION_SELECT + " WHERE 1 = 1"
    params = {}
    if talent_id:
        sql += " AND a.talent_id = :talent_id"
        params["talent_id"] = talent_id
    if project_id:
        sql += " AND a.project_id = :project_id"
        params["project_id"] = project_id
    if status:
        sql += " AND a.status = :status"
        params["status"] = status.value
    sql += " ORDER BY a.created_at DESC"

    return ApplicationListResponse(applications=[_application_from_row(r) for r in fetch_all(sql, params)])


@router.patch("", response_model=ApplicationCreatedResponse)
async def update_application_status(
    update: ApplicationStatusUpdate, client: dict = Depends(require_roles("client"))
):
    """
    Accept, reject or reset an application. Only the client owning the project may do this.
    Accepting moves the project to in_progress.
    """
    with get_db_session() as db:
        application = db.execute(
            text("""
                SELECT a.id, a.talent_id, a.project_id, p.client_id, p.title
                FROM applications a JOIN projects p ON a.project_id = p.id
                WHERE a.id = :id
            """),
            {"id": update.application_id}
        ).mappings().fetchone()
        if not application:
            raise HTTPException(status_code=404, detail="Application not found")
        if application["client_id"] != client["user_id"]:
            raise HTTPException(status_code=403, detail="You can only update applications for your own projects")

        now = datetime.utcnow()
        db.execute(
            text("UPDATE applications SET status = :status, updated_at = :now WHERE id = :id"),
            {"status": update.status.value, "now": now, "id": update.application_id}
        )

        if update.status == ApplicationStatus.accepted:
            _set_project_status(db, application["project_id"], ProjectStatus.in_progress, now)
            create_notification(
                db,
                user_id=application["talent_id"],
                type="application_accepted",
                title="Your Application Was Accepted!",
                message=f'Congratulations! Your application for "{application["title"]}" has been accepted by the client.',
                related_project_id=application["project_id"],
                related_application_id=application["id"],
            )
        elif update.status == ApplicationStatus.rejected:
            create_notification(
                db,
                user_id=application["talent_id"],
                type="application_rejected",
                title="Application Update",
                message=f'Your application for "{application["title"]}" was not selected this time.',
                related_project_id=application["project_id"],
                related_application_id=application["id"],
            )

    return ApplicationCreatedResponse(
        message="Application status updated successfully",
        application=_load_application(update.application_id)
    )


@router.post("/pick", response_model=PickResponse)
async def pick_application(request: PickRequest, user: dict = Depends(get_current_user)):
    """Pick one of your own applications. Concurrent picks are capped by tier."""
    with get_db_session() as db:
        profile = db.execute(
            text("SELECT id, tier, active_picks FROM talent_profiles WHERE user_id = :id"),
            {"id": user["user_id"]}
        ).mappings().fetchone()
        if not profile:
            raise HTTPException(status_code=404, detail="Talent profile not found")

        if not can_pick_project(profile["active_picks"], profile["tier"]):
            raise HTTPException(
                status_code=403,
                detail=(
                    f"You have reached your maximum concurrent picks "
                    f"({get_max_concurrent_picks(profile['tier'])}) for {profile['tier']} tier"
                ),
            )

        application = db.execute(
            text("SELECT id, talent_id, project_id, is_picked FROM applications WHERE id = :id"),
            {"id": request.application_id}
        ).mappings().fetchone()
        if not application:
            raise HTTPException(status_code=404, detail="Application not found")
        if application["talent_id"] != user["user_id"]:
            raise HTTPException(status_code=403, detail="Unauthorized to pick this application")
        if application["is_picked"]:
            raise HTTPException(status_code=400, detail="Application already picked")

        now = datetime.utcnow()
        db.execute(
            text("""
                UPDATE applications SET is_picked = :picked, picked_at = :now, status = 'accepted',
                    updated_at = :now
                WHERE id = :id
            """),
            {"picked": True, "now": now, "id": application["id"]}
        )
        db.execute(
            text("UPDATE talent_profiles SET active_picks = active_picks + 1 WHERE id = :id"),
            {"id": profile["id"]}
        )
        _set_project_status(db, application["project_id"], ProjectStatus.in_progress, now)

    return PickResponse(
        application=_load_application(request.application_id),
        active_picks=profile["active_picks"] + 1
    )


@router.delete("/pick", response_model=MessageResponse)
async def unpick_application(
    application_id: Optional[str] = Query(None), user: dict = Depends(get_current_user)
):
    """Release a pick: application back to pending, project reopened."""
    if not application_id:
        raise HTTPException(status_code=400, detail="Application ID is required")

    with get_db_session() as db:
        application = db.execute(
            text("SELECT id, talent_id, project_id, is_picked FROM applications WHERE id = :id"),
            {"id": application_id}
        ).mappings().fetchone()
        if not application:
            raise HTTPException(status_code=404, detail="Application not found")
        if application["talent_id"] != user["user_id"]:
            raise HTTPException(status_code=403, detail="Unauthorized to unpick this application")
        if not application["is_picked"]:
            raise HTTPException(status_code=400, detail="Application is not picked")

        now = datetime.utcnow()
        db.execute(
            text("""
                UPDATE applications SET is_picked = :picked, picked_at = NULL, status = 'pending',
                    updated_at = :now
                WHERE id = :id
            """),
            {"picked": False, "now": now, "id": application_id}
        )
        db.execute(
            text("""
                UPDATE talent_profiles SET active_picks = active_picks - 1
                WHERE user_id = :uid AND active_picks > 0
            """),
            {"uid": user["user_id"]}
        )
        _set_project_status(db, application["project_id"], ProjectStatus.open, now)

    return MessageResponse(message="Project unpicked successfully")
