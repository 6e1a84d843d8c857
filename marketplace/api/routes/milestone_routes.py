"""
Milestone Routes

GET /milestones - A project's milestones by start date (?project_id=)
POST /milestones - Add a milestone (project owner)
PUT /milestones - Change a milestone (project owner)
DELETE /milestones - Remove a milestone (?milestone_id=, project owner)

The owning client and talents with an accepted application can read
milestones; only the owning client can change them.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import text

from marketplace.db.database import get_db_session, fetch_all, fetch_one, new_id
from marketplace.core.auth import get_current_user
from marketplace.core.logging import get_logger
from marketplace.services.project_service import is_project_member, project_client_id
from marketplace.schemas.schemas import (
    MessageResponse, MilestoneCreate, MilestoneEnvelope, MilestoneListResponse, MilestoneOut,
    MilestoneStatus, MilestoneUpdate
)

router = APIRouter(prefix="/milestones", tags=["Milestones"])
logger = get_logger(__name__)

MILESTONE_SELECT = """
    SELECT id, project_id, title, description, amount, start_date, end_date, status,
           completed_at, created_by, created_at, updated_at
    FROM milestones
"""


def _load_milestone(milestone_id: str) -> MilestoneOut:
    return MilestoneOut(**fetch_one(MILESTONE_SELECT + " WHERE id = :id", {"id": milestone_id}))


def _require_owner(db, project_id: str, user_id: str) -> None:
    client_id = project_client_id(db, project_id)
    if client_id is None:
        raise HTTPException(status_code=404, detail="Project not found")
    if client_id != user_id:
        raise HTTPException(status_code=403, detail="Only the project owner can manage milestones")


def _owned_milestone(db, milestone_id: str, user_id: str) -> dict:
    milestone = db.execute(
        text("SELECT id, project_id, status FROM milestones WHERE id = :id"),
        {"id": milestone_id}
    ).mappings().fetchone()
    if not milestone:
        raise HTTPException(status_code=404, detail="Milestone not found")
    _require_owner(db, milestone["project_id"], user_id)
    return dict(milestone)


@router.get("", response_model=MilestoneListResponse)
async def list_milestones(project_id: Optional[str] = Query(None), user: dict = Depends(get_current_user)):
    if not project_id:
        raise HTTPException(status_code=400, detail="Project ID is required")

    with get_db_session() as db:
        client_id = project_client_id(db, project_id)
        if client_id is None:
            raise HTTPException(status_code=404, detail="Project not found")
        if client_id != user["user_id"] and not is_project_member(db, project_id, user["user_id"]):
            raise HTTPException(status_code=403, detail="You do not have access to this project")

    rows = fetch_all(MILESTONE_SELECT + " WHERE project_id = :pid ORDER BY start_date ASC", {"pid": project_id})
    return MilestoneListResponse(milestones=[MilestoneOut(**r) for r in rows])


@router.post("", response_model=MilestoneEnvelope, status_code=201)
async def create_milestone(milestone: MilestoneCreate, user: dict = Depends(get_current_user)):
    """New milestones always start pending."""
    milestone_id = new_id()
    now = datetime.utcnow()
    with get_db_session() as db:
        _require_owner(db, milestone.project_id, user["user_id"])
        db.execute(
            text("""
                INSERT INTO milestones (id, project_id, title, description, amount, start_date, end_date,
                    status, created_by, created_at, updated_at)
                VALUES (:id, :pid, :title, :description, :amount, :start_date, :end_date,
                    :status, :created_by, :now, :now)
            """),
            {
                "id": milestone_id, "pid": milestone.project_id, "title": milestone.title,
                "description": milestone.description or None, "amount": milestone.amount,
                "start_date": milestone.start_date, "end_date": milestone.end_date,
                "status": MilestoneStatus.pending.value, "created_by": user["user_id"], "now": now
            }
        )

    logger.info("User %s added milestone %s to project %s", user["user_id"], milestone_id, milestone.project_id)
    return MilestoneEnvelope(milestone=_load_milestone(milestone_id))


@router.put("", response_model=MilestoneEnvelope)
async def update_milestone(update: MilestoneUpdate, user: dict = Depends(get_current_user)):
    """
    Apply the fields that were sent. Moving to completed stamps completed_at once;
    moving to any other status clears it.
    """
    changes = update.model_dump(exclude_unset=True, exclude={"milestone_id"})
    # description is the only column that may be cleared
    changes = {k: v for k, v in changes.items() if v is not None or k == "description"}
    if "description" in changes:
        changes["description"] = changes["description"] or None

    now = datetime.utcnow()
    with get_db_session() as db:
        milestone = _owned_milestone(db, update.milestone_id, user["user_id"])

        if "status" in changes:
            status = changes["status"]
            changes["status"] = status.value
            if status != MilestoneStatus.completed:
                changes["completed_at"] = None
            elif milestone["status"] != MilestoneStatus.completed.value:
                changes["completed_at"] = now

        changes["updated_at"] = now
        assignments = ", ".join(f"{column} = :{column}" for column in changes)
        db.execute(
            text(f"UPDATE milestones SET {assignments} WHERE id = :id"),
            {**changes, "id": update.milestone_id}
        )

    return MilestoneEnvelope(milestone=_load_milestone(update.milestone_id))


@router.delete("", response_model=MessageResponse)
async def delete_milestone(milestone_id: Optional[str] = Query(None), user: dict = Depends(get_current_user)):
    if not milestone_id:
        raise HTTPException(status_code=400, detail="Milestone ID is required")

    with get_db_session() as db:
        _owned_milestone(db, milestone_id, user["user_id"])
        db.execute(text("DELETE FROM milestones WHERE id = :id"), {"id": milestone_id})

    logger.info("User %s deleted milestone %s", user["user_id"], milestone_id)
    return MessageResponse(message="Milestone deleted successfully")
