"""
Trainer Routes

GET /trainer/profile - Own trainer profile
PUT /trainer/profile - Replace own trainer profile (first and last name required)
"""

from datetime import datetime

from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy import text

from marketplace.db.database import get_db_session, fetch_one, from_json_list, to_json_list
from marketplace.core.guards import require_roles
from marketplace.core.logging import get_logger
from marketplace.schemas.schemas import TrainerProfileResponse, TrainerProfileUpdate

router = APIRouter(prefix="/trainer", tags=["Trainers"])
logger = get_logger(__name__)


def _load_trainer_profile(user_id: str) -> TrainerProfileResponse:
    row = fetch_one("SELECT * FROM trainer_profiles WHERE user_id = :id", {"id": user_id})
    if not row:
        raise HTTPException(status_code=404, detail="Trainer profile not found")
    row["skills"] = from_json_list(row["skills"])
    row["certifications"] = from_json_list(row["certifications"])
    return TrainerProfileResponse(**{k: v for k, v in row.items() if k != "created_at"})


@router.get("/profile", response_model=TrainerProfileResponse)
async def get_trainer_profile(trainer: dict = Depends(require_roles("trainer"))):
    return _load_trainer_profile(trainer["user_id"])


@router.put("/profile", response_model=TrainerProfileResponse)
async def update_trainer_profile(
    update: TrainerProfileUpdate, trainer: dict = Depends(require_roles("trainer"))
):
    """Full replace: optional fields left out of the body are cleared."""
    if not update.first_name or not update.last_name:
        raise HTTPException(status_code=400, detail="First name and last name are required")

    with get_db_session() as db:
        result = db.execute(
            text("""
                UPDATE trainer_profiles
                SET first_name = :first_name, last_name = :last_name, title = :title,
                    specialization = :specialization, bio = :bio, skills = :skills,
                    experience = :experience, certifications = :certifications,
                    hourly_rate = :hourly_rate, website = :website, location = :location,
                    updated_at = :now
                WHERE user_id = :user_id
            """),
            {
                **update.model_dump(),
                "skills": to_json_list(update.skills),
                "certifications": to_json_list(update.certifications),
                "now": datetime.utcnow(),
                "user_id": trainer["user_id"],
            }
        )
        if result.rowcount == 0:
            raise HTTPException(status_code=404, detail="Trainer profile not found")

    logger.info("Trainer %s updated profile", trainer["user_id"])
    return _load_trainer_profile(trainer["user_id"])
