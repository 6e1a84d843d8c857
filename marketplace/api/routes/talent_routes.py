"""
Talent Routes

GET /talents - Browse talents (client only; ?search, ?experience, ?skills=a,b)
GET /talents/{user_id} - Verified talent detail with verification summary
GET /talent/profile - Own talent profile
PUT /talent/profile - Update own talent profile
GET /tier/progress - Current tier, stats and progress to the next tier
POST /tier/progress - Upgrade tier when eligible
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import text

from marketplace.client.filters import parse_csv
from marketplace.db.database import get_db_session, fetch_one, to_json_list
from marketplace.core.auth import get_current_user
from marketplace.core.guards import require_roles
from marketplace.core.logging import get_logger
from marketplace.core.tiers import (
    calculate_eligible_tier, calculate_progress_to_next_tier, get_tier_config, should_upgrade_tier
)
from marketplace.services.directory_service import get_talent_row, list_talents, talent_detail_from_row
from marketplace.schemas.schemas import TalentListResponse, TalentProfileUpdate

router = APIRouter(tags=["Talents"])
logger = get_logger(__name__)

VERIFICATION_SUMMARY_FIELDS = [
    "portfolio_reviewed", "portfolio_score", "code_sample_reviewed", "code_sample_score",
    "github_username", "gitlab_username", "linkedin_url", "linkedin_verified",
    "identity_verified", "overall_score", "verification_decision", "reviewed_at",
]


def _load_talent_profile(user_id: str) -> dict:
    row = fetch_one(
        "SELECT id, tier, active_picks, completed_projects, success_rate, total_earnings "
        "FROM talent_profiles WHERE user_id = :id",
        {"id": user_id}
    )
    if not row:
        raise HTTPException(status_code=404, detail="Talent profile not found")
    return dict(row)


def _tier_payload(profile: dict) -> dict:
    return {
        **get_tier_config(profile["tier"]),
        "stats": {
            "active_picks": profile["active_picks"],
            "completed_projects": profile["completed_projects"],
            "success_rate": float(profile["success_rate"]),
            "total_earnings": float(profile["total_earnings"]),
        },
    }


# ============================================================
# BROWSE
# ============================================================

@router.get("/talents", response_model=TalentListResponse)
async def browse_talents(
    search: str = Query(""),
    experience: Optional[str] = Query(None),
    skills: Optional[str] = Query(None, description="Comma separated skills"),
    client: dict = Depends(require_roles("client")),
):
    """Talents newest first, narrowed by search text, experience level and any-of skills."""
    return TalentListResponse(talents=list_talents(search, experience, parse_csv(skills)))


@router.get("/talents/{user_id}")
async def get_talent(user_id: str):
    """Public detail of a verified talent. Unverified talents are hidden with 403."""
    row = get_talent_row(user_id)
    if not row:
        raise HTTPException(status_code=404, detail="Talent not found")
    if row["verification_status"] != "verified":
        raise HTTPException(status_code=403, detail="Talent not available")

    verification = fetch_one(
        "SELECT * FROM talent_verifications WHERE talent_profile_id = :id", {"id": row["id"]}
    )

    return {
        "id": row["user_id"],
        "name": row["name"],
        "email": row["email"],
        "profile": talent_detail_from_row(row).model_dump(),
        "verification": (
            {field: verification[field] for field in VERIFICATION_SUMMARY_FIELDS} if verification else None
        ),
    }


# ============================================================
# OWN PROFILE
# ============================================================

@router.get("/talent/profile")
async def get_own_profile(talent: dict = Depends(require_roles("talent"))):
    row = get_talent_row(talent["user_id"])
    if not row:
        raise HTTPException(status_code=404, detail="Talent profile not found")
    return {"profile": talent_detail_from_row(row).model_dump()}


@router.put("/talent/profile")
async def update_own_profile(update: TalentProfileUpdate, talent: dict = Depends(require_roles("talent"))):
    """Partial update: only fields present in the body are written."""
    changes = update.model_dump(exclude_unset=True)
    for list_field in ("skills", "certifications"):
        if list_field in changes:
            changes[list_field] = to_json_list(changes[list_field])

    if changes:
        assignments = ", ".join(f"{field} = :{field}" for field in changes)
        with get_db_session() as db:
            db.execute(
                text(f"UPDATE talent_profiles SET {assignments} WHERE user_id = :user_id"),
                {**changes, "user_id": talent["user_id"]}
            )
        logger.info("Talent %s updated profile fields: %s", talent["user_id"], ", ".join(changes))

    row = get_talent_row(talent["user_id"])
    if not row:
        raise HTTPException(status_code=404, detail="Talent profile not found")
    return {"profile": talent_detail_from_row(row).model_dump()}


# ============================================================
# TIERS
# ============================================================

@router.get("/tier/progress")
async def get_tier_progress(user: dict = Depends(get_current_user)):
    profile = _load_talent_profile(user["user_id"])
    args = (profile["tier"], profile["completed_projects"], profile["success_rate"], profile["total_earnings"])

    return {
        "current_tier": _tier_payload(profile),
        "progress": calculate_progress_to_next_tier(*args),
        "can_upgrade": should_upgrade_tier(*args),
    }


@router.post("/tier/progress")
async def upgrade_tier(user: dict = Depends(get_current_user)):
    """Move the talent to the highest tier their stats qualify for."""
    profile = _load_talent_profile(user["user_id"])
    if not should_upgrade_tier(
        profile["tier"], profile["completed_projects"], profile["success_rate"], profile["total_earnings"]
    ):
        raise HTTPException(status_code=400, detail="Not eligible for tier upgrade")

    new_tier = calculate_eligible_tier(
        profile["completed_projects"], profile["success_rate"], profile["total_earnings"]
    )
    with get_db_session() as db:
        db.execute(
            text("UPDATE talent_profiles SET tier = :tier WHERE id = :id"),
            {"tier": new_tier, "id": profile["id"]}
        )

    logger.info("Talent %s upgraded from %s to %s at %s", user["user_id"], profile["tier"], new_tier,
                datetime.utcnow().isoformat())
    profile["tier"] = new_tier
    config = get_tier_config(new_tier)
    return {
        "success": True,
        "message": f"Congratulations! You've been upgraded to {config['display_name']} tier!",
        "new_tier": _tier_payload(profile),
    }
