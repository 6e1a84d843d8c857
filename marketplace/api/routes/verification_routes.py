"""
Verification Routes

GET /verification/status - My verification status, progress and checklist
POST /verification/submit - Submit portfolio / code / LinkedIn details for review
GET /admin/verify-talent - Talents waiting for review (admin)
GET /admin/verify-talent/{talent_profile_id} - Verification record and archive history (admin)
POST /admin/verify-talent - Approve or reject a talent (admin)

The relational talent_verifications row holds the current state. Every
submission and review is also archived to MongoDB.
"""

from datetime import datetime

from fastapi import APIRouter, HTTPException, Depends
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from sqlalchemy import text

from marketplace.db.database import get_db_session, fetch_all, from_json_list, new_id
from marketplace.core.auth import get_current_user
from marketplace.core.guards import require_roles
from marketplace.core.logging import get_logger
from marketplace.core.verification import (
    calculate_overall_score, calculate_verification_progress, extract_github_username,
    generate_verification_checklist, get_status_info, is_valid_gitlab_username, is_valid_linkedin_url
)
from marketplace.services.mongo_service import VerificationReviewService, VerificationSubmissionService
from marketplace.schemas.schemas import ReviewDecision, VerificationReview, VerificationSubmit

router = APIRouter(tags=["Verification"])
logger = get_logger(__name__)

SCORE_FIELDS = [
    "portfolio_score", "code_sample_score", "skill_tests_score", "overall_score",
    "verification_decision", "rejection_reason", "reviewed_at",
]


def _talent_profile(db, column: str, value: str) -> dict:
    """Look a talent profile up by ``id`` or ``user_id``."""
    row = db.execute(
        text(f"SELECT id, user_id, portfolio_url, verification_status, platform_access "
             f"FROM talent_profiles WHERE {column} = :value"),
        {"value": value}
    ).mappings().fetchone()
    if not row:
        raise HTTPException(status_code=404, detail="Talent profile not found")
    return dict(row)


def _verification_row(db, talent_profile_id: str):
    row = db.execute(
        text("SELECT * FROM talent_verifications WHERE talent_profile_id = :id"),
        {"id": talent_profile_id}
    ).mappings().fetchone()
    if not row:
        return None
    row = dict(row)
    row["skill_tests_taken"] = from_json_list(row["skill_tests_taken"])
    return row


@router.get("/verification/status")
async def verification_status(user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        profile = _talent_profile(db, "user_id", user["user_id"])
        verification = _verification_row(db, profile["id"])

    return {
        "verification_status": profile["verification_status"],
        "platform_access": bool(profile["platform_access"]),
        "status_info": get_status_info(profile["verification_status"]),
        "progress": calculate_verification_progress(verification),
        "checklist": generate_verification_checklist(),
        "verification": {field: verification[field] for field in SCORE_FIELDS} if verification else None,
    }


@router.post("/verification/submit")
async def submit_verification(submission: VerificationSubmit, user: dict = Depends(get_current_user)):
    """
    Validate the handles, move the profile to in_review and upsert the verification record.
    Invalid handles return 400 with an ``errors`` list.
    """
    errors = []
    github_username = None
    if submission.github_username:
        github_username = extract_github_username(submission.github_username)
        if not github_username:
            errors.append("Invalid GitHub username format")
    if submission.gitlab_username and not is_valid_gitlab_username(submission.gitlab_username):
        errors.append("Invalid GitLab username format")
    if submission.linkedin_url and not is_valid_linkedin_url(submission.linkedin_url):
        errors.append("Invalid LinkedIn URL format")

    now = datetime.utcnow()
    with get_db_session() as db:
        profile = _talent_profile(db, "user_id", user["user_id"])
        if errors:
            return JSONResponse(status_code=400, content={"errors": errors})

        db.execute(
            text("""
                UPDATE talent_profiles
                SET portfolio_url = :portfolio_url,
                    portfolio_projects = COALESCE(:portfolio_projects, portfolio_projects),
                    verification_status = 'in_review'
                WHERE id = :id
            """),
            {
                "portfolio_url": submission.portfolio_url or profile["portfolio_url"],
                "portfolio_projects": submission.portfolio_projects or None,
                "id": profile["id"],
            }
        )

        values = {
            "github_username": github_username,
            "gitlab_username": submission.gitlab_username,
            "code_repository_url": submission.code_repository_url,
            "linkedin_url": submission.linkedin_url,
        }
        if _verification_row(db, profile["id"]):
            # Omitted fields keep their previous value
            db.execute(
                text("""
                    UPDATE talent_verifications
                    SET github_username = COALESCE(:github_username, github_username),
                        gitlab_username = COALESCE(:gitlab_username, gitlab_username),
                        code_repository_url = COALESCE(:code_repository_url, code_repository_url),
                        linkedin_url = COALESCE(:linkedin_url, linkedin_url),
                        updated_at = :now
                    WHERE talent_profile_id = :tpid
                """),
                {**values, "now": now, "tpid": profile["id"]}
            )
        else:
            db.execute(
                text("""
                    INSERT INTO talent_verifications (id, talent_profile_id, github_username,
                        gitlab_username, code_repository_url, linkedin_url, created_at, updated_at)
                    VALUES (:id, :tpid, :github_username, :gitlab_username, :code_repository_url,
                        :linkedin_url, :now, :now)
                """),
                {**values, "id": new_id(), "tpid": profile["id"], "now": now}
            )

    try:
        VerificationSubmissionService().insert(
            user["user_id"], profile["id"], submission.model_dump(exclude_none=True)
        )
    except PyMongoError as e:
        logger.warning("Verification submission for %s not archived: %s", profile["id"], e)

    logger.info("Talent %s submitted verification", user["user_id"])
    return {
        "success": True,
        "message": "Verification submission received. Our team will review it shortly.",
    }


@router.get("/admin/verify-talent")
async def pending_verifications(admin: dict = Depends(require_roles("admin"))):
    """Talents still pending or in review, oldest first."""
    rows = fetch_all("""
        SELECT t.id, t.user_id, t.first_name, t.last_name, t.title, t.verification_status,
               t.created_at, u.name, u.email
        FROM talent_profiles t JOIN users u ON t.user_id = u.id
        WHERE t.verification_status IN ('pending', 'in_review')
        ORDER BY t.created_at ASC
    """)
    return {"pending_talents": rows, "count": len(rows)}


@router.get("/admin/verify-talent/{talent_profile_id}")
async def verification_history(talent_profile_id: str, admin: dict = Depends(require_roles("admin"))):
    """Current verification record plus the archived submissions and the latest archived review."""
    with get_db_session() as db:
        profile = _talent_profile(db, "id", talent_profile_id)
        verification = _verification_row(db, profile["id"])

    submissions, latest_review = [], None
    try:
        submissions = VerificationSubmissionService().list_for_user(profile["user_id"])
        latest_review = VerificationReviewService().latest(profile["id"])
    except PyMongoError as e:
        logger.warning("Verification archive for %s unavailable: %s", profile["id"], e)

    return {
        "talent_profile_id": profile["id"],
        "verification_status": profile["verification_status"],
        "verification": verification,
        "submissions": submissions,
        "latest_review": latest_review,
    }


@router.post("/admin/verify-talent")
async def review_talent(review: VerificationReview, admin: dict = Depends(require_roles("admin"))):
    """
    Record an admin decision. Approval grants platform access, rejection revokes it.
    The overall score is computed from the parts when not given.
    """
    approved = review.decision == ReviewDecision.approved
    overall_score = review.overall_score
    if overall_score is None:
        overall_score = calculate_overall_score(
            review.portfolio_score, review.code_sample_score, review.skill_tests_score
        )

    now = datetime.utcnow()
    values = {
        "portfolio_score": review.portfolio_score,
        "code_sample_score": review.code_sample_score,
        "skill_tests_score": review.skill_tests_score,
        "overall_score": overall_score,
        "portfolio_notes": review.portfolio_notes,
        "code_sample_notes": review.code_sample_notes,
        "decision": review.decision.value,
        "reviewer": admin["user_id"],
        "rejection_reason": None if approved else review.rejection_reason,
        "reviewed": True,
        "now": now,
    }

    with get_db_session() as db:
        profile = _talent_profile(db, "id", review.talent_profile_id)
        if _verification_row(db, profile["id"]):
            db.execute(
                text("""
                    UPDATE talent_verifications
                    SET portfolio_score = :portfolio_score, code_sample_score = :code_sample_score,
                        skill_tests_score = :skill_tests_score, overall_score = :overall_score,
                        portfolio_notes = :portfolio_notes, code_sample_notes = :code_sample_notes,
                        verification_decision = :decision, reviewed_by = :reviewer, reviewed_at = :now,
                        rejection_reason = :rejection_reason, portfolio_reviewed = :reviewed,
                        code_sample_reviewed = :reviewed, updated_at = :now
                    WHERE talent_profile_id = :tpid
                """),
                {**values, "tpid": profile["id"]}
            )
        else:
            db.execute(
                text("""
                    INSERT INTO talent_verifications (id, talent_profile_id, portfolio_score,
                        code_sample_score, skill_tests_score, overall_score, portfolio_notes,
                        code_sample_notes, verification_decision, reviewed_by, reviewed_at,
                        rejection_reason, portfolio_reviewed, code_sample_reviewed, created_at, updated_at)
                    VALUES (:id, :tpid, :portfolio_score, :code_sample_score, :skill_tests_score,
                        :overall_score, :portfolio_notes, :code_sample_notes, :decision, :reviewer, :now,
                        :rejection_reason, :reviewed, :reviewed, :now, :now)
                """),
                {**values, "id": new_id(), "tpid": profile["id"]}
            )

        db.execute(
            text("UPDATE talent_profiles SET verification_status = :status, platform_access = :access WHERE id = :id"),
            {"status": "verified" if approved else "rejected", "access": approved, "id": profile["id"]}
        )
        verification = _verification_row(db, profile["id"])

    try:
        VerificationReviewService().insert(profile["id"], admin["user_id"], review.model_dump(mode="json"))
    except PyMongoError as e:
        logger.warning("Review of %s not archived: %s", profile["id"], e)

    logger.info("Admin %s %s talent profile %s", admin["user_id"], review.decision.value, profile["id"])
    return {
        "success": True,
        "message": f"Talent {'verified' if approved else 'rejected'} successfully",
        "verification_status": "verified" if approved else "rejected",
        "platform_access": approved,
        "verification": verification,
    }
