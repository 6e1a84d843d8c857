"""
Waitlist Routes

POST /waitlist - Join the pre-launch waitlist
GET /waitlist - Number of people waiting
"""

from datetime import datetime

from fastapi import APIRouter, HTTPException
from sqlalchemy import text

from marketplace.db.database import get_db_session, fetch_one, new_id
from marketplace.core.logging import get_logger
from marketplace.schemas.schemas import CountResponse, WaitlistEntry, WaitlistJoin, WaitlistJoinResponse

router = APIRouter(prefix="/waitlist", tags=["Waitlist"])
logger = get_logger(__name__)


@router.post("", response_model=WaitlistJoinResponse, status_code=201)
async def join_waitlist(request: WaitlistJoin):
    """Emails are stored lowercased, so each address can join once whatever its casing."""
    email = request.email.lower()
    entry = WaitlistEntry(id=new_id(), email=email, created_at=datetime.utcnow())
    with get_db_session() as db:
        if db.execute(text("SELECT id FROM waitlist WHERE email = :email"), {"email": email}).fetchone():
            raise HTTPException(status_code=409, detail="This email is already on the waitlist")
        db.execute(
            text("INSERT INTO waitlist (id, email, created_at) VALUES (:id, :email, :created_at)"),
            entry.model_dump()
        )

    logger.info("Waitlist signup %s", entry.id)
    return WaitlistJoinResponse(message="Successfully joined the waitlist!", data=entry)


@router.get("", response_model=CountResponse)
async def waitlist_count():
    return CountResponse(count=fetch_one("SELECT COUNT(*) AS count FROM waitlist")["count"])
