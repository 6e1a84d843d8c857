"""
Message Routes

GET /messages?conversation_id= - Thread in ascending order; marks incoming messages read
POST /messages - Send a message
PATCH /messages/mark-read - Mark a conversation's incoming messages read
GET /messages/unread-count - Unread incoming messages across all my conversations
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import text

from marketplace.db.database import get_db_session, new_id
from marketplace.core.auth import get_current_user
from marketplace.services.conversation_service import get_conversation, message_from_row, side_of
from marketplace.schemas.schemas import CountResponse, MarkReadRequest, MessageCreate, MessageOut, MessageResponse

router = APIRouter(prefix="/messages", tags=["Messages"])

MESSAGE_SELECT = """
    SELECT m.id, m.conversation_id, m.sender_id, m.content, m.is_read, m.created_at,
           u.name AS sender_name, u.email AS sender_email
    FROM messages m
    JOIN users u ON m.sender_id = u.id
"""


def _require_participant(db, conversation_id: str, user_id: str) -> dict:
    conversation = get_conversation(db, conversation_id)
    if not conversation or side_of(conversation, user_id) is None:
        raise HTTPException(status_code=404, detail="Conversation not found or access denied")
    return conversation


def _mark_incoming_read(db, conversation_id: str, user_id: str) -> None:
    db.execute(
        text("""
            UPDATE messages SET is_read = :read
            WHERE conversation_id = :cid AND sender_id != :uid AND is_read = :unread
        """),
        {"read": True, "unread": False, "cid": conversation_id, "uid": user_id}
    )


def _with_sender(r: dict) -> MessageOut:
    return message_from_row(r, {"id": r["sender_id"], "name": r["sender_name"], "email": r["sender_email"]})


@router.get("", response_model=List[MessageOut])
async def get_messages(
    conversation_id: Optional[str] = Query(None), user: dict = Depends(get_current_user)
):
    if not conversation_id:
        raise HTTPException(status_code=400, detail="conversation_id is required")

    with get_db_session() as db:
        _require_participant(db, conversation_id, user["user_id"])
        rows = db.execute(
            text(MESSAGE_SELECT + " WHERE m.conversation_id = :cid ORDER BY m.created_at ASC"),
            {"cid": conversation_id}
        ).mappings().all()
        _mark_incoming_read(db, conversation_id, user["user_id"])

    # Snapshot taken before the update; what was unread is shown as unread once
    return [_with_sender(dict(r)) for r in rows]


@router.post("", response_model=MessageOut)
async def send_message(message: MessageCreate, user: dict = Depends(get_current_user)):
    """Append a message and bump the conversation so it sorts first."""
    message_id = new_id()
    now = datetime.utcnow()
    with get_db_session() as db:
        _require_participant(db, message.conversation_id, user["user_id"])
        db.execute(
            text("""
                INSERT INTO messages (id, conversation_id, sender_id, content, is_read, created_at)
                VALUES (:id, :cid, :sender, :content, :is_read, :now)
            """),
            {
                "id": message_id, "cid": message.conversation_id, "sender": user["user_id"],
                "content": message.content, "is_read": False, "now": now
            }
        )
        db.execute(
            text("UPDATE conversations SET updated_at = :now WHERE id = :id"),
            {"now": now, "id": message.conversation_id}
        )
        row = db.execute(text(MESSAGE_SELECT + " WHERE m.id = :id"), {"id": message_id}).mappings().fetchone()

    return _with_sender(dict(row))


@router.patch("/mark-read", response_model=MessageResponse)
async def mark_read(request: MarkReadRequest, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        _require_participant(db, request.conversation_id, user["user_id"])
        _mark_incoming_read(db, request.conversation_id, user["user_id"])
    return MessageResponse(message="Messages marked as read")


@router.get("/unread-count", response_model=CountResponse)
async def unread_count(user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        count = db.execute(
            text("""
                SELECT COUNT(*) FROM messages m
                JOIN conversations c ON m.conversation_id = c.id
                WHERE m.is_read = :unread AND m.sender_id != :uid
                  AND (c.client_id = :uid OR c.talent_id = :uid)
            """),
            {"unread": False, "uid": user["user_id"]}
        ).scalar()
    return CountResponse(count=count or 0)
