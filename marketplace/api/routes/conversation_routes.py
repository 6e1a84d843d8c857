"""
Conversation Routes

GET /conversations - My conversations (?archived=true for the archive)
POST /conversations - Find or start a conversation with another user
PATCH /conversations/{id} - Archive or delete a conversation for me
"""

from datetime import datetime
from typing import List

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import text

from marketplace.db.database import get_db_session, new_id
from marketplace.core.auth import get_current_user
from marketplace.core.logging import get_logger
from marketplace.services.conversation_service import (
    assign_sides, build_conversation_response, find_conversation, get_conversation,
    list_conversations, side_of
)
from marketplace.schemas.schemas import (
    ConversationAction, ConversationCreate, ConversationResponse, ConversationUpdate
)

router = APIRouter(prefix="/conversations", tags=["Conversations"])
logger = get_logger(__name__)


@router.get("", response_model=List[ConversationResponse])
async def get_conversations(
    archived: bool = Query(False), user: dict = Depends(get_current_user)
):
    with get_db_session() as db:
        return list_conversations(db, user["user_id"], archived)


@router.post("", response_model=ConversationResponse)
async def start_conversation(request: ConversationCreate, user: dict = Depends(get_current_user)):
    """
    Reuse the existing thread for this pair (and project) or create one.

    Allowed pairs: client and talent, client and agency, agency and talent.
    """
    with get_db_session() as db:
        other = db.execute(
            text("SELECT id, role FROM users WHERE id = :id"), {"id": request.other_user_id}
        ).mappings().fetchone()
        if not other:
            raise HTTPException(status_code=404, detail="User not found")

        sides = assign_sides(user["user_id"], user["role"], other["id"], other["role"])
        if sides is None:
            raise HTTPException(status_code=400, detail="Invalid conversation participants")
        client_id, talent_id = sides

        conversation = find_conversation(db, client_id, talent_id, request.project_id)
        if conversation is None:
            now = datetime.utcnow()
            conversation_id = new_id()
            db.execute(
                text("""
                    INSERT INTO conversations (id, client_id, talent_id, project_id,
                        archived_by_client, archived_by_talent, deleted_by_client, deleted_by_talent,
                        created_at, updated_at)
                    VALUES (:id, :cid, :tid, :pid, :f, :f, :f, :f, :now, :now)
                """),
                {
                    "id": conversation_id, "cid": client_id, "tid": talent_id,
                    "pid": request.project_id, "f": False, "now": now
                }
            )
            logger.info("Conversation %s started by %s", conversation_id, user["user_id"])
            conversation = get_conversation(db, conversation_id)

        return build_conversation_response(db, conversation, user["user_id"])


@router.patch("/{conversation_id}")
async def update_conversation(
    conversation_id: str, update: ConversationUpdate, user: dict = Depends(get_current_user)
):
    """Archive or delete only affects the caller's side of the thread."""
    with get_db_session() as db:
        conversation = get_conversation(db, conversation_id)
        if not conversation:
            raise HTTPException(status_code=404, detail="Conversation not found")

        side = side_of(conversation, user["user_id"])
        if side is None:
            raise HTTPException(status_code=403, detail="You are not a participant in this conversation")

        column = ("archived_by_" if update.action == ConversationAction.archive else "deleted_by_") + side
        db.execute(
            text(f"UPDATE conversations SET {column} = :flag WHERE id = :id"),
            {"flag": True, "id": conversation_id}
        )
        conversation[column] = True

    return {"success": True, "action": update.action.value, "conversation": conversation}
