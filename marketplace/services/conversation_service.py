"""
Conversation Service - two-party threads between a "client side" and a "talent side".

An agency sits on the talent side when talking to a client and on the client
side when talking to a talent. Archive and delete flags are kept per side so
each participant manages their own inbox.
"""

from typing import List, Optional, Tuple

from sqlalchemy import text

from marketplace.services.user_service import get_participant
from marketplace.schemas.schemas import ConversationResponse, MessageOut, Participant, UserSummary

CONVERSATION_COLUMNS = """
    id, client_id, talent_id, project_id, archived_by_client, archived_by_talent,
    deleted_by_client, deleted_by_talent, created_at, updated_at
"""

# (current role, other role) -> whether the current user takes the client side
SIDE_RULES = {
    ("client", "talent"): True,
    ("client", "agency"): True,
    ("talent", "client"): False,
    ("agency", "client"): False,
    ("agency", "talent"): True,
    ("talent", "agency"): False,
}


def assign_sides(current_id: str, current_role: str, other_id: str, other_role: str) -> Optional[Tuple[str, str]]:
    """Return ``(client_id, talent_id)`` for a valid pairing, None otherwise."""
    current_is_client = SIDE_RULES.get((current_role, other_role))
    if current_is_client is None:
        return None
    return (current_id, other_id) if current_is_client else (other_id, current_id)


def side_of(conversation: dict, user_id: str) -> Optional[str]:
    if conversation["client_id"] == user_id:
        return "client"
    if conversation["talent_id"] == user_id:
        return "talent"
    return None


def get_conversation(db, conversation_id: str) -> Optional[dict]:
    row = db.execute(
        text(f"SELECT {CONVERSATION_COLUMNS} FROM conversations WHERE id = :id"),
        {"id": conversation_id}
    ).mappings().fetchone()
    return dict(row) if row else None


def find_conversation(db, client_id: str, talent_id: str, project_id: Optional[str]) -> Optional[dict]:
    sql = f"SELECT {CONVERSATION_COLUMNS} FROM conversations WHERE client_id = :cid AND talent_id = :tid"
    params = {"cid": client_id, "tid": talent_id}
    if project_id is None:
        sql += " AND project_id IS NULL"
    else:
        sql += " AND project_id = :pid"
        params["pid"] = project_id
    row = db.execute(text(sql), params).mappings().fetchone()
    return dict(row) if row else None


def message_from_row(r: dict, sender: Optional[dict] = None) -> MessageOut:
    return MessageOut(
        id=r["id"], conversation_id=r["conversation_id"], sender_id=r["sender_id"],
        content=r["content"], is_read=bool(r["is_read"]), created_at=r["created_at"],
        sender=UserSummary(id=sender["id"], name=sender["name"], email=sender["email"]) if sender else None
    )


def _participant(db, user_id: str) -> Participant:
    user = get_participant(db, user_id)
    return Participant(
        id=user["id"], name=user["name"], email=user["email"],
        role=user["role"], display_name=user["display_name"]
    )


def build_conversation_response(db, conversation: dict, viewer_id: str) -> ConversationResponse:
    """Conversation with both participants, its last message and the viewer's unread count."""
    last = db.execute(
        text("""
            SELECT id, conversation_id, sender_id, content, is_read, created_at
            FROM messages WHERE conversation_id = :id
            ORDER BY created_at DESC LIMIT 1
        """),
        {"id": conversation["id"]}
    ).mappings().fetchone()

    unread = db.execute(
        text("""
            SELECT COUNT(*) FROM messages
            WHERE conversation_id = :id AND is_read = :is_read AND sender_id != :viewer
        """),
        {"id": conversation["id"], "is_read": False, "viewer": viewer_id}
    ).scalar()

    side = side_of(conversation, viewer_id)
    return ConversationResponse(
        id=conversation["id"],
        client_id=conversation["client_id"],
        talent_id=conversation["talent_id"],
        project_id=conversation["project_id"],
        client=_participant(db, conversation["client_id"]),
        talent=_participant(db, conversation["talent_id"]),
        last_message=message_from_row(dict(last)) if last else None,
        unread_count=unread or 0,
        archived=bool(conversation[f"archived_by_{side}"]) if side else False,
        created_at=conversation["created_at"],
        updated_at=conversation["updated_at"],
    )


def list_conversations(db, user_id: str, archived: bool = False) -> List[ConversationResponse]:
    """
    The user's conversations, most recently updated first.
    Deleted-by-me threads never show; archived-by-me threads show only when ``archived`` is set.
    """
    rows = db.execute(
        text(f"""
            SELECT {CONVERSATION_COLUMNS} FROM conversations
            WHERE client_id = :uid OR talent_id = :uid
            ORDER BY updated_at DESC
        """),
        {"uid": user_id}
    ).mappings().all()

    conversations = []
    for row in rows:
        side = side_of(row, user_id)
        if row[f"deleted_by_{side}"]:
            continue
        if bool(row[f"archived_by_{side}"]) != archived:
            continue
        conversations.append(build_conversation_response(db, dict(row), user_id))
    return conversations
