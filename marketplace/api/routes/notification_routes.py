"""
Notification Routes

GET /notifications - Newest first (?limit=10, ?unread_only=false)
PATCH /notifications - Mark one (notification_id) or all (mark_all_as_read) as read
DELETE /notifications?notification_id= - Delete one of my notifications
GET /notifications/unread-count - Unread count
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import text

from marketplace.db.database import get_db_session, fetch_all
from marketplace.core.auth import get_current_user
from marketplace.schemas.schemas import (
    CountResponse, MessageResponse, NotificationListResponse, NotificationOut, NotificationUpdate
)

router = APIRouter(prefix="/notifications", tags=["Notifications"])

NOTIFICATION_COLUMNS = (
    "id, user_id, type, title, message, is_read, related_project_id, related_application_id, created_at"
)


def _owned_notification(db, notification_id: str, user_id: str) -> dict:
    row = db.execute(
        text(f"SELECT {NOTIFICATION_COLUMNS} FROM notifications WHERE id = :id"),
        {"id": notification_id}
    ).mappings().fetchone()
    if not row:
        raise HTTPException(status_code=404, detail="Notification not found")
    if row["user_id"] != user_id:
        raise HTTPException(status_code=403, detail="Unauthorized")
    return dict(row)


@router.get("", response_model=NotificationListResponse)
async def get_notifications(
    limit: int = Query(10, ge=1, le=100),
    unread_only: bool = Query(False),
    user: dict = Depends(get_current_user),
):
    sql = f"SELECT {NOTIFICATION_COLUMNS} FROM notifications WHERE user_id = :uid"
    params = {"uid": user["user_id"], "limit": limit}
    if unread_only:
        sql += " AND is_read = :unread"
        params["unread"] = False
    sql += " ORDER BY created_at DESC LIMIT :limit"

    return NotificationListResponse(notifications=[NotificationOut(**r) for r in fetch_all(sql, params)])


@router.patch("")
async def mark_notifications_read(update: NotificationUpdate, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        if update.mark_all_as_read:
            db.execute(
                text("UPDATE notifications SET is_read = :read WHERE user_id = :uid AND is_read = :unread"),
                {"read": True, "unread": False, "uid": user["user_id"]}
            )
            return MessageResponse(message="All notifications marked as read")

        if not update.notification_id:
            raise HTTPException(status_code=400, detail="Notification ID is required")

        notification = _owned_notification(db, update.notification_id, user["user_id"])
        db.execute(
            text("UPDATE notifications SET is_read = :read WHERE id = :id"),
            {"read": True, "id": update.notification_id}
        )
        notification["is_read"] = True

    return {"success": True, "notification": NotificationOut(**notification)}


@router.delete("", response_model=MessageResponse)
async def delete_notification(
    notification_id: Optional[str] = Query(None), user: dict = Depends(get_current_user)
):
    if not notification_id:
        raise HTTPException(status_code=400, detail="Notification ID is required")

    with get_db_session() as db:
        _owned_notification(db, notification_id, user["user_id"])
        db.execute(text("DELETE FROM notifications WHERE id = :id"), {"id": notification_id})

    return MessageResponse(message="Notification deleted")


@router.get("/unread-count", response_model=CountResponse)
async def notification_unread_count(user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        count = db.execute(
            text("SELECT COUNT(*) FROM notifications WHERE user_id = :uid AND is_read = :unread"),
            {"uid": user["user_id"], "unread": False}
        ).scalar()
    return CountResponse(count=count or 0)
