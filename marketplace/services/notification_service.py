"""
Notification Service - in-app notifications raised by application events.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import text

from marketplace.db.database import new_id


def create_notification(
    db,
    user_id: str,
    type: str,
    title: str,
    message: str,
    related_project_id: Optional[str] = None,
    related_application_id: Optional[str] = None,
) -> str:
    """Insert a notification inside the caller's transaction. Returns its id."""
    notification_id = new_id()
    db.execute(
        text("""
            INSERT INTO notifications (id, user_id, type, title, message, is_read,
                related_project_id, related_application_id, created_at)
            VALUES (:id, :user_id, :type, :title, :message, :is_read,
                :project_id, :application_id, :created_at)
        """),
        {
            "id": notification_id, "user_id": user_id, "type": type, "title": title,
            "message": message, "is_read": False, "project_id": related_project_id,
            "application_id": related_application_id, "created_at": datetime.utcnow()
        }
    )
    return notification_id
