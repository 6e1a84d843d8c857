"""
Task Routes - the project owner's task board

GET /tasks - A project's tasks, newest first (?project_id=)
POST /tasks - Add a task
PATCH /tasks - Change some fields (board moves, reassignment)
PUT /tasks - Overwrite title, description, priority and due date
DELETE /tasks - Remove a task (?task_id=)

Every operation is limited to the client who owns the project.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import text

from marketplace.db.database import get_db_session, fetch_all, fetch_one, new_id
from marketplace.core.auth import get_current_user
from marketplace.core.logging import get_logger
from marketplace.services.project_service import project_client_id
from marketplace.schemas.schemas import (
    MessageResponse, TaskCreate, TaskEnvelope, TaskListResponse, TaskOut, TaskPatch, TaskReplace
)

router = APIRouter(prefix="/tasks", tags=["Tasks"])
logger = get_logger(__name__)

TASK_SELECT = """
    SELECT id, project_id, title, description, status, priority, due_date,
           assignee_id AS assigned_to, created_by, created_at, updated_at
    FROM tasks
"""

# Fields a PATCH may set back to null
NULLABLE_FIELDS = {"description", "due_date", "assigned_to"}


def _load_task(task_id: str) -> TaskOut:
    return TaskOut(**fetch_one(TASK_SELECT + " WHERE id = :id", {"id": task_id}))


def _require_owner(db, project_id: str, user_id: str) -> None:
    client_id = project_client_id(db, project_id)
    if client_id is None:
        raise HTTPException(status_code=404, detail="Project not found")
    if client_id != user_id:
        raise HTTPException(status_code=403, detail="Only the project owner can manage tasks")


def _owned_task(db, task_id: str, user_id: str) -> dict:
    task = db.execute(
        text("SELECT id, project_id FROM tasks WHERE id = :id"), {"id": task_id}
    ).mappings().fetchone()
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    _require_owner(db, task["project_id"], user_id)
    return dict(task)


def _check_assignee(db, assignee_id: Optional[str]) -> None:
    if assignee_id and not db.execute(text("SELECT id FROM users WHERE id = :id"), {"id": assignee_id}).fetchone():
        raise HTTPException(status_code=400, detail="Assignee not found")


@router.get("", response_model=TaskListResponse)
async def list_tasks(project_id: Optional[str] = Query(None), user: dict = Depends(get_current_user)):
    if not project_id:
        raise HTTPException(status_code=400, detail="Project ID is required")

    with get_db_session() as db:
        _require_owner(db, project_id, user["user_id"])

    rows = fetch_all(TASK_SELECT + " WHERE project_id = :pid ORDER BY created_at DESC", {"pid": project_id})
    return TaskListResponse(tasks=[TaskOut(**r) for r in rows])


@router.post("", response_model=TaskEnvelope, status_code=201)
async def create_task(task: TaskCreate, user: dict = Depends(get_current_user)):
    """Status defaults to todo and priority to medium."""
    task_id = new_id()
    now = datetime.utcnow()
    with get_db_session() as db:
        _require_owner(db, task.project_id, user["user_id"])
        _check_assignee(db, task.assigned_to)
        db.execute(
            text("""
                INSERT INTO tasks (id, project_id, title, description, status, priority, due_date,
                    assignee_id, created_by, created_at, updated_at)
                VALUES (:id, :pid, :title, :description, :status, :priority, :due_date,
                    :assignee_id, :created_by, :now, :now)
            """),
            {
                "id": task_id, "pid": task.project_id, "title": task.title,
                "description": task.description, "status": task.status.value,
                "priority": task.priority.value, "due_date": task.due_date,
                "assignee_id": task.assigned_to, "created_by": user["user_id"], "now": now
            }
        )

    logger.info("User %s added task %s to project %s", user["user_id"], task_id, task.project_id)
    return TaskEnvelope(task=_load_task(task_id))


@router.patch("", response_model=TaskEnvelope)
async def patch_task(patch: TaskPatch, user: dict = Depends(get_current_user)):
    changes = patch.model_dump(exclude_unset=True, exclude={"task_id"})
    changes = {k: v for k, v in changes.items() if v is not None or k in NULLABLE_FIELDS}
    for field in ("status", "priority"):
        if field in changes:
            changes[field] = changes[field].value
    if "assigned_to" in changes:
        changes["assignee_id"] = changes.pop("assigned_to")

    with get_db_session() as db:
        _owned_task(db, patch.task_id, user["user_id"])
        _check_assignee(db, changes.get("assignee_id"))

        changes["updated_at"] = datetime.utcnow()
        assignments = ", ".join(f"{column} = :{column}" for column in changes)
        db.execute(text(f"UPDATE tasks SET {assignments} WHERE id = :id"), {**changes, "id": patch.task_id})

    return TaskEnvelope(task=_load_task(patch.task_id))


@router.put("", response_model=TaskEnvelope)
async def replace_task(task: TaskReplace, user: dict = Depends(get_current_user)):
    """Omitted description and due date are cleared. Status and assignee are left alone."""
    with get_db_session() as db:
        _owned_task(db, task.task_id, user["user_id"])
        db.execute(
            text("""
                UPDATE tasks SET title = :title, description = :description, priority = :priority,
                    due_date = :due_date, updated_at = :now
                WHERE id = :id
            """),
            {
                "title": task.title, "description": task.description, "priority": task.priority.value,
                "due_date": task.due_date, "now": datetime.utcnow(), "id": task.task_id
            }
        )

    return TaskEnvelope(task=_load_task(task.task_id))


@router.delete("", response_model=MessageResponse)
async def delete_task(task_id: Optional[str] = Query(None), user: dict = Depends(get_current_user)):
    if not task_id:
        raise HTTPException(status_code=400, detail="Task ID is required")

    with get_db_session() as db:
        _owned_task(db, task_id, user["user_id"])
        db.execute(text("DELETE FROM tasks WHERE id = :id"), {"id": task_id})

    logger.info("User %s deleted task %s", user["user_id"], task_id)
    return MessageResponse(message="Task deleted successfully")
