"""
Project Routes

POST /projects - Post a project (client only)
GET /projects - List projects, optionally one client's (?client_id=)
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import text

from marketplace.db.database import get_db_session, new_id, to_json_list
from marketplace.core.auth import get_current_user
from marketplace.core.guards import require_roles
from marketplace.core.logging import get_logger
from marketplace.services.project_service import get_project, list_projects
from marketplace.schemas.schemas import ProjectCreate, ProjectCreatedResponse, ProjectListResponse, ProjectStatus

router = APIRouter(prefix="/projects", tags=["Projects"])
logger = get_logger(__name__)


@router.post("", response_model=ProjectCreatedResponse, status_code=201)
async def create_project(project: ProjectCreate, client: dict = Depends(require_roles("client"))):
    """Create a new project. Only clients can post projects; new projects start open."""
    project_id = new_id()
    now = datetime.utcnow()
    with get_db_session() as db:
        db.execute(
            text("""
                INSERT INTO projects (id, client_id, title, description, budget, deadline, category,
                    skills, project_type, status, minimum_tier, created_at, updated_at)
                VALUES (:id, :client_id, :title, :description, :budget, :deadline, :category,
                    :skills, :project_type, :status, :minimum_tier, :now, :now)
            """),
            {
                "id": project_id, "client_id": client["user_id"], "title": project.title,
                "description": project.description, "budget": project.budget,
                "deadline": project.deadline, "category": project.category,
                "skills": to_json_list(project.skills), "project_type": project.project_type.value,
                "status": ProjectStatus.open.value, "minimum_tier": project.minimum_tier.value, "now": now
            }
        )

    logger.info("Client %s posted project %s", client["user_id"], project_id)
    return ProjectCreatedResponse(message="Project created successfully", project=get_project(project_id))


@router.get("", response_model=ProjectListResponse)
async def get_projects(
    client_id: Optional[str] = Query(None, description="Only this client's projects"),
    user: dict = Depends(get_current_user),
):
    """List projects newest first."""
    return ProjectListResponse(projects=list_projects(client_id))
