"""
Page Views - role-gated browse pages.

Each view runs the page guard (anonymous -> /auth, wrong role -> own
dashboard), fetches the fresh collection and narrows it with the shared
filter functions. An empty result is a normal page with an empty state.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from marketplace.client.filters import filter_projects, filter_talents, open_projects, parse_csv, select_by_ids
from marketplace.db.database import fetch_one
from marketplace.core.guards import PageRedirect, dashboard_for_role, page_guard
from marketplace.core.tiers import can_access_project
from marketplace.services.directory_service import list_talents
from marketplace.services.project_service import list_projects
from marketplace.schemas.schemas import ProjectView, TalentView

router = APIRouter(prefix="/views", tags=["Views"])

NO_PROJECTS = "No projects found. Try adjusting your filters or check back later for new opportunities."
NO_TALENTS = "No talents found. Try adjusting your filters."
NO_PICKED_PROJECTS = "You haven't picked any projects yet."
NO_PICKED_DEVELOPERS = "You haven't picked any developers yet."


def _project_view(items: List, empty_message: str) -> ProjectView:
    return ProjectView(items=items, total=len(items), empty=not items,
                       empty_message=empty_message if not items else None)


def _talent_view(items: List, empty_message: str) -> TalentView:
    return TalentView(items=items, total=len(items), empty=not items,
                      empty_message=empty_message if not items else None)


@router.get("/dashboard")
async def dashboard(user: dict = Depends(page_guard())):
    """Send a signed-in user to their role's dashboard."""
    raise PageRedirect(dashboard_for_role(user["role"]))


@router.get("/agency/browse-clients", response_model=ProjectView)
async def agency_browse_clients(
    search: str = Query(""),
    category: Optional[str] = Query(None),
    skills: Optional[str] = Query(None),
    agency: dict = Depends(page_guard("agency")),
):
    """Open client projects for agencies."""
    projects = filter_projects(open_projects(list_projects()), search, category, parse_csv(skills))
    return _project_view(projects, NO_PROJECTS)


@router.get("/talent/browse", response_model=ProjectView)
async def talent_browse(
    search: str = Query(""),
    category: Optional[str] = Query(None),
    skills: Optional[str] = Query(None),
    talent: dict = Depends(page_guard("talent")),
):
    """Open projects the talent's tier can reach."""
    profile = fetch_one("SELECT tier FROM talent_profiles WHERE user_id = :id", {"id": talent["user_id"]})
    tier = profile["tier"] if profile else "bronze"

    projects = [
        p for p in open_projects(list_projects())
        if can_access_project(tier, p.minimum_tier)
    ]
    return _project_view(filter_projects(projects, search, category, parse_csv(skills)), NO_PROJECTS)


@router.get("/client/browse", response_model=TalentView)
async def client_browse(
    search: str = Query(""),
    experience: Optional[str] = Query(None),
    skills: Optional[str] = Query(None),
    client: dict = Depends(page_guard("client")),
):
    return _talent_view(list_talents(search, experience, parse_csv(skills)), NO_TALENTS)


@router.get("/agency/picked-clients", response_model=ProjectView)
async def agency_picked_clients(
    ids: Optional[str] = Query(None, description="Comma separated picked project ids"),
    agency: dict = Depends(page_guard("agency")),
):
    """Picked project ids resolved against the current project list; stale ids drop out."""
    return _project_view(select_by_ids(list_projects(), parse_csv(ids)), NO_PICKED_PROJECTS)


@router.get("/agency/picked-developers", response_model=TalentView)
async def agency_picked_developers(
    ids: Optional[str] = Query(None, description="Comma separated picked developer ids"),
    agency: dict = Depends(page_guard("agency")),
):
    return _talent_view(select_by_ids(list_talents(), parse_csv(ids)), NO_PICKED_DEVELOPERS)
