"""
Agency Routes

GET /agencies - Public agency directory (?search, ?industry, ?company_size)
"""

from typing import Optional

from fastapi import APIRouter, Query

from marketplace.services.directory_service import list_agencies
from marketplace.schemas.schemas import AgencyListResponse

router = APIRouter(prefix="/agencies", tags=["Agencies"])


@router.get("", response_model=AgencyListResponse)
async def browse_agencies(
    search: str = Query(""),
    industry: Optional[str] = Query(None),
    company_size: Optional[str] = Query(None),
):
    """Newest agencies first, at most 50."""
    return AgencyListResponse(agencies=list_agencies(search, industry, company_size))
