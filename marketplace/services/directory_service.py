"""
Directory Service - talent and agency listings.

Profiles are loaded in one query and narrowed with the same filter functions
the browse pages use, so the API and the pages agree on what matches.
"""

from typing import List, Optional, Sequence

from marketplace.client.filters import filter_agencies, filter_talents
from marketplace.db.database import fetch_all, from_json_list
from marketplace.schemas.schemas import (
    AgencyCard, AgencyCardProfile, TalentCard, TalentCardProfile, TalentProfileDetail
)

TALENT_SELECT = """
    SELECT u.name, u.email, t.*
    FROM users u
    JOIN talent_profiles t ON t.user_id = u.id
"""

AGENCY_SELECT = """
    SELECT u.name, u.email, a.*
    FROM users u
    JOIN agency_profiles a ON a.user_id = u.id
"""

AGENCY_PAGE_SIZE = 50


def _rate(value) -> Optional[float]:
    return float(value) if value is not None else None


def talent_card_from_row(r: dict) -> TalentCard:
    return TalentCard(
        id=r["user_id"], name=r["name"], email=r["email"],
        profile=TalentCardProfile(
            id=r["id"], first_name=r["first_name"], last_name=r["last_name"],
            title=r["title"], skills=from_json_list(r["skills"]),
            experience=r["experience"], hourly_rate=_rate(r["hourly_rate"]),
            portfolio=r["portfolio"], tier=r["tier"]
        )
    )


def talent_detail_from_row(r: dict) -> TalentProfileDetail:
    return TalentProfileDetail(
        id=r["id"], first_name=r["first_name"], last_name=r["last_name"],
        title=r["title"], skills=from_json_list(r["skills"]), experience=r["experience"],
        hourly_rate=_rate(r["hourly_rate"]), portfolio=r["portfolio"], tier=r["tier"],
        bio=r["bio"], portfolio_url=r["portfolio_url"],
        certifications=from_json_list(r["certifications"]),
        active_picks=r["active_picks"], completed_projects=r["completed_projects"],
        success_rate=float(r["success_rate"]), total_earnings=float(r["total_earnings"]),
        verification_status=r["verification_status"], platform_access=bool(r["platform_access"])
    )


def list_talents(search: str = "", experience: Optional[str] = None, skills: Sequence[str] = ()) -> List[TalentCard]:
    rows = fetch_all(TALENT_SELECT + " ORDER BY u.created_at DESC")
    return filter_talents([talent_card_from_row(r) for r in rows], search, experience, skills)


def get_talent_row(user_id: str) -> Optional[dict]:
    rows = fetch_all(TALENT_SELECT + " WHERE u.id = :id", {"id": user_id})
    return rows[0] if rows else None


def agency_card_from_row(r: dict) -> AgencyCard:
    return AgencyCard(
        id=r["user_id"], name=r["name"], email=r["email"],
        profile=AgencyCardProfile(
            id=r["id"], first_name=r["first_name"], last_name=r["last_name"],
            agency_name=r["agency_name"], description=r["description"],
            company_size=r["company_size"], industry=r["industry"], website=r["website"],
            location=r["location"], founded_year=r["founded_year"]
        )
    )


def list_agencies(search: str = "", industry: Optional[str] = None, company_size: Optional[str] = None) -> List[AgencyCard]:
    rows = fetch_all(AGENCY_SELECT + " ORDER BY u.created_at DESC")
    cards = filter_agencies([agency_card_from_row(r) for r in rows], search, industry, company_size)
    return cards[:AGENCY_PAGE_SIZE]
