"""
Admin Routes

GET /admin/users - Accounts with their profile, newest first (?type=, ?page=, ?limit=)
"""

import math

from fastapi import APIRouter, Depends, Query
from sqlalchemy import text

from marketplace.db.database import get_db_session, from_json_list
from marketplace.core.guards import require_roles
from marketplace.core.logging import get_logger
from marketplace.schemas.schemas import AccountType, AdminUserListResponse, AdminUserOut, Pagination

router = APIRouter(prefix="/admin", tags=["Admin"])
logger = get_logger(__name__)

# Checked in this order; the first profile found decides an account's type
TYPED_PROFILES = [
    (AccountType.talent, "talent_profiles"),
    (AccountType.client, "client_profiles"),
    (AccountType.agency, "agency_profiles"),
]

PROFILE_TABLES = dict(TYPED_PROFILES)

LIST_COLUMNS = ("skills", "certifications", "skill_tests_taken")


def _decoded(row) -> dict:
    data = dict(row)
    for column in LIST_COLUMNS:
        if column in data:
            data[column] = from_json_list(data[column])
    return data


def _account(db, user: dict) -> AdminUserOut:
    account_type, profile, verification = "unknown", None, None
    for kind, table in TYPED_PROFILES:
        row = db.execute(
            text(f"SELECT * FROM {table} WHERE user_id = :id"), {"id": user["id"]}
        ).mappings().fetchone()
        if row:
            account_type, profile = kind.value, _decoded(row)
            break

    if account_type == AccountType.talent.value:
        row = db.execute(
            text("SELECT * FROM talent_verifications WHERE talent_profile_id = :id"),
            {"id": profile["id"]}
        ).mappings().fetchone()
        verification = _decoded(row) if row else None

    return AdminUserOut(**user, type=account_type, profile=profile, verification=verification)


@router.get("/users", response_model=AdminUserListResponse)
async def list_users(
    account_type: AccountType = Query(AccountType.all, alias="type", description="talent, client, agency or all"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    admin: dict = Depends(require_roles("admin")),
):
    """
    Page through accounts. A type filter keeps accounts that have that kind of profile;
    talents come with their verification record.
    """
    where = ""
    if account_type in PROFILE_TABLES:
        where = f" WHERE EXISTS (SELECT 1 FROM {PROFILE_TABLES[account_type]} p WHERE p.user_id = u.id)"

    with get_db_session() as db:
        total_count = db.execute(text("SELECT COUNT(*) FROM users u" + where)).scalar()
        users = db.execute(
            text(
                "SELECT u.id, u.email, u.name, u.role, u.is_active, u.created_at FROM users u"
                + where + " ORDER BY u.created_at DESC LIMIT :limit OFFSET :offset"
            ),
            {"limit": limit, "offset": (page - 1) * limit}
        ).mappings().all()
        accounts = [_account(db, dict(user)) for user in users]

    logger.info("Admin %s listed %s accounts, page %s", admin["user_id"], account_type.value, page)

    return AdminUserListResponse(
        users=accounts,
        pagination=Pagination(
            page=page, limit=limit, total_count=total_count, total_pages=math.ceil(total_count / limit)
        ),
    )
