"""
Authentication Routes

POST /auth/register - Register new user (creates the role's profile)
POST /auth/login - Login and get JWT token
GET /auth/me - Get current user info
"""

from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy import text

from marketplace.db.database import get_db_session
from marketplace.core.auth import verify_password, create_access_token, get_current_user
from marketplace.core.logging import get_logger
from marketplace.services.user_service import EmailTakenError, create_user
from marketplace.schemas.schemas import (
    RegisterRequest, RegisterResponse, LoginRequest, TokenResponse, UserResponse
)

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = get_logger(__name__)


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(request: RegisterRequest):
    """
    Register a new user account.

    A matching client/talent/agency/trainer profile is created alongside.
    """
    try:
        with get_db_session() as db:
            user_id = create_user(
                db,
                email=request.email,
                password=request.password,
                name=request.name,
                role=request.role.value,
                first_name=request.first_name,
                last_name=request.last_name,
                company_name=request.company_name,
                agency_name=request.agency_name,
            )
    except EmailTakenError:
        raise HTTPException(status_code=400, detail="User already exists")

    logger.info("Registered %s account %s", request.role.value, user_id)
    return RegisterResponse(message="User created successfully", user_id=user_id)


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    with get_db_session() as db:
        user = db.execute(
            text("SELECT id, password_hash, role, is_active FROM users WHERE email = :email"),
            {"email": request.email}
        ).fetchone()

    if not user:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    user_id, password_hash, role, is_active = user

    # Account state is only revealed to someone who knows the password
    if not verify_password(request.password, password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if not is_active:
        raise HTTPException(status_code=403, detail="Account deactivated")

    token = create_access_token(data={"sub": user_id, "role": role})

    return TokenResponse(access_token=token, user_id=user_id, role=role)


@router.get("/me", response_model=UserResponse)
async def get_me(user: dict = Depends(get_current_user)):
    """Get current authenticated user's info."""
    with get_db_session() as db:
        row = db.execute(
            text("SELECT id, email, name, role, is_active, created_at FROM users WHERE id = :id"),
            {"id": user["user_id"]}
        ).fetchone()

    return UserResponse(
        user_id=row[0], email=row[1], name=row[2], role=row[3], is_active=row[4], created_at=row[5]
    )
