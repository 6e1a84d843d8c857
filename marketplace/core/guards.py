"""
Role guard shared by API routes and page views.

One decision function answers "may this session see a page for these roles?":
no session goes to the sign-in route, a wrong role goes to that role's own
dashboard. API dependencies turn the decision into 401/403, page views turn it
into a redirect.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from fastapi import Depends, HTTPException

from marketplace.core.auth import get_optional_user

SIGN_IN_PATH = "/auth"
DEFAULT_DASHBOARD = "/dashboard"

ROLE_DASHBOARDS = {
    "client": "/client/dashboard",
    "talent": "/talent/dashboard",
    "agency": "/agency/dashboard",
    "trainer": "/trainer/dashboard",
    "admin": "/admin/dashboard",
}

ROLE_LABELS = {
    "client": "Clients",
    "talent": "Talents",
    "agency": "Agencies",
    "trainer": "Trainers",
    "admin": "Admins",
}


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    redirect_to: Optional[str] = None
    reason: Optional[str] = None  # "unauthenticated" | "forbidden"


class PageRedirect(Exception):
    """Raised by page views; rendered as a 303 to ``location``."""

    def __init__(self, location: str):
        super().__init__(location)
        self.location = location


def dashboard_for_role(role: Optional[str]) -> str:
    return ROLE_DASHBOARDS.get(role, DEFAULT_DASHBOARD)


def resolve_access(user: Optional[dict], required_roles: Iterable[str]) -> AccessDecision:
    """
    Decide access for ``user`` against ``required_roles``.
    An empty ``required_roles`` only requires a session.
    """
    if user is None:
        return AccessDecision(allowed=False, redirect_to=SIGN_IN_PATH, reason="unauthenticated")

    roles = tuple(required_roles)
    if roles and user.get("role") not in roles:
        return AccessDecision(
            allowed=False, redirect_to=dashboard_for_role(user.get("role")), reason="forbidden"
        )

    return AccessDecision(allowed=True)


def _forbidden_detail(roles) -> str:
    labels = [ROLE_LABELS.get(role, role) for role in roles]
    return f"{' and '.join(labels)} only"


def require_roles(*roles: str):
    """
    Dependency factory for API routes.

    Usage:
        @router.post("")
        async def create(user: dict = Depends(require_roles("client"))):
            ...
    """
    async def dependency(user: Optional[dict] = Depends(get_optional_user)) -> dict:
        decision = resolve_access(user, roles)
        if decision.reason == "unauthenticated":
            raise HTTPException(status_code=401, detail="Unauthorized", headers={"WWW-Authenticate": "Bearer"})
        if decision.reason == "forbidden":
            raise HTTPException(status_code=403, detail=_forbidden_detail(roles))
        return user

    return dependency


def page_guard(*roles: str):
    """Dependency factory for page views - redirects instead of failing."""
    async def dependency(user: Optional[dict] = Depends(get_optional_user)) -> dict:
        decision = resolve_access(user, roles)
        if not decision.allowed:
            raise PageRedirect(decision.redirect_to)
        return user

    return dependency
