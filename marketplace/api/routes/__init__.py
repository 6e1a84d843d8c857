"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from marketplace.api.routes.auth_routes import router as auth_router
from marketplace.api.routes.project_routes import router as project_router
from marketplace.api.routes.application_routes import router as application_router
from marketplace.api.routes.milestone_routes import router as milestone_router
from marketplace.api.routes.task_routes import router as task_router
from marketplace.api.routes.talent_routes import router as talent_router
from marketplace.api.routes.agency_routes import router as agency_router
from marketplace.api.routes.trainer_routes import router as trainer_router
from marketplace.api.routes.conversation_routes import router as conversation_router
from marketplace.api.routes.message_routes import router as message_router
from marketplace.api.routes.notification_routes import router as notification_router
from marketplace.api.routes.verification_routes import router as verification_router
from marketplace.api.routes.admin_routes import router as admin_router
from marketplace.api.routes.waitlist_routes import router as waitlist_router
from marketplace.api.routes.view_routes import router as view_router

# Main API router (mounted under /api)
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(project_router)
api_router.include_router(application_router)
api_router.include_router(milestone_router)
api_router.include_router(task_router)
api_router.include_router(talent_router)
api_router.include_router(agency_router)
api_router.include_router(trainer_router)
api_router.include_router(conversation_router)
api_router.include_router(message_router)
api_router.include_router(notification_router)
api_router.include_router(verification_router)
api_router.include_router(admin_router)
api_router.include_router(waitlist_router)

__all__ = ["api_router", "view_router"]
