"""
Freelance Marketplace - Main Application

FastAPI backend with:
- PostgreSQL (SQLite in development) for structured data
- MongoDB for the verification audit trail
- JWT authentication with role-gated routes and page views

Run: uvicorn marketplace.main:app --reload
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from marketplace.api.routes import api_router, view_router
from marketplace.core.config import get_settings
from marketplace.core.guards import PageRedirect
from marketplace.core.logging import get_logger
from marketplace.db.database import init_db, ping_database
from marketplace.db.mongodb import init_mongo_indexes, ping_mongo

settings = get_settings()
logger = get_logger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Freelance Marketplace",
    description="""
    A marketplace connecting clients with vetted talents and agencies.

    ## Features
    - **Authentication**: JWT-based auth for clients, talents, agencies, trainers and admins
    - **Projects**: Clients post projects, talents and agencies apply
    - **Picks**: Tier-capped concurrent picks (bronze 3, silver 4, gold 5)
    - **Messaging**: Two-party conversations with unread counts
    - **Verification**: Portfolio/code review before talents go live

    ## Databases
    - PostgreSQL: users, profiles, projects, applications, conversations, notifications
    - MongoDB: verification submissions and reviews
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")
app.include_router(view_router)


# ============================================================
# ERROR HANDLERS
# ============================================================

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "All required fields must be provided", "details": jsonable_errors(exc)},
    )


@app.exception_handler(PageRedirect)
async def page_redirect_handler(request: Request, exc: PageRedirect):
    return RedirectResponse(url=exc.location, status_code=303)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "An unexpected error occurred"})


def jsonable_errors(exc: RequestValidationError) -> list:
    """Field location and message for each validation error."""
    return [
        {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg", "")}
        for error in exc.errors()
    ]


# ============================================================
# LIFECYCLE
# ============================================================

@app.on_event("startup")
async def startup_event():
    """Create tables and MongoDB indexes on startup."""
    init_db()
    try:
        init_mongo_indexes()
    except PyMongoError as e:
        logger.warning("MongoDB index initialization failed: %s", e)


@app.get("/", tags=["Health"])
async def root():
    return {"status": "healthy", "app": "Freelance Marketplace"}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "database": "connected" if ping_database() else "disconnected",
        "mongodb": "connected" if ping_mongo() else "disconnected"
    }
