"""
Campus Placement Portal - Main Application

FastAPI backend with:
- MongoDB for students, admins, companies and applications
- JWT authentication for students and admins
- Eligibility matching and notification broadcast

Run: uvicorn placement_portal.main:app --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from placement_portal.api.routes import api_router
from placement_portal.core.config import get_settings
from placement_portal.core.errors import AuthError, PlacementError, ServerError
from placement_portal.db.mongodb import init_mongo_indexes, test_mongo_connection
from placement_portal.services.auth_service import seed_default_admin

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Campus Placement Portal",
    description="""
    Placement management API for students and the placement cell.

    ## Features
    - **Students**: Registration, profile, eligible companies, applications, notifications
    - **Admin**: Companies with eligibility criteria, student management,
      notification broadcast, application overview and statistics
    - **Authentication**: JWT bearer tokens with student/admin roles
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    debug=settings.debug
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")


# ============================================================
# ERROR HANDLERS - every error body is {"message": ...}
# ============================================================

@app.exception_handler(PlacementError)
async def placement_error_handler(request: Request, exc: PlacementError):
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message}, headers=headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"message": message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)}, headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    error = ServerError()
    return JSONResponse(status_code=error.status_code, content={"message": error.message})


# Startup event
@app.on_event("startup")
def startup_event():
    """Create MongoDB indexes and seed the default admin."""
    try:
        init_mongo_indexes()
        seed_default_admin()
    except Exception:
        logger.exception("MongoDB startup initialization failed")


@app.get("/", tags=["Health"])
async def root():
    return {"status": "healthy", "app": "Campus Placement Portal", "message": "Placement Management System API is running!"}


@app.get("/health", tags=["Health"])
def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "mongodb": "connected" if test_mongo_connection() else "disconnected"
    }
