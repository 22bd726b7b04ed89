"""
AlumniSetu - Main Application

FastAPI backend with:
- MongoDB for every entity (users, posts, events, jobs, chat, resources...)
- Admin approval workflow for user-submitted jobs and events
- JWT authentication

Run: uvicorn alumnisetu.main:app --reload
"""

import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pymongo.errors import ConnectionFailure

from alumnisetu.api.routes import api_router
from alumnisetu.db.mongodb import init_mongo_indexes, test_mongo_connection
from alumnisetu.services.store import DatabaseError
from alumnisetu.utils.file_upload import PUBLIC_URL_PREFIX
from alumnisetu.core.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="AlumniSetu",
    description="""
    Backend for a university alumni network.

    ## Features
    - **Authentication**: JWT-based auth (student, alumni, faculty, admin)
    - **Posts**: Feed with likes and comments
    - **Events & Jobs**: Boards with admin approval for non-admin submissions
    - **Connections**: Requests, accept/reject, recommendations
    - **Chat**: Direct messages between connections
    - **Resources**: Shared documents and links with like/view/download counters
    - **Notifications**: Per-user notification inbox
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
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

# Serve uploaded resource files
if os.path.isdir(settings.upload_dir):
    app.mount(PUBLIC_URL_PREFIX, StaticFiles(directory=settings.upload_dir), name="uploads")


def _unavailable() -> JSONResponse:
    return JSONResponse(
        status_code=503,
        content={"detail": "Database unavailable", "message": "Cannot connect to database. Please try again later."}
    )


@app.exception_handler(DatabaseError)
async def database_error_handler(request: Request, exc: DatabaseError):
    """Store failures -> 500, or 503 when MongoDB cannot be reached."""
    if isinstance(exc.original_error, ConnectionFailure):
        return _unavailable()
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Database operation failed",
            "operation": exc.operation,
            "collection": exc.collection_name
        }
    )


@app.exception_handler(ConnectionFailure)
async def connection_failure_handler(request: Request, exc: ConnectionFailure):
    """Handlers that talk to collections directly end up here when MongoDB is down."""
    logger.error("MongoDB unreachable during %s %s: %s", request.method, request.url.path, exc)
    return _unavailable()


# Startup event
@app.on_event("startup")
async def startup_event():
    """Initialize MongoDB indexes on startup."""
    try:
        init_mongo_indexes()
    except Exception as e:
        logger.warning("MongoDB index initialization failed: %s", e)


@app.get("/", tags=["Health"])
async def root():
    return {"status": "healthy", "app": "AlumniSetu", "docs": "/docs"}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "mongodb": "connected" if test_mongo_connection() else "disconnected"
    }
