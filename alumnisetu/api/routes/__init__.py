"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from alumnisetu.api.routes.auth_routes import router as auth_router
from alumnisetu.api.routes.user_routes import router as user_router
from alumnisetu.api.routes.post_routes import router as post_router
from alumnisetu.api.routes.event_routes import router as event_router
from alumnisetu.api.routes.job_routes import router as job_router
from alumnisetu.api.routes.admin_routes import router as admin_router
from alumnisetu.api.routes.notification_routes import router as notification_router
from alumnisetu.api.routes.connection_routes import router as connection_router
from alumnisetu.api.routes.chat_routes import router as chat_router
from alumnisetu.api.routes.resource_routes import router as resource_router
from alumnisetu.api.routes.dashboard_routes import router as dashboard_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(user_router)
api_router.include_router(post_router)
api_router.include_router(event_router)
api_router.include_router(job_router)
api_router.include_router(admin_router)
api_router.include_router(notification_router)
api_router.include_router(connection_router)
api_router.include_router(chat_router)
api_router.include_router(resource_router)
api_router.include_router(dashboard_router)
