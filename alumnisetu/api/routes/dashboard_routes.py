"""
Dashboard Routes

GET /dashboard/stats - Counts of what the caller has connected, posted and shared
"""

from fastapi import APIRouter, Depends

from alumnisetu.db.mongodb import get_collection, COLLECTIONS
from alumnisetu.core.auth import get_current_user
from alumnisetu.services.connection_service import list_connections

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/stats")
async def get_stats(user: dict = Depends(get_current_user)):
    """Per-user counters for the dashboard cards."""
    user_id = user["id"]
    return {
        "message": "Stats retrieved successfully",
        "data": {
            "connections": len(list_connections(user_id)),
            "posts": get_collection(COLLECTIONS["posts"]).count_documents({"author.id": user_id}),
            "events": get_collection(COLLECTIONS["events"]).count_documents({"createdBy": user_id}),
            "resources": get_collection(COLLECTIONS["resources"]).count_documents({"userId": user_id}),
            "jobs": get_collection(COLLECTIONS["jobs"]).count_documents({"createdBy": user_id})
        }
    }
