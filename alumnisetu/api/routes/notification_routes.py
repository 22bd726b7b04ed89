"""
Notification Routes

GET /notifications - Caller's latest notifications + unread count
PATCH /notifications - Mark one notification read ({"notificationId": ...})
POST /notifications/mark-read - Mark all of the caller's notifications read
PATCH /notifications/{notification_id} - Set read/unread
DELETE /notifications/{notification_id} - Delete a notification
"""

from datetime import datetime
from fastapi import APIRouter, HTTPException, Depends

from alumnisetu.db.mongodb import get_collection, COLLECTIONS
from alumnisetu.core.auth import get_current_user
from alumnisetu.core.config import get_settings
from alumnisetu.services.store import object_id, serialize_docs
from alumnisetu.schemas.schemas import MarkNotificationRequest, NotificationReadUpdate

settings = get_settings()

router = APIRouter(prefix="/notifications", tags=["Notifications"])


def _notifications():
    return get_collection(COLLECTIONS["notifications"])


@router.get("")
async def list_notifications(user: dict = Depends(get_current_user)):
    """Newest notifications first, capped at notification_limit."""
    cursor = _notifications().find({"userId": user["id"]}).sort("createdAt", -1).limit(settings.notification_limit)
    unread = _notifications().count_documents({"userId": user["id"], "read": False})
    return {"success": True, "notifications": serialize_docs(cursor), "unreadCount": unread}


@router.patch("")
async def mark_notification(request: MarkNotificationRequest, user: dict = Depends(get_current_user)):
    """Mark one of the caller's notifications as read."""
    _notifications().update_one(
        {"_id": object_id(request.notificationId), "userId": user["id"]},
        {"$set": {"read": True, "readAt": datetime.utcnow()}}
    )
    return {"success": True}


@router.post("/mark-read")
async def mark_all_read(user: dict = Depends(get_current_user)):
    """Mark every unread notification of the caller as read."""
    result = _notifications().update_many(
        {"userId": user["id"], "read": False},
        {"$set": {"read": True, "readAt": datetime.utcnow()}}
    )
    return {"success": True, "updated": result.modified_count}


@router.patch("/{notification_id}")
async def set_notification_read(
    notification_id: str,
    update: NotificationReadUpdate,
    user: dict = Depends(get_current_user)
):
    """Set a notification read or unread."""
    result = _notifications().update_one(
        {"_id": object_id(notification_id), "userId": user["id"]},
        {"$set": {"read": update.read, "readAt": datetime.utcnow() if update.read else None}}
    )
    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail="Notification not found")
    return {"success": True}


@router.delete("/{notification_id}")
async def delete_notification(notification_id: str, user: dict = Depends(get_current_user)):
    """Delete one of the caller's notifications."""
    result = _notifications().delete_one({"_id": object_id(notification_id), "userId": user["id"]})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Notification not found")
    return {"success": True}
