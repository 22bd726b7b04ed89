"""
Event Routes

GET /events - List approved events
POST /events - Submit event (admins publish directly, others go to approval)
PUT /events/join - Join an event
DELETE /events/{event_id} - Delete event (admin or creator)
"""

from fastapi import APIRouter, HTTPException, Depends

from alumnisetu.db.mongodb import COLLECTIONS
from alumnisetu.core.auth import get_current_user
from alumnisetu.services.store import get_all_items, get_item, update_item, delete_item, serialize_docs
from alumnisetu.services.approval_service import get_approval_service
from alumnisetu.schemas.schemas import EventCreate, JoinEventRequest

router = APIRouter(prefix="/events", tags=["Events"])

EVENTS = COLLECTIONS["events"]


def is_listable(doc: dict) -> bool:
    """Skip malformed documents: a title and a description key are required."""
    return isinstance(doc, dict) and bool(doc.get("title")) and "description" in doc


@router.get("")
async def list_events():
    """List approved events, newest first."""
    events = get_all_items(EVENTS, sort=[("createdAt", -1)])
    return serialize_docs(e for e in events if is_listable(e))


@router.post("", status_code=201)
async def create_event(event: EventCreate, user: dict = Depends(get_current_user)):
    """
    Submit an event.

    Admin submissions are published immediately. Everyone else's go to
    pending_events and every admin gets a notification.
    """
    return get_approval_service("event").submit(event.model_dump(), user)


@router.put("/join")
async def join_event(request: JoinEventRequest, user: dict = Depends(get_current_user)):
    """Add the caller to an event's joined list (no-op if already joined)."""
    event = get_item(EVENTS, request.eventId)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")

    joined = event.get("joined") if isinstance(event.get("joined"), list) else []
    if user["id"] not in joined:
        joined.append(user["id"])
        update_item(EVENTS, request.eventId, {"joined": joined})

    return {"success": True, "joinedCount": len(joined)}


@router.delete("/{event_id}")
async def delete_event(event_id: str, user: dict = Depends(get_current_user)):
    """Delete an event. Admins may delete any event, users only their own."""
    event = get_item(EVENTS, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    if user["role"] != "admin" and event.get("createdBy") != user["id"]:
        raise HTTPException(status_code=403, detail="Permission denied")

    delete_item(EVENTS, event_id)
    return {"success": True, "message": "Event deleted"}
