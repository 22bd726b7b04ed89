"""
User Routes

GET /users/check-email - Does an account exist for this email
GET /users/search - Search users by name/email
PUT /users/me - Update own profile
GET /users/me/submissions - Own jobs/events sent for approval
GET /users/{user_id} - Public profile
"""

import re
from datetime import datetime
from fastapi import APIRouter, HTTPException, Depends, Query

from alumnisetu.db.mongodb import get_collection, COLLECTIONS
from alumnisetu.core.auth import get_current_user
from alumnisetu.services.store import get_item, public_user
from alumnisetu.services.connection_service import connected_user_ids
from alumnisetu.services.approval_service import get_approval_service
from alumnisetu.schemas.schemas import UserUpdate

router = APIRouter(prefix="/users", tags=["Users"])

# Fields a directory listing needs
USER_PROJECTION = {"name": 1, "email": 1, "image": 1, "role": 1, "department": 1}


@router.get("/check-email")
async def check_email(email: str = Query(..., min_length=1)):
    """Check whether an account exists for an email address."""
    user = get_collection(COLLECTIONS["users"]).find_one({"email": email.lower()}, {"_id": 1})
    return {"exists": user is not None}


@router.get("/search")
async def search_users(q: str = Query(..., min_length=1), user: dict = Depends(get_current_user)):
    """Search users by name or email. Each hit says whether the caller is connected."""
    if not q.strip():
        raise HTTPException(status_code=400, detail="Search query is required")

    pattern = re.escape(q.strip())
    results = get_collection(COLLECTIONS["users"]).find(
        {"$and": [
            {"$or": [
                {"name": {"$regex": pattern, "$options": "i"}},
                {"email": {"$regex": pattern, "$options": "i"}}
            ]},
            {"email": {"$ne": user["email"]}}
        ]},
        USER_PROJECTION
    ).limit(20)

    connected = set(connected_user_ids(user["id"]))
    users = []
    for doc in results:
        item = public_user(doc)
        item["isConnected"] = item["_id"] in connected
        users.append(item)
    return users


@router.put("/me")
async def update_me(data: UserUpdate, user: dict = Depends(get_current_user)):
    """Update the caller's profile fields."""
    updates = data.model_dump(exclude_none=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")
    updates["updatedAt"] = datetime.utcnow()

    users = get_collection(COLLECTIONS["users"])
    users.update_one({"email": user["email"]}, {"$set": updates})
    return {"user": public_user(users.find_one({"email": user["email"]}))}


@router.get("/me/submissions")
async def my_submissions(user: dict = Depends(get_current_user)):
    """Jobs and events the caller submitted for approval, with their status."""
    jobs = get_approval_service("job").list_submitted_by(user["id"])
    events = get_approval_service("event").list_submitted_by(user["id"])
    return {
        "success": True,
        "data": {"jobs": jobs, "events": events, "total": len(jobs) + len(events)}
    }


@router.get("/{user_id}")
async def get_user(user_id: str):
    """Get a user's profile (never includes the password hash)."""
    doc = get_item(COLLECTIONS["users"], user_id)
    if not doc:
        raise HTTPException(status_code=404, detail="User not found")
    return {"user": public_user(doc)}
