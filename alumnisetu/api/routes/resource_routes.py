"""
Resource Routes

GET /resources - Browse shared resources (filter, search, sort, paginate)
POST /resources - Share a resource
POST /resources/upload - Upload a file to attach to a resource
PUT /resources/{resource_id} - Edit (owner or admin)
DELETE /resources/{resource_id} - Delete (owner or admin)
POST /resources/{resource_id}/like - Like/unlike toggle
POST /resources/{resource_id}/view - Count a view
POST /resources/{resource_id}/download - Count a download
"""

import math
import re
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, HTTPException, Depends, Query, UploadFile, File

from alumnisetu.db.mongodb import get_collection, COLLECTIONS
from alumnisetu.core.auth import get_current_user
from alumnisetu.services.store import add_item, get_item, update_item, delete_item, object_id, serialize_doc
from alumnisetu.utils.file_upload import save_resource_file
from alumnisetu.schemas.schemas import ResourceCreate, ResourceUpdate, ResourceSort

router = APIRouter(prefix="/resources", tags=["Resources"])

RESOURCES = COLLECTIONS["resources"]

SORTS = {
    ResourceSort.newest: [("createdAt", -1)],
    ResourceSort.popular: [("likes", -1), ("createdAt", -1)],
    ResourceSort.oldest: [("createdAt", 1)],
    ResourceSort.title: [("title", 1)],
    ResourceSort.updated: [("updatedAt", -1)],
}


def build_filter(type_: Optional[str], category: Optional[str], search: Optional[str], tags: Optional[str]) -> dict:
    """Mongo filter for the browse query. 'all' means no type/category filter."""
    query = {}
    if type_ and type_ != "all":
        query["type"] = type_
    if category and category != "all":
        query["category"] = category
    if search:
        pattern = re.escape(search)
        query["$or"] = [
            {"title": {"$regex": pattern, "$options": "i"}},
            {"description": {"$regex": pattern, "$options": "i"}},
            {"tags": {"$regex": pattern, "$options": "i"}}
        ]
    if tags:
        tag_list = [t.strip() for t in tags.split(",") if t.strip()]
        if tag_list:
            query["tags"] = {"$in": tag_list}
    return query


def _load_resource(resource_id: str) -> dict:
    resource = get_item(RESOURCES, resource_id)
    if not resource:
        raise HTTPException(status_code=404, detail="Resource not found")
    return resource


def _check_owner(resource: dict, user: dict) -> None:
    if str(resource.get("userId")) != user["id"] and user["role"] != "admin":
        raise HTTPException(status_code=403, detail="Permission denied")


@router.get("")
async def list_resources(
    limit: int = Query(20, ge=1, le=100),
    page: int = Query(1, ge=1),
    type: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    tags: Optional[str] = Query(None, description="Comma-separated, matches any"),
    sort: ResourceSort = Query(ResourceSort.newest)
):
    """Browse resources with author details."""
    query = build_filter(type, category, search, tags)
    collection = get_collection(RESOURCES)

    total = collection.count_documents(query)
    resources = list(collection.find(query).sort(SORTS[sort]).skip((page - 1) * limit).limit(limit))

    # One lookup for every author on the page
    author_ids = {str(r["userId"]) for r in resources if r.get("userId")}
    authors = {}
    if author_ids:
        for u in get_collection(COLLECTIONS["users"]).find(
            {"_id": {"$in": [object_id(a) for a in author_ids]}},
            {"name": 1, "email": 1, "image": 1}
        ):
            authors[str(u["_id"])] = u

    data = []
    for resource in resources:
        item = serialize_doc(resource)
        author = authors.get(str(resource.get("userId")))
        item["author"] = (author or {}).get("name") or resource.get("author") or "Unknown User"
        item["authorEmail"] = (author or {}).get("email") or ""
        item["authorImage"] = (author or {}).get("image")
        data.append(item)

    return {
        "data": data,
        "total": total,
        "page": page,
        "totalPages": math.ceil(total / limit),
        "hasMore": page * limit < total
    }


@router.post("", status_code=201)
async def create_resource(resource: ResourceCreate, user: dict = Depends(get_current_user)):
    """Share a new resource. Counters start at zero."""
    doc = resource.model_dump()
    doc["type"] = resource.type.value
    doc.update({
        "likes": 0,
        "likedBy": [],
        "downloads": 0,
        "views": 0,
        "userId": user["id"],
        "author": user["name"],
        "authorEmail": user["email"]
    })
    created = serialize_doc(add_item(RESOURCES, doc))
    created["authorImage"] = user.get("image")
    return {"message": "Resource added successfully", "data": created}


@router.post("/upload")
async def upload_resource_file(file: UploadFile = File(...), user: dict = Depends(get_current_user)):
    """Store an uploaded file; the returned url goes into a resource's downloadUrl."""
    saved = await save_resource_file(file)
    return {"message": "File uploaded successfully", "file": saved}


@router.put("/{resource_id}")
async def update_resource(resource_id: str, data: ResourceUpdate, user: dict = Depends(get_current_user)):
    """Edit a resource. Owner or admin only."""
    resource = _load_resource(resource_id)
    _check_owner(resource, user)

    updates = data.model_dump(exclude_none=True)
    if "type" in updates:
        updates["type"] = data.type.value
    updates["updatedAt"] = datetime.utcnow()

    update_item(RESOURCES, resource_id, updates)
    resource.update(updates)
    return {"message": "Resource updated successfully", "data": serialize_doc(resource)}


@router.delete("/{resource_id}")
async def delete_resource(resource_id: str, user: dict = Depends(get_current_user)):
    """Delete a resource. Owner or admin only."""
    resource = _load_resource(resource_id)
    _check_owner(resource, user)

    delete_item(RESOURCES, resource_id)
    return {"message": "Resource deleted successfully"}


@router.post("/{resource_id}/like")
async def toggle_like(resource_id: str, user: dict = Depends(get_current_user)):
    """Like or unlike. The likes counter never drops below zero."""
    resource = _load_resource(resource_id)
    liked_by = resource.get("likedBy") or []
    likes = resource.get("likes") or 0

    if user["id"] in liked_by:
        new_likes = max(0, likes - 1)
        update_item(RESOURCES, resource_id, {
            "$pull": {"likedBy": user["id"]},
            "$set": {"likes": new_likes}
        })
        return {"message": "Resource unliked", "liked": False, "likes": new_likes}

    update_item(RESOURCES, resource_id, {
        "$addToSet": {"likedBy": user["id"]},
        "$set": {"likes": likes + 1}
    })
    return {"message": "Resource liked", "liked": True, "likes": likes + 1}


@router.post("/{resource_id}/view")
async def track_view(resource_id: str):
    """Count a view."""
    resource = _load_resource(resource_id)
    update_item(RESOURCES, resource_id, {"$inc": {"views": 1}, "$set": {"lastViewed": datetime.utcnow()}})
    return {"message": "View tracked", "views": (resource.get("views") or 0) + 1}


@router.post("/{resource_id}/download")
async def track_download(resource_id: str):
    """Count a download."""
    resource = _load_resource(resource_id)
    update_item(RESOURCES, resource_id, {"$inc": {"downloads": 1}, "$set": {"lastDownloaded": datetime.utcnow()}})
    return {"message": "Download tracked", "downloads": (resource.get("downloads") or 0) + 1}
