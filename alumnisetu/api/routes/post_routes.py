"""
Post Routes

GET /posts - Feed, newest first, paginated (optionally one author's posts)
POST /posts - Create post
GET /posts/{post_id} - Get post
PUT /posts/{post_id} - Like toggle or comment ({"action": "like" | "comment"})
DELETE /posts/{post_id} - Delete post (author or admin)
"""

from datetime import datetime
from typing import Optional
from bson import ObjectId
from fastapi import APIRouter, HTTPException, Depends, Query

from alumnisetu.db.mongodb import get_collection, COLLECTIONS
from alumnisetu.core.auth import get_current_user
from alumnisetu.services.store import add_item, get_item, update_item, delete_item, serialize_doc, serialize_docs
from alumnisetu.schemas.schemas import PostCreate, PostActionRequest, PostAction

router = APIRouter(prefix="/posts", tags=["Posts"])

POSTS = COLLECTIONS["posts"]


def _author(user: dict) -> dict:
    return {"id": user["id"], "name": user["name"], "image": user.get("image")}


def _load_post(post_id: str) -> dict:
    post = get_item(POSTS, post_id)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    return post


@router.get("")
async def list_posts(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    userId: Optional[str] = Query(None, description="Only posts by this author")
):
    """List posts, newest first."""
    query = {"author.id": userId} if userId else {}
    collection = get_collection(POSTS)

    total = collection.count_documents(query)
    cursor = collection.find(query).sort("createdAt", -1).skip((page - 1) * limit).limit(limit)

    return {
        "success": True,
        "data": serialize_docs(cursor),
        "page": page,
        "pageSize": limit,
        "total": total,
        "hasMore": page * limit < total
    }


@router.post("", status_code=201)
async def create_post(post: PostCreate, user: dict = Depends(get_current_user)):
    """Create a post authored by the caller."""
    doc = add_item(POSTS, {
        "content": post.content,
        "tags": post.tags,
        "author": _author(user),
        "likes": [],
        "comments": []
    })
    return {"success": True, "data": serialize_doc(doc)}


@router.get("/{post_id}")
async def get_post(post_id: str):
    """Get a single post."""
    return {"success": True, "data": serialize_doc(_load_post(post_id))}


@router.put("/{post_id}")
async def post_action(post_id: str, request: PostActionRequest, user: dict = Depends(get_current_user)):
    """
    Like/unlike or comment on a post.

    like: toggles the caller in the likes list, returns the new list.
    comment: appends a comment, returns the full comment list.
    """
    post = _load_post(post_id)

    if request.action == PostAction.like.value:
        likes = list(post.get("likes") or [])
        if user["id"] in likes:
            likes.remove(user["id"])
        else:
            likes.append(user["id"])
        update_item(POSTS, post_id, {"likes": likes, "updatedAt": datetime.utcnow()})
        return {"success": True, "data": {"likes": likes}}

    if request.action == PostAction.comment.value:
        if request.comment is None:
            raise HTTPException(status_code=400, detail="Invalid comment data")
        comment = {
            "id": str(ObjectId()),
            "content": request.comment.content,
            "author": _author(user),
            "createdAt": datetime.utcnow()
        }
        comments = list(post.get("comments") or []) + [comment]
        update_item(POSTS, post_id, {"comments": comments, "updatedAt": datetime.utcnow()})
        return {"success": True, "data": {"comments": serialize_docs(comments)}}

    raise HTTPException(status_code=400, detail="Invalid action")


@router.delete("/{post_id}")
async def delete_post(post_id: str, user: dict = Depends(get_current_user)):
    """Delete a post. Only its author or an admin may delete it."""
    post = _load_post(post_id)
    if post.get("author", {}).get("id") != user["id"] and user["role"] != "admin":
        raise HTTPException(status_code=403, detail="Permission denied")

    delete_item(POSTS, post_id)
    return {"success": True, "message": "Post deleted successfully"}
