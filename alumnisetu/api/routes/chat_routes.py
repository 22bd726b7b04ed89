"""
Chat Routes

GET /chat/conversations - Caller's conversations, most recent first
POST /chat/conversations - Open (or fetch) a conversation with a connection
DELETE /chat/conversations/{conversation_id}/messages - Clear a conversation
GET /chat/messages - One page of a conversation's messages
POST /chat/messages - Send a message
PUT /chat/messages - Mark a conversation read
GET /chat/unread-count - Unread messages across all conversations

Clients poll these endpoints; there is no websocket channel.
"""

from datetime import datetime
from fastapi import APIRouter, HTTPException, Depends, Query, Response

from alumnisetu.db.mongodb import get_collection, COLLECTIONS
from alumnisetu.core.auth import get_current_user
from alumnisetu.services.store import get_item, object_id, public_user, serialize_doc, serialize_docs
from alumnisetu.services.connection_service import are_connected
from alumnisetu.schemas.schemas import ConversationCreate, MessageCreate, MarkReadRequest

router = APIRouter(prefix="/chat", tags=["Chat"])

OTHER_USER_PROJECTION = {"name": 1, "email": 1, "image": 1, "role": 1}


def _conversations():
    return get_collection(COLLECTIONS["conversations"])


def _messages():
    return get_collection(COLLECTIONS["messages"])


def _load_conversation(conversation_id: str, user_id: str) -> dict:
    """The conversation, if user_id takes part in it; 404 otherwise."""
    conversation = _conversations().find_one({
        "_id": object_id(conversation_id),
        "participants": user_id
    })
    if not conversation:
        raise HTTPException(status_code=404, detail="Conversation not found")
    return conversation


def _other_participant(conversation: dict, user_id: str) -> str:
    return next((p for p in conversation["participants"] if p != user_id), None)


@router.get("/conversations")
async def list_conversations(user: dict = Depends(get_current_user)):
    """Conversations with the other participant and the caller's unread count."""
    users = get_collection(COLLECTIONS["users"])
    result = []
    for conversation in _conversations().find({"participants": user["id"]}).sort("lastMessageAt", -1):
        other_id = _other_participant(conversation, user["id"])
        other = users.find_one({"_id": object_id(other_id)}, OTHER_USER_PROJECTION) if other_id else None
        item = serialize_doc(conversation)
        item["otherUser"] = public_user(other)
        item["unreadCount"] = (conversation.get("unreadCounts") or {}).get(user["id"], 0)
        result.append(item)
    return {"conversations": result}


@router.post("/conversations")
async def open_conversation(data: ConversationCreate, response: Response, user: dict = Depends(get_current_user)):
    """
    Return the existing conversation with participantId, or create one.

    Only connected users may start a conversation.
    """
    participant_id = data.participantId
    if participant_id == user["id"]:
        raise HTTPException(status_code=400, detail="Cannot start conversation with yourself")

    existing = _conversations().find_one({"participants": {"$all": [user["id"], participant_id]}})
    if existing:
        return {"conversation": serialize_doc(existing), "isNew": False}

    if not get_item(COLLECTIONS["users"], participant_id):
        raise HTTPException(status_code=404, detail="User not found")

    if not are_connected(user["id"], participant_id):
        raise HTTPException(status_code=403, detail="You can only chat with your connections")

    now = datetime.utcnow()
    conversation = {
        "participants": [user["id"], participant_id],
        "createdAt": now,
        "lastMessageAt": now,
        "lastMessage": None,
        "unreadCounts": {user["id"]: 0, participant_id: 0}
    }
    result = _conversations().insert_one(conversation)
    conversation["_id"] = result.inserted_id

    response.status_code = 201
    return {"conversation": serialize_doc(conversation), "isNew": True}


@router.delete("/conversations/{conversation_id}/messages")
async def clear_conversation(conversation_id: str, user: dict = Depends(get_current_user)):
    """Delete every message in a conversation the caller takes part in."""
    conversation = _load_conversation(conversation_id, user["id"])
    result = _messages().delete_many({"conversationId": str(conversation["_id"])})

    now = datetime.utcnow()
    _conversations().update_one(
        {"_id": conversation["_id"]},
        {"$set": {"lastMessage": None, "lastMessageAt": now, "updatedAt": now}}
    )
    return {"message": "Chat cleared successfully", "deletedCount": result.deleted_count}


@router.get("/messages")
async def list_messages(
    conversationId: str = Query(...),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    user: dict = Depends(get_current_user)
):
    """
    One page of messages.

    Pages count back from the newest message; each page is returned
    oldest-first so it can be rendered top to bottom.
    """
    conversation = _load_conversation(conversationId, user["id"])
    messages = list(
        _messages().find({"conversationId": str(conversation["_id"])})
        .sort("createdAt", -1)
        .skip((page - 1) * limit)
        .limit(limit)
    )
    messages.reverse()
    return {"messages": serialize_docs(messages), "hasMore": len(messages) == limit}


@router.post("/messages", status_code=201)
async def send_message(data: MessageCreate, user: dict = Depends(get_current_user)):
    """Send a message and bump the other participant's unread count."""
    conversation = _load_conversation(data.conversationId, user["id"])

    now = datetime.utcnow()
    message = {
        "conversationId": str(conversation["_id"]),
        "senderId": user["id"],
        "content": data.content,
        "createdAt": now,
        "readBy": [user["id"]],
        "messageType": "text"
    }
    result = _messages().insert_one(message)
    message["_id"] = result.inserted_id

    update = {"$set": {
        "lastMessageAt": now,
        "lastMessage": {"content": data.content, "senderId": user["id"], "createdAt": now}
    }}
    other_id = _other_participant(conversation, user["id"])
    if other_id:
        update["$inc"] = {f"unreadCounts.{other_id}": 1}
    _conversations().update_one({"_id": conversation["_id"]}, update)

    item = serialize_doc(message)
    item["sender"] = {"_id": user["id"], "name": user["name"], "image": user.get("image")}
    return {"message": item}


@router.put("/messages")
async def mark_read(data: MarkReadRequest, user: dict = Depends(get_current_user)):
    """Mark every message in the conversation read by the caller."""
    conversation = _load_conversation(data.conversationId, user["id"])

    _messages().update_many(
        {"conversationId": str(conversation["_id"]), "readBy": {"$ne": user["id"]}},
        {"$addToSet": {"readBy": user["id"]}}
    )
    _conversations().update_one(
        {"_id": conversation["_id"]},
        {"$set": {f"unreadCounts.{user['id']}": 0}}
    )
    return {"message": "Messages marked as read"}


@router.get("/unread-count")
async def unread_count(user: dict = Depends(get_current_user)):
    """Total unread messages for the caller across conversations."""
    total = sum(
        (conversation.get("unreadCounts") or {}).get(user["id"], 0)
        for conversation in _conversations().find({"participants": user["id"]})
    )
    return {"unreadCount": total}
