"""
Connection Routes

GET /connections - Caller's connected users
GET /connections/recommendations - People the caller may know
GET /connections/requests - Pending requests received and sent
POST /connections/requests - Send a connection request
PUT /connections/requests/{request_id} - Accept or reject a received request
DELETE /connections/{user_id} - Remove a connection
"""

import logging
from datetime import datetime
from fastapi import APIRouter, HTTPException, Depends

from alumnisetu.db.mongodb import get_collection, COLLECTIONS
from alumnisetu.core.auth import get_current_user
from alumnisetu.services.store import get_item, object_id, public_user, serialize_doc, serialize_docs
from alumnisetu.services.notification_service import notify
from alumnisetu.services import connection_service
from alumnisetu.schemas.schemas import ConnectionRequestCreate, ConnectionRequestUpdate, RequestAction

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/connections", tags=["Connections"])

USER_PROJECTION = {"name": 1, "email": 1, "image": 1, "role": 1, "department": 1}


def _requests():
    return get_collection(COLLECTIONS["connection_requests"])


def _users():
    return get_collection(COLLECTIONS["users"])


def _accept(request: dict, receiver: dict) -> None:
    """pending -> accepted: create the connection and tell the sender."""
    now = datetime.utcnow()
    get_collection(COLLECTIONS["connections"]).insert_one({
        "user1Id": request["senderId"],
        "user2Id": request["receiverId"],
        "createdAt": now
    })
    _requests().update_one(
        {"_id": request["_id"]},
        {"$set": {"status": "accepted", "respondedAt": now}}
    )
    notify(
        request["senderId"], "approval",
        f"{receiver['name']} accepted your connection request",
        link="/connections"
    )
    logger.info("Connection %s <-> %s accepted", request["senderId"], request["receiverId"])


def _reject(request: dict) -> None:
    """pending -> rejected: tell the sender."""
    _requests().update_one(
        {"_id": request["_id"]},
        {"$set": {"status": "rejected", "respondedAt": datetime.utcnow()}}
    )
    notify(request["senderId"], "rejection", "Your connection request was declined", link="/connections")
    logger.info("Connection request %s rejected", request["_id"])


@router.get("")
async def list_connections(user: dict = Depends(get_current_user)):
    """Connected users with connectionId and connectedSince."""
    connections = connection_service.list_connections(user["id"])
    if not connections:
        return []

    by_user = {connection_service.other_party(c, user["id"]): c for c in connections}
    users = _users().find(
        {"_id": {"$in": [object_id(uid) for uid in by_user]}},
        USER_PROJECTION
    )

    result = []
    for doc in users:
        item = public_user(doc)
        connection = by_user[item["_id"]]
        item["connectionId"] = str(connection["_id"])
        item["connectedSince"] = connection["createdAt"]
        result.append(item)
    return result


@router.get("/recommendations")
async def recommendations(user: dict = Depends(get_current_user)):
    """Up to 10 users who are not connected to, nor have a pending request with, the caller."""
    exclude = {user["id"]}
    exclude.update(connection_service.connected_user_ids(user["id"]))
    exclude.update(connection_service.pending_counterpart_ids(user["id"]))

    cursor = _users().find(
        {"_id": {"$nin": [object_id(uid) for uid in exclude]}},
        USER_PROJECTION
    ).limit(10)
    return {"recommendations": [public_user(doc) for doc in cursor]}


@router.get("/requests")
async def list_requests(user: dict = Depends(get_current_user)):
    """Pending requests the caller received (with sender details) and sent."""
    received = []
    for request in _requests().find({"receiverId": user["id"], "status": "pending"}).sort("createdAt", -1):
        sender = _users().find_one({"_id": object_id(request["senderId"])}, {"name": 1, "email": 1, "image": 1})
        if not sender:
            continue
        item = serialize_doc(request)
        item["sender"] = public_user(sender)
        received.append(item)

    sent = _requests().find({"senderId": user["id"], "status": "pending"}).sort("createdAt", -1)
    return {"receivedRequests": received, "sentRequests": serialize_docs(sent)}


@router.post("/requests", status_code=201)
async def send_request(data: ConnectionRequestCreate, user: dict = Depends(get_current_user)):
    """
    Send a connection request.

    If the receiver already asked the caller, that request is accepted
    instead of creating a second one.
    """
    receiver_id = data.receiverId
    if receiver_id == user["id"]:
        raise HTTPException(status_code=400, detail="Cannot send connection request to yourself")

    receiver = get_item(COLLECTIONS["users"], receiver_id)
    if not receiver:
        raise HTTPException(status_code=404, detail="Receiver not found")

    if connection_service.are_connected(user["id"], receiver_id):
        raise HTTPException(status_code=400, detail="Already connected with this user")

    if connection_service.find_pending_request(user["id"], receiver_id):
        raise HTTPException(status_code=400, detail="Request already sent")

    reverse = connection_service.find_pending_request(receiver_id, user["id"])
    if reverse:
        caller = _users().find_one({"_id": object_id(user["id"])})
        _accept(reverse, caller)
        return {"message": "Connection request accepted", "connected": True}

    result = _requests().insert_one({
        "senderId": user["id"],
        "receiverId": receiver_id,
        "status": "pending",
        "createdAt": datetime.utcnow()
    })
    notify(
        receiver_id, "friend_request",
        f"{user['name']} sent you a connection request",
        link="/connections",
        senderId=user["id"], senderName=user["name"], senderEmail=user["email"]
    )
    return {"message": "Connection request sent", "requestId": str(result.inserted_id), "connected": False}


@router.put("/requests/{request_id}")
async def respond_to_request(
    request_id: str,
    data: ConnectionRequestUpdate,
    user: dict = Depends(get_current_user)
):
    """Accept or reject a pending request addressed to the caller."""
    request = _requests().find_one({
        "_id": object_id(request_id),
        "receiverId": user["id"],
        "status": "pending"
    })
    if not request:
        raise HTTPException(status_code=404, detail="Request not found")

    if data.action == RequestAction.accept:
        _accept(request, user)
        return {"message": "Connection request accepted"}

    _reject(request)
    return {"message": "Connection request rejected"}


@router.delete("/{user_id}")
async def remove_connection(user_id: str, user: dict = Depends(get_current_user)):
    """Remove the connection between the caller and user_id."""
    connection = connection_service.find_connection(user["id"], user_id)
    if not connection:
        raise HTTPException(status_code=404, detail="Connection not found")

    get_collection(COLLECTIONS["connections"]).delete_one({"_id": connection["_id"]})
    logger.info("Connection %s <-> %s removed", user["id"], user_id)
    return {"success": True, "message": "Connection removed successfully"}
