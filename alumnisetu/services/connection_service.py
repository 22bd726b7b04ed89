"""
Connection Service - lookups over connection_requests and connections.

A connection is stored once, as {user1Id, user2Id}; user1Id is whoever sent
the request. Every lookup therefore checks both orientations.
"""

from typing import List, Optional

from alumnisetu.db.mongodb import get_collection, COLLECTIONS


def _pair_query(a: str, b: str) -> dict:
    return {"$or": [
        {"user1Id": a, "user2Id": b},
        {"user1Id": b, "user2Id": a}
    ]}


def find_connection(a: str, b: str) -> Optional[dict]:
    return get_collection(COLLECTIONS["connections"]).find_one(_pair_query(a, b))


def are_connected(a: str, b: str) -> bool:
    return find_connection(a, b) is not None


def list_connections(user_id: str) -> List[dict]:
    return list(get_collection(COLLECTIONS["connections"]).find({
        "$or": [{"user1Id": user_id}, {"user2Id": user_id}]
    }))


def other_party(connection: dict, user_id: str) -> str:
    return connection["user2Id"] if connection["user1Id"] == user_id else connection["user1Id"]


def connected_user_ids(user_id: str) -> List[str]:
    return [other_party(c, user_id) for c in list_connections(user_id)]


def find_pending_request(sender_id: str, receiver_id: str) -> Optional[dict]:
    return get_collection(COLLECTIONS["connection_requests"]).find_one({
        "senderId": sender_id,
        "receiverId": receiver_id,
        "status": "pending"
    })


def pending_counterpart_ids(user_id: str) -> List[str]:
    """Users with a pending request to or from user_id."""
    requests = get_collection(COLLECTIONS["connection_requests"]).find({
        "status": "pending",
        "$or": [{"senderId": user_id}, {"receiverId": user_id}]
    })
    return [r["receiverId"] if r["senderId"] == user_id else r["senderId"] for r in requests]
