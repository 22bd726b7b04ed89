"""
Notification Service - writes notification documents.

A notification is a small document addressed to one user:
    {userId, type, message, link, read, createdAt, ...extra}

Clients poll GET /notifications; there is no push channel.
"""

import logging
from datetime import datetime
from typing import List

from alumnisetu.db.mongodb import get_collection, COLLECTIONS

logger = logging.getLogger(__name__)


def build_notification(user_id: str, type_: str, message: str, link: str = None, **extra) -> dict:
    doc = {
        "userId": user_id,
        "type": type_,
        "message": message,
        "link": link,
        "read": False,
        "createdAt": datetime.utcnow()
    }
    doc.update(extra)
    return doc


def notify(user_id: str, type_: str, message: str, link: str = None, **extra) -> str:
    """Insert one notification. Returns its id."""
    doc = build_notification(user_id, type_, message, link, **extra)
    result = get_collection(COLLECTIONS["notifications"]).insert_one(doc)
    return str(result.inserted_id)


def notify_admins(type_: str, message: str, link: str = "/admin") -> int:
    """
    Fan out one notification per admin user.

    Returns the number of notifications written (0 when there are no admins).
    """
    admins = get_collection(COLLECTIONS["users"]).find({"role": "admin"}, {"_id": 1})
    docs: List[dict] = [
        build_notification(str(admin["_id"]), type_, message, link)
        for admin in admins
    ]
    if not docs:
        logger.warning("No admin users to notify: %s", message)
        return 0
    get_collection(COLLECTIONS["notifications"]).insert_many(docs)
    return len(docs)
