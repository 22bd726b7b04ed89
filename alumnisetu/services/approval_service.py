"""
Approval Service - the pending -> approved/rejected workflow for jobs and events.

Flow:
1. Admin submits        -> written straight to the live collection (Jobs / Events)
2. Non-admin submits    -> written to pending_jobs / pending_events,
                           then one notification per admin
3. Admin approves       -> mark pending doc approved, copy (new _id) into
                           the live collection, notify submitter
4. Admin rejects        -> mark pending doc rejected, notify submitter

Each step is an independent single-document write. Nothing is rolled back
if a later write fails: a pending item whose admin fan-out failed stays
pending and is still visible on the admin queue. Decisions flip the status
with a conditional update first, so a pending item is published at most once.
"""

import logging
from datetime import datetime
from typing import Optional

from alumnisetu.db.mongodb import get_collection, COLLECTIONS
from alumnisetu.services.store import add_item, object_id, serialize_docs
from alumnisetu.services.notification_service import notify, notify_admins

logger = logging.getLogger(__name__)


# kind -> where it lives and where the submitter is sent afterwards
KINDS = {
    "job": {"live": COLLECTIONS["jobs"], "pending": COLLECTIONS["pending_jobs"],
            "label": "Job", "link": "/jobs"},
    "event": {"live": COLLECTIONS["events"], "pending": COLLECTIONS["pending_events"],
              "label": "Event", "link": "/events"},
}


# Workflow bookkeeping; never taken from the submitted body
RESERVED_FIELDS = {
    "_id", "createdAt", "updatedAt", "status", "createdBy", "submittedBy",
    "approvedBy", "approvedAt", "rejectedBy", "rejectedAt", "rejectionReason",
}


class ItemNotFound(LookupError):
    pass


class AlreadyReviewed(ValueError):
    pass


class ApprovalService:
    """
    Handles submissions and admin decisions for one kind ('job' or 'event').
    """

    def __init__(self, kind: str):
        if kind not in KINDS:
            raise ValueError(f"Unknown submission kind '{kind}'")
        self.kind = kind
        self.config = KINDS[kind]
        self.live = get_collection(self.config["live"])
        self.pending = get_collection(self.config["pending"])

    def submit(self, item: dict, user: dict) -> dict:
        """
        Submit a job/event on behalf of user.

        Returns the response body for the route (message + isPending).
        """
        doc = {k: v for k, v in item.items() if k not in RESERVED_FIELDS}
        doc["createdBy"] = user["id"]
        if self.kind == "event":
            doc["joined"] = []

        if user["role"] == "admin":
            doc["status"] = "approved"
            add_item(self.config["live"], doc)
            logger.info("%s '%s' published directly by admin %s", self.kind, doc.get("title"), user["id"])
            return {"message": f"{self.config['label']} added successfully", "isPending": False}

        doc["status"] = "pending"
        doc["submittedBy"] = {"id": user["id"], "name": user["name"], "email": user["email"]}
        add_item(self.config["pending"], doc)
        logger.info("%s '%s' submitted for approval by %s", self.kind, doc.get("title"), user["id"])

        notify_admins(
            self.kind,
            f'New {self.kind} "{doc.get("title")}" submitted by {user["name"]} awaiting approval',
            link="/admin"
        )
        return {
            "message": f"{self.config['label']} submitted for approval. You will be notified once reviewed.",
            "isPending": True
        }

    def list_pending(self) -> list:
        """All items still waiting for review, oldest first."""
        return serialize_docs(self.pending.find({"status": "pending"}).sort("createdAt", 1))

    def list_submitted_by(self, user_id: str) -> list:
        """Every submission by user_id, whatever its status, newest first."""
        return serialize_docs(self.pending.find({"createdBy": user_id}).sort("createdAt", -1))

    def decide(self, item_id: str, action: str, admin: dict, reason: Optional[str] = None) -> None:
        """
        Apply an admin decision to a pending item.

        Raises:
            ItemNotFound: no pending document with that id
            AlreadyReviewed: the item was already approved or rejected
        """
        oid = object_id(item_id)
        now = datetime.utcnow()
        if action == "approve":
            decision = {"status": "approved", "approvedBy": admin["id"], "approvedAt": now}
        elif action == "reject":
            decision = {
                "status": "rejected",
                "rejectedBy": admin["id"],
                "rejectedAt": now,
                "rejectionReason": reason or ""
            }
        else:
            raise ValueError(f"Unknown action '{action}'")

        # Claim the item before publishing: only one decision can win
        item = self.pending.find_one_and_update(
            {"_id": oid, "status": "pending"},
            {"$set": decision}
        )
        if not item:
            current = self.pending.find_one({"_id": oid}, {"status": 1})
            if not current:
                raise ItemNotFound(item_id)
            raise AlreadyReviewed(current.get("status"))

        title = item.get("title")
        if action == "approve":
            approved = {k: v for k, v in item.items() if k != "_id"}
            approved.update(decision)
            self.live.insert_one(approved)
            notify(
                item.get("createdBy"), self.kind,
                f'Your {self.kind} "{title}" has been approved and is now live!',
                link=self.config["link"]
            )
        else:
            message = f'Your {self.kind} "{title}" was not approved.'
            if reason:
                message += f" Reason: {reason}"
            notify(item.get("createdBy"), self.kind, message, link="/dashboard")

        logger.info("%s %s %sd by admin %s", self.kind, item_id, action, admin["id"])


def get_approval_service(kind: str) -> ApprovalService:
    return ApprovalService(kind)
