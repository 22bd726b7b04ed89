"""
Document Store - generic CRUD helpers over MongoDB collections.

Every route handler follows the same shape:
    validate request -> store call -> JSON response

The helpers here are the "store call" part:
1. add_item       - insert with createdAt/updatedAt stamps
2. get_all_items  - find many (optional filter)
3. get_item       - find one by _id
4. update_item    - $set a plain dict, or apply raw $-operators
5. delete_item    - delete one by _id

Driver failures are re-raised as DatabaseError so the app can map them to
a 500 (or a 503 when the server is unreachable).
"""

import logging
from datetime import datetime
from typing import Optional, List, Dict, Any

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import HTTPException
from pymongo.errors import PyMongoError

from alumnisetu.db.mongodb import get_collection

logger = logging.getLogger(__name__)


class DatabaseError(Exception):
    """A store operation failed inside the MongoDB driver."""

    def __init__(self, message: str, operation: str, collection_name: str, error: Exception = None):
        super().__init__(message)
        self.operation = operation
        self.collection_name = collection_name
        self.original_error = error


# ============================================================
# HELPERS: ObjectId parsing and JSON serialization
# ============================================================

def object_id(id_str: str) -> ObjectId:
    """Parse a 24-hex id string, or fail the request with a 400."""
    if isinstance(id_str, ObjectId):
        return id_str
    # ObjectId(None) would mint a fresh id
    if not isinstance(id_str, str):
        raise HTTPException(status_code=400, detail="Invalid id format")
    try:
        return ObjectId(id_str)
    except InvalidId:
        raise HTTPException(status_code=400, detail="Invalid id format")


def _convert(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {k: _convert(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_convert(v) for v in value]
    return value


def serialize_doc(doc: Optional[dict]) -> Optional[dict]:
    """Convert MongoDB document to JSON-serializable dict."""
    if doc is None:
        return None
    return _convert(doc)


def serialize_docs(docs) -> list:
    """Convert list of MongoDB documents to JSON-serializable list."""
    return [serialize_doc(doc) for doc in docs]


def public_user(doc: Optional[dict]) -> Optional[dict]:
    """Serialize a user document without its password hash."""
    if doc is None:
        return None
    doc = serialize_doc(doc)
    doc.pop("password", None)
    return doc


# ============================================================
# GENERIC CRUD
# ============================================================

def add_item(collection_name: str, item: dict) -> dict:
    """
    Insert a document, stamping createdAt (if absent) and updatedAt.

    Returns the stored document including its new _id.
    """
    now = datetime.utcnow()
    doc = dict(item)
    doc.setdefault("createdAt", now)
    doc["updatedAt"] = now
    try:
        result = get_collection(collection_name).insert_one(doc)
    except PyMongoError as e:
        logger.error("Error adding item to %s: %s", collection_name, e)
        raise DatabaseError("Failed to add item to database", "CREATE", collection_name, e)
    doc["_id"] = result.inserted_id
    return doc


def get_all_items(collection_name: str, query: Dict[str, Any] = None, sort: list = None) -> List[dict]:
    """Fetch every document matching query (all documents when query is None)."""
    try:
        cursor = get_collection(collection_name).find(query or {})
        if sort:
            cursor = cursor.sort(sort)
        return list(cursor)
    except PyMongoError as e:
        logger.error("Error getting items from %s: %s", collection_name, e)
        raise DatabaseError("Failed to get items from database", "READ", collection_name, e)


def get_item(collection_name: str, item_id: str) -> Optional[dict]:
    """Fetch one document by _id, or None."""
    oid = object_id(item_id)
    try:
        return get_collection(collection_name).find_one({"_id": oid})
    except PyMongoError as e:
        logger.error("Error getting item from %s: %s", collection_name, e)
        raise DatabaseError("Failed to get item from database", "READ_ONE", collection_name, e)


def update_item(collection_name: str, item_id: str, update: dict) -> bool:
    """
    Update a document by _id.

    A plain dict is wrapped in $set (whole-field replacement). An update
    that already uses $-operators ($set, $push, $inc...) is applied as-is.
    Returns True when a document was modified.
    """
    oid = object_id(item_id)
    has_operators = any(key.startswith("$") for key in update)
    operation = update if has_operators else {"$set": update}
    try:
        result = get_collection(collection_name).update_one({"_id": oid}, operation)
    except PyMongoError as e:
        logger.error("Error updating item in %s: %s", collection_name, e)
        raise DatabaseError("Failed to update item in database", "UPDATE", collection_name, e)
    return result.modified_count > 0


def delete_item(collection_name: str, item_id: str) -> bool:
    """Delete one document by _id. Returns True when something was deleted."""
    oid = object_id(item_id)
    try:
        result = get_collection(collection_name).delete_one({"_id": oid})
    except PyMongoError as e:
        logger.error("Error deleting item from %s: %s", collection_name, e)
        raise DatabaseError("Failed to delete item from database", "DELETE", collection_name, e)
    return result.deleted_count > 0
