"""
MongoDB Connection Utility

Every AlumniSetu entity lives in MongoDB:
- users, posts, comments (embedded), likes (embedded)
- approved and pending events / jobs
- connection requests and connections
- conversations and messages
- shared resources
- notifications

Documents are validated only at request time (see schemas). References
between documents are stored as id strings, never as ObjectId.
"""
import logging

from pymongo import MongoClient, ASCENDING, DESCENDING
from pymongo.database import Database
from pymongo.collection import Collection
from alumnisetu.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(
            settings.mongodb_uri,
            connectTimeoutMS=settings.mongodb_timeout_ms,
            socketTimeoutMS=settings.mongodb_timeout_ms,
            serverSelectionTimeoutMS=settings.mongodb_timeout_ms,
            maxPoolSize=10,
            minPoolSize=1,
            maxIdleTimeMS=30000,
            retryWrites=True,
            retryReads=True,
        )
    return _client


def get_mongo_db() -> Database:
    """Get the alumnisetu database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def set_mongo_db(db: Database) -> None:
    """Swap the active database (used by tests to inject an in-memory client)."""
    global _db
    _db = db


def get_collection(name: str) -> Collection:
    """Get a specific collection by its real name (see COLLECTIONS)."""
    db = get_mongo_db()
    return db[name]


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        get_mongo_db().command('ping')
        return True
    except Exception as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False


# Collection name constants (avoid typos). The live Events/Jobs/Posts
# collections keep their historical capitalised names.
COLLECTIONS = {
    "users": "users",
    "posts": "Posts",
    "events": "Events",
    "pending_events": "pending_events",
    "jobs": "Jobs",
    "pending_jobs": "pending_jobs",
    "connection_requests": "connection_requests",
    "connections": "connections",
    "conversations": "conversations",
    "messages": "messages",
    "resources": "resources",
    "notifications": "notifications",
}


def init_mongo_indexes():
    """
    Create indexes for better query performance.
    Call this once during app startup.
    """
    db = get_mongo_db()

    db[COLLECTIONS["users"]].create_index("email", unique=True)
    db[COLLECTIONS["users"]].create_index("role")

    db[COLLECTIONS["posts"]].create_index([("createdAt", DESCENDING)])
    db[COLLECTIONS["posts"]].create_index("author.id")

    # Approval workflow lookups
    for name in ("pending_events", "pending_jobs"):
        db[COLLECTIONS[name]].create_index("status")
        db[COLLECTIONS[name]].create_index("createdBy")

    db[COLLECTIONS["connection_requests"]].create_index([
        ("receiverId", ASCENDING),
        ("status", ASCENDING)
    ])
    db[COLLECTIONS["connection_requests"]].create_index([
        ("senderId", ASCENDING),
        ("status", ASCENDING)
    ])
    db[COLLECTIONS["connections"]].create_index("user1Id")
    db[COLLECTIONS["connections"]].create_index("user2Id")

    db[COLLECTIONS["conversations"]].create_index("participants")
    db[COLLECTIONS["messages"]].create_index([
        ("conversationId", ASCENDING),
        ("createdAt", DESCENDING)
    ])

    db[COLLECTIONS["resources"]].create_index([("createdAt", DESCENDING)])

    db[COLLECTIONS["notifications"]].create_index([
        ("userId", ASCENDING),
        ("createdAt", DESCENDING)
    ])

    logger.info("MongoDB indexes created successfully")
