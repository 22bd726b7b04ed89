#!/usr/bin/env python3
"""
MongoDB Check Script

Pings MongoDB, creates indexes and prints document counts per collection.
Read-only apart from index creation.
Run: python scripts/check_mongo.py
"""
import sys
sys.path.insert(0, '.')

from pymongo.errors import PyMongoError

from alumnisetu.core.config import get_settings
from alumnisetu.db.mongodb import test_mongo_connection, init_mongo_indexes, get_mongo_db, COLLECTIONS


def print_counts():
    """Documents per collection, plus the approval queue size."""
    db = get_mongo_db()
    print("\n[1] Collection counts")
    for key, name in COLLECTIONS.items():
        print(f"    {name:<22} {db[name].count_documents({}):>8}")

    print("\n[2] Approval queue")
    for key in ("pending_jobs", "pending_events"):
        pending = db[COLLECTIONS[key]].count_documents({"status": "pending"})
        print(f"    {COLLECTIONS[key]:<22} {pending:>8} waiting")

    admins = db[COLLECTIONS["users"]].count_documents({"role": "admin"})
    if admins == 0:
        print("\n⚠️  No admin users: pending submissions will never be reviewed")
    else:
        print(f"\n    {admins} admin user(s)")


def main():
    settings = get_settings()
    print("=" * 60)
    print(f"MONGODB CHECK ({settings.mongodb_db})")
    print("=" * 60)

    if not test_mongo_connection():
        print("❌ MongoDB connection failed!")
        sys.exit(1)

    print("✅ MongoDB connected!")

    try:
        init_mongo_indexes()
        print("✅ Indexes ready")
        print_counts()
    except PyMongoError as e:
        print(f"\n❌ Check failed with error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
