"""
MongoDB Connection Utility

MongoDB stores:
- Raw verification submissions exactly as talents sent them
- Admin review decisions with their free-form notes

WHY MongoDB for these?
- Submission payloads change shape as the verification form evolves
- They are an append-only audit trail, never joined
"""
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.collection import Collection

from marketplace.core.config import get_settings
from marketplace.core.logging import get_logger

settings = get_settings()
logger = get_logger(__name__)

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(settings.mongodb_uri, serverSelectionTimeoutMS=2000)
    return _client


def set_mongo_client(client: MongoClient) -> None:
    """Swap the process-wide client, e.g. for an in-memory server in tests."""
    global _client, _db
    _client = client
    _db = None


def get_mongo_db() -> Database:
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    db = get_mongo_db()
    return db[name]


def ping_mongo() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        client.admin.command('ping')
        return True
    except Exception as e:
        logger.error("MongoDB connection failed: %s", e)
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "verification_submissions": "verification_submissions",
    "verification_reviews": "verification_reviews",
}


def init_mongo_indexes():
    """
    Create indexes for the audit collections.
    Call this once during app startup.
    """
    db = get_mongo_db()

    db[COLLECTIONS["verification_submissions"]].create_index([
        ("user_id", 1),
        ("submitted_at", -1)
    ])
    db[COLLECTIONS["verification_reviews"]].create_index("talent_profile_id")

    logger.info("MongoDB indexes created successfully")
