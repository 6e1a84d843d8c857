"""
Database module - relational (SQLAlchemy) and MongoDB connections.
"""
from marketplace.db.database import get_db_session, init_db, ping_database
from marketplace.db.mongodb import get_mongo_db, ping_mongo

__all__ = [
    "get_db_session",
    "init_db",
    "ping_database",
    "get_mongo_db",
    "ping_mongo"
]
