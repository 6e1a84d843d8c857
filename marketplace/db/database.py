import json
import uuid
from contextlib import contextmanager

from sqlalchemy import create_engine, text

from marketplace.core.config import get_settings
from marketplace.core.logging import get_logger
from marketplace.db.schema import DROP_ORDER, SCHEMA_STATEMENTS

settings = get_settings()
logger = get_logger(__name__)


def _build_engine(url: str):
    if url.startswith("sqlite"):
        # TestClient and the dev server hand sessions across threads
        return create_engine(url, connect_args={"check_same_thread": False}, echo=settings.debug)
    # pool_size=5: maintain 5 connections ready
    # max_overflow=10: allow 10 extra connections under load
    return create_engine(url, pool_size=5, max_overflow=10, pool_pre_ping=True, echo=settings.debug)


engine = _build_engine(settings.sqlalchemy_url)


@contextmanager
def get_db_session():
    """
    Context manager for database connections. Commits on success, rolls back on error.
    Usage:
        with get_db_session() as db:
            db.execute(text("SELECT * FROM users"))
    """
    with engine.connect() as connection:
        transaction = connection.begin()
        try:
            yield connection
            transaction.commit()
        except Exception:
            transaction.rollback()
            raise


def new_id() -> str:
    """Opaque string id used as primary key for every table."""
    return uuid.uuid4().hex


def to_json_list(values) -> str:
    return json.dumps(list(values or []))


def from_json_list(raw) -> list:
    """Decode a JSON list column. Empty or malformed values read as []."""
    if raw is None or raw == "":
        return []
    if isinstance(raw, list):
        return raw
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Discarding malformed list column value: %r", raw)
        return []
    return value if isinstance(value, list) else []


def init_db() -> None:
    """Create all tables if they are missing. Safe to call on every startup."""
    with get_db_session() as db:
        for statement in SCHEMA_STATEMENTS:
            db.execute(text(statement))
    logger.info("Database schema ready")


def drop_db() -> None:
    with get_db_session() as db:
        for table in DROP_ORDER:
            db.execute(text(f"DROP TABLE IF EXISTS {table}"))


def ping_database() -> bool:
    """
    Test if the relational database is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        with get_db_session() as db:
            row = db.execute(text("SELECT 1 as test")).fetchone()
            return row[0] == 1
    except Exception as e:
        logger.error("Database connection failed: %s", e)
        return False


def fetch_all(sql: str, params: dict = None) -> list:
    """
    Execute raw SQL and return results as list of dicts.
    """
    with get_db_session() as db:
        result = db.execute(text(sql), params or {})
        return [dict(row) for row in result.mappings().all()]


def fetch_one(sql: str, params: dict = None):
    rows = fetch_all(sql, params)
    return rows[0] if rows else None
