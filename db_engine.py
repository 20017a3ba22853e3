"""
Database engine and session management for InvestTrack.
Uses SQLModel on top of SQLAlchemy; SQLite by default.
SQLite databases run in Write-Ahead Logging (WAL) mode with foreign keys enforced.
"""

from sqlalchemy import event
from sqlmodel import SQLModel, Session, create_engine
from typing import Optional
import logging

from config import get_settings

logger = logging.getLogger(__name__)

# Global engine instance
_engine: Optional[object] = None


def get_engine():
    """Get or create the database engine."""
    global _engine
    if _engine is None:
        settings = get_settings()
        connect_args = {}
        if settings.is_sqlite:
            connect_args["check_same_thread"] = False  # Streamlit reruns on worker threads
        _engine = create_engine(
            settings.database_url,
            echo=settings.db_echo,
            connect_args=connect_args
        )
        if settings.is_sqlite:
            enable_sqlite_foreign_keys(_engine)
            _enable_wal_mode()
    return _engine


def set_engine(engine) -> None:
    """Bind an externally created engine (in-memory databases in tests)."""
    global _engine
    enable_sqlite_foreign_keys(engine)
    _engine = engine


def reset_engine() -> None:
    """Dispose of the current engine so the next call rebuilds it from settings."""
    global _engine
    if _engine is not None:
        _engine.dispose()
    _engine = None


def _set_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def enable_sqlite_foreign_keys(engine) -> None:
    """Turn on foreign key enforcement for every new SQLite connection of the engine."""
    if engine.dialect.name != "sqlite":
        return
    if not event.contains(engine, "connect", _set_sqlite_foreign_keys):
        event.listen(engine, "connect", _set_sqlite_foreign_keys)


def _enable_wal_mode():
    """Enable SQLite WAL mode for improved concurrent read/write performance."""
    if _engine is None:
        return

    try:
        with _engine.connect() as conn:
            conn.exec_driver_sql("PRAGMA journal_mode=WAL")
            conn.exec_driver_sql("PRAGMA busy_timeout=5000")
            logger.info("SQLite WAL mode enabled for concurrent access")
    except Exception as e:
        logger.warning(f"Could not enable WAL mode: {e}")


def init_db():
    """Initialize the database and create all tables."""
    from models import Investment, Transaction  # noqa: F401  (registers tables)

    engine = get_engine()
    SQLModel.metadata.create_all(engine)
    logger.info("Database initialized")


def get_session() -> Session:
    """Get a new database session."""
    return Session(get_engine())
