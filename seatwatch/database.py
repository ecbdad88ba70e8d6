# seatwatch/database.py
"""
Database connection, session management, and table creation.
Uses SQLAlchemy; SQLite by default, PostgreSQL via DATABASE_URL. All models
are auto-imported here so create_tables() creates every table in one call.
"""

from sqlalchemy import create_engine
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker
from seatwatch.config import settings


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        # Scheduler jobs and request handlers may run on different threads
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,       # Auto-reconnect if DB connection drops
        "pool_size": 5,
        "max_overflow": 10,
    }


engine = create_engine(
    settings.DATABASE_URL,
    echo=False,                      # Set True to log all SQL queries (debug only)
    **_engine_options(settings.DATABASE_URL),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency — yields a DB session and closes it after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables():
    """
    Creates all DB tables on startup. Safe to call multiple times.
    Import all models here so SQLAlchemy knows about them.
    """
    from seatwatch.models.shop import Shop                     # noqa
    from seatwatch.models.room import Room                     # noqa
    from seatwatch.models.snapshot import Snapshot             # noqa
    from seatwatch.models.room_snapshot import RoomSnapshot    # noqa

    Base.metadata.create_all(bind=engine)
