"""
Database connection and session management.

This module sets up SQLAlchemy to connect to the relational backend
that holds the three collections (contacts, appointments, properties).
"""

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from realty_crm.core.config import settings
import logging

logger = logging.getLogger(__name__)

# Base class for our models - every table inherits from this
Base = declarative_base()


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create an engine for the given URL.

    In-memory SQLite ("sqlite://") gets a StaticPool so every session
    sees the same database; file SQLite allows cross-thread use because
    FastAPI runs sync endpoints in a thread pool.
    """
    kwargs = {"echo": echo}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    else:
        # Test connections before using them, recovers from DB restarts
        kwargs["pool_pre_ping"] = True
    return create_engine(database_url, **kwargs)


def build_session_factory(engine: Engine) -> sessionmaker:
    """A factory for sessions bound to `engine`."""
    return sessionmaker(
        autocommit=False,  # We control when to commit
        autoflush=False,
        bind=engine,
    )


def init_db(engine: Engine) -> None:
    """Create any missing tables."""
    # Import models so they register on Base.metadata
    from realty_crm.db import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ensured")


def check_connection(session_factory: sessionmaker) -> bool:
    """Run SELECT 1; True if the database answered."""
    try:
        with session_factory() as db:
            db.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database check failed: {e}")
        return False


engine = build_engine(settings.database_url, echo=settings.debug)
SessionLocal = build_session_factory(engine)
