"""
Database connection and session management for the cache store.
"""

import os
import tempfile
from contextlib import contextmanager
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# SQLite file shared by every invocation on this machine
DEFAULT_CACHE_URL = "sqlite:///" + os.path.join(tempfile.gettempdir(), "via-cache.db")


def make_session_factory(database_url: str = DEFAULT_CACHE_URL) -> sessionmaker:
    """
    Create engine and session factory, creating tables when missing.

    Args:
        database_url: SQLAlchemy database URL

    Returns:
        Session factory bound to the engine
    """
    from via.db_models import Base

    engine = create_engine(database_url)
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine)


@contextmanager
def get_db_context(session_factory: sessionmaker):
    """
    Context manager for database session.

    Usage:
        with get_db_context(factory) as db:
            # Use db session
            pass
    """
    db = session_factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
