"""
Generic SQL-backed blob cache with per-entry TTL.
"""

import logging
import time
from typing import Callable, Optional
from sqlalchemy.orm import sessionmaker
from via.database import DEFAULT_CACHE_URL, get_db_context, make_session_factory
from via.db_models import CacheEntry

logger = logging.getLogger(__name__)


class CacheError(Exception):
    """Cache lookup did not produce a usable payload."""
    def __init__(self, key: str, message: str):
        super().__init__(f"{message}: {key}")
        self.key = key


class CacheMiss(CacheError):
    """No entry stored under the key."""
    def __init__(self, key: str):
        super().__init__(key, "not found")


class CacheExpired(CacheError):
    """Entry exists but its TTL has elapsed."""
    def __init__(self, key: str):
        super().__init__(key, "time exceeded")


class TTLCache:
    """
    Named-blob cache with absolute expiry per entry.

    Payload and expiry live in the same row, so expiry survives
    process restarts. There is no locking: concurrent writers to the
    same key race and the last one wins.
    """

    def __init__(
        self,
        database_url: str = DEFAULT_CACHE_URL,
        clock: Callable[[], float] = time.time,
        session_factory: Optional[sessionmaker] = None
    ):
        """
        Initialize cache.

        Args:
            database_url: SQLAlchemy URL of the backing store
            clock: Returns the current time in epoch seconds
            session_factory: Pre-built session factory, overrides database_url
        """
        self.clock = clock
        self.database_url = database_url
        self._session_factory = session_factory

    def _sessions(self) -> sessionmaker:
        # Engine and tables are created on first use
        if self._session_factory is None:
            self._session_factory = make_session_factory(self.database_url)
        return self._session_factory

    def store(self, key: str, payload: bytes, ttl: Optional[float]):
        """
        Store payload, replacing any previous entry for the key.

        Args:
            key: Cache key
            payload: Raw bytes to persist
            ttl: Time-to-live in seconds, None for no expiry
        """
        expires_at = self.clock() + ttl if ttl is not None else None
        with get_db_context(self._sessions()) as db:
            db.merge(CacheEntry(key=key, payload=payload, expires_at=expires_at))
        logger.debug("Cache entry stored", extra={"key": key, "ttl": ttl})

    def load(self, key: str) -> bytes:
        """
        Load payload if present and not expired.

        Args:
            key: Cache key

        Returns:
            Stored payload

        Raises:
            CacheMiss: No entry for the key
            CacheExpired: Entry expired (it is deleted)
        """
        with get_db_context(self._sessions()) as db:
            entry = db.get(CacheEntry, key)

            if entry is None:
                raise CacheMiss(key)

            if entry.expires_at is not None and self.clock() >= entry.expires_at:
                db.delete(entry)
                db.commit()
                raise CacheExpired(key)

            return entry.payload

    def delete(self, key: str) -> bool:
        """
        Delete a specific cache entry.

        Returns:
            True if an entry was removed
        """
        with get_db_context(self._sessions()) as db:
            entry = db.get(CacheEntry, key)
            if entry is None:
                return False
            db.delete(entry)
            return True

    def clear_expired(self) -> int:
        """Delete every expired entry and return how many were removed."""
        with get_db_context(self._sessions()) as db:
            return db.query(CacheEntry).filter(
                CacheEntry.expires_at.isnot(None),
                CacheEntry.expires_at <= self.clock()
            ).delete(synchronize_session=False)

    def clear_all(self) -> int:
        """Clear all cache entries."""
        with get_db_context(self._sessions()) as db:
            return db.query(CacheEntry).delete(synchronize_session=False)
