"""
Database models for via.
"""

from sqlalchemy import Column, String, Float, LargeBinary
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class CacheEntry(Base):
    """
    Cached blob with its absolute expiry.

    A null expires_at means the entry never expires.
    """
    __tablename__ = "cache_entries"

    key = Column(String, primary_key=True)
    payload = Column(LargeBinary, nullable=False)
    expires_at = Column(Float, nullable=True)
