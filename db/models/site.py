from sqlalchemy import Column, Integer, String, DateTime
from db.base import Base
from datetime import datetime, timezone
from typing import Optional

# Site status values
STATUS_UNKNOWN = "UNKNOWN"
STATUS_UP = "UP"
STATUS_DOWN = "DOWN"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite drops the offset on stored timestamps; they are always UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Site(Base):
    __tablename__ = "sites"
    id = Column(Integer, primary_key=True, index=True)
    url = Column(String, unique=True, nullable=False)  # As entered, scheme added at probe time
    status = Column(String, nullable=False, default=STATUS_UNKNOWN)
    last_checked = Column(DateTime, nullable=True)
    last_status_change = Column(DateTime, nullable=True)
    last_down_timestamp = Column(DateTime, nullable=True)  # Kept across recovery
    created_at = Column(DateTime, default=utcnow)
