"""SQLAlchemy model backing the key/value notification storage."""

from sqlalchemy import Column, DateTime, String, Text

from app.infrastructure.database import Base
from app.utils import now_in_app_timezone


def _local_naive_now():
    return now_in_app_timezone().replace(tzinfo=None)


class KeyValueEntryModel(Base):
    """Single string blob stored under a unique key."""

    __tablename__ = "key_value_entry"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(
        DateTime(), nullable=False, default=_local_naive_now, onupdate=_local_naive_now
    )


__all__ = ["KeyValueEntryModel"]
