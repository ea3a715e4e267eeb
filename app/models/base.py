"""
Base configurations and mixins for database models.

Models are declared without a schema; on PostgreSQL the connection's
search_path points at the configured schema (see `app.db`), which lets the
same metadata run unchanged on SQLite for local development and tests.
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import JSON, Column, DateTime, Uuid
from sqlalchemy.ext.mutable import MutableDict, MutableList
from sqlalchemy.orm import declarative_base


def utcnow() -> datetime:
    return datetime.now(UTC)


Base = declarative_base()

# JSON columns whose in-place mutations (append/remove, item set/delete) are
# tracked by the session. Nested values must be replaced, not mutated.
IdList = MutableList.as_mutable(JSON)
EmbeddedDocuments = MutableDict.as_mutable(JSON)


class TimestampMixin:
    """
    Adds created_at/updated_at columns.

    Values are generated client-side so they are available on the instance
    right after a flush, without a refresh round-trip.
    """

    created_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        comment="Timestamp when the record was created",
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
        comment="Timestamp when the record was last updated",
    )


class UUIDMixin:
    """Adds a UUID4 primary key."""

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        index=True,
        comment="Primary key using UUID4 format",
    )


__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "IdList",
    "EmbeddedDocuments",
    "utcnow",
]
