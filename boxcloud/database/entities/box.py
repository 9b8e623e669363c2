"""
Box ORM Model
=============

The ``Box`` ORM model represents a named collection of entries owned by one
user. It is stored in the ``boxes`` table.

Key features
~~~~~~~~~~~~
- Opaque string UUID primary key (``id``)
- Foreign key to the owning user (``user_id`` → ``users.id``, ``ON DELETE CASCADE``)
- Optional ``retention_date`` marking the intended disposal date
- ``status`` drawn from :class:`BoxStatus`, ``active`` by default

Deleting a box row removes its ``pdfs`` rows through the foreign-key cascade;
backing files are unlinked by the core layer before the row is deleted.
"""

import enum
import uuid
from datetime import date, datetime, timezone

from boxcloud.database.config.connection_engine import declarativeBase
from sqlalchemy import Date, DateTime, ForeignKey, Index, String, TEXT
from sqlalchemy.orm import Mapped, mapped_column


class BoxStatus(str, enum.Enum):
    """Lifecycle status of a box."""

    OWNED = "owned"
    RESTRICTED = "restricted"
    BORROWED = "borrowed"
    ACTIVE = "active"


DEFAULT_BOX_STATUS = BoxStatus.ACTIVE.value
"""Status stored when a create or update request does not name one."""


class Box(declarativeBase):
    """
    ORM model for the `boxes` table.

    Attributes
    ----------
    id : str
        Primary key. UUID string of the box.
    name : str
        Trimmed, non-empty box name.
    user_id : str
        Owner (FK → users.id).
    retention_date : date | None
        Optional calendar date marking intended disposal.
    status : str
        One of the :class:`BoxStatus` values.
    created_at : datetime
        Creation time (UTC).
    """

    __tablename__ = "boxes"
    __table_args__ = (Index("idx_boxes_user_id", "user_id"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    """Primary key. UUID of the box."""

    name: Mapped[str] = mapped_column(TEXT, nullable=False)
    """Name of the box."""

    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    """Foreign key reference to the owning user."""

    retention_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    """Optional retention (disposal) date."""

    status: Mapped[str] = mapped_column(
        TEXT, nullable=False, default=DEFAULT_BOX_STATUS, server_default=DEFAULT_BOX_STATUS
    )
    """Lifecycle status of the box."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(timezone.utc)
    )
    """Timestamp when the box was created."""

    def __init__(self, name: str, user_id: str, retention_date: date | None = None, status: str | None = None):
        self.id = str(uuid.uuid4())
        self.name = name
        self.user_id = user_id
        self.retention_date = retention_date
        self.status = status or DEFAULT_BOX_STATUS
        self.created_at = datetime.now(timezone.utc)

    def __str__(self) -> str:
        return f"Box: id:{self.id}, name: {self.name}, owner: {self.user_id}, status: {self.status}"
