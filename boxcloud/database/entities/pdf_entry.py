"""
PDF Entry ORM Model
===================

The ``PdfEntry`` ORM model represents one titled record inside a box, stored in
the ``pdfs`` table. An entry may carry an uploaded PDF file or be a
title-only placeholder.

Invariants
~~~~~~~~~~
- ``title`` is always set.
- A file-backed entry has ``filename == path`` (the storage key), the
  client-supplied ``original_name`` and the byte ``size``.
- A title-only entry has ``filename = path = NULL`` and ``size = 0``. Rows
  written against a legacy NOT NULL schema use ``''`` instead of ``NULL``;
  :attr:`PdfEntry.has_file` treats both as "no file".
"""

import uuid
from datetime import datetime, timezone

from boxcloud.database.config.connection_engine import declarativeBase
from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, TEXT
from sqlalchemy.orm import Mapped, mapped_column


class PdfEntry(declarativeBase):
    """
    ORM model for the `pdfs` table.

    Attributes
    ----------
    id : str
        Primary key. UUID string of the entry.
    title : str
        Display title.
    filename : str | None
        Stored file name (storage key).
    original_name : str | None
        File name supplied by the client.
    path : str | None
        Storage key relative to the upload directory; equals `filename`.
    size : int
        Size of the stored file in bytes, 0 without a file.
    box_id : str
        Owning box (FK → boxes.id, cascade on delete).
    upload_date : datetime
        Creation time (UTC).
    """

    __tablename__ = "pdfs"
    __table_args__ = (
        Index("idx_pdfs_box_id", "box_id"),
        Index("idx_pdfs_path", "path"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    title: Mapped[str] = mapped_column(TEXT, nullable=False)
    filename: Mapped[str | None] = mapped_column(TEXT, nullable=True)
    original_name: Mapped[str | None] = mapped_column(TEXT, nullable=True)
    path: Mapped[str | None] = mapped_column(TEXT, nullable=True)
    size: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    box_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("boxes.id", ondelete="CASCADE"), nullable=False
    )
    upload_date: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(timezone.utc)
    )

    def __init__(
        self,
        title: str,
        box_id: str,
        filename: str | None = None,
        original_name: str | None = None,
        path: str | None = None,
        size: int = 0,
    ):
        self.id = str(uuid.uuid4())
        self.title = title
        self.box_id = box_id
        self.filename = filename
        self.original_name = original_name
        self.path = path
        self.size = size
        self.upload_date = datetime.now(timezone.utc)

    @property
    def has_file(self) -> bool:
        """True when the entry references a stored file."""
        return bool(self.filename) and bool(self.path)

    def __str__(self) -> str:
        return f"PdfEntry: id:{self.id}, title: {self.title}, box: {self.box_id}, path: {self.path}"
