"""
License ORM Models
==================

Registration is gated by externally-issued license codes.

- ``LicenseCode`` (``license_codes`` table) holds one row per code with its
  ``max_uses`` and ``current_uses`` counters. Consumption is a single
  conditional ``UPDATE`` so two concurrent registrations can never push a code
  past its limit.
- ``LicenseUsage`` (``license_usage`` table) records which user consumed which
  code, and is used to refuse a code that an e-mail address already used.
"""

import uuid
from datetime import datetime, timezone

from boxcloud.database.config.connection_engine import declarativeBase
from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, TEXT
from sqlalchemy.orm import Mapped, mapped_column


class LicenseCode(declarativeBase):
    """ORM model for the `license_codes` table."""

    __tablename__ = "license_codes"

    code: Mapped[str] = mapped_column(TEXT, primary_key=True)
    """The license code itself."""

    max_uses: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    """How many registrations the code allows."""

    current_uses: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    """How many registrations already consumed the code."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(timezone.utc)
    )

    def __init__(self, code: str, max_uses: int = 1, current_uses: int = 0):
        self.code = code
        self.max_uses = max_uses
        self.current_uses = current_uses
        self.created_at = datetime.now(timezone.utc)

    def __str__(self) -> str:
        return f"LicenseCode: {self.code} ({self.current_uses}/{self.max_uses})"


class LicenseUsage(declarativeBase):
    """ORM model for the `license_usage` table."""

    __tablename__ = "license_usage"
    __table_args__ = (Index("idx_license_usage_code", "license_code"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    license_code: Mapped[str] = mapped_column(TEXT, nullable=False)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    used_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(timezone.utc)
    )

    def __init__(self, license_code: str, user_id: str):
        self.id = str(uuid.uuid4())
        self.license_code = license_code
        self.user_id = user_id
        self.used_at = datetime.now(timezone.utc)
