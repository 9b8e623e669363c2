"""
User ORM Model
==============

The ``User`` ORM model represents a registered account. It maps to the
``users`` table and owns zero or more boxes.

Key features
~~~~~~~~~~~~
- Opaque string UUID primary key (``id``)
- Unique, case-sensitive ``email``
- ``password`` holds a bcrypt digest, never plaintext
- Creation timestamp (``created_at``)
"""

from boxcloud.database.config.connection_engine import declarativeBase
from sqlalchemy import Index, String, TEXT, DateTime
from sqlalchemy.orm import Mapped, mapped_column
import uuid
from datetime import datetime, timezone


class User(declarativeBase):
    """
    ORM model for the `users` table.

    Attributes
    ----------
    id : str
        Primary key. UUID string of the user.
    email : str
        Login e-mail, unique across users.
    name : str
        Display name, shown as the owner of public boxes.
    password : str
        bcrypt digest of the user's password.
    created_at : datetime
        Registration time (UTC).
    """

    __tablename__ = "users"
    __table_args__ = (Index("idx_users_email", "email"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    """Primary key. UUID of the user."""

    email: Mapped[str] = mapped_column(TEXT, unique=True, nullable=False)
    """E-mail address of the user (unique)."""

    name: Mapped[str] = mapped_column(TEXT, nullable=False)
    """Display name of the user."""

    password: Mapped[str] = mapped_column(TEXT, nullable=False)
    """Hashed password of the user."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(timezone.utc)
    )
    """Datetime when the account was created."""

    def __init__(self, name: str, email: str, password: str, user_id: str | None = None):
        """
        Initialize a new User object.

        Parameters
        ----------
        name : str
            Display name.
        email : str
            E-mail address.
        password : str
            Already-hashed password digest.
        user_id : str, optional
            Explicit id; a fresh UUID is generated when omitted.
        """
        self.id = user_id or str(uuid.uuid4())
        self.name = name
        self.email = email
        self.password = password
        self.created_at = datetime.now(timezone.utc)

    def __str__(self) -> str:
        return f"User: id:{self.id}, email: {self.email}, name: {self.name}"
