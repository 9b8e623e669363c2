"""
Entities Package — SQLAlchemy 2.0 ORM Models (SQLite + UUID strings + UTC)
==========================================================================

The `entities` package defines the ORM models of the application, mapping
database tables to Python classes using SQLAlchemy 2.0-typed mappings.
These classes are consumed by DAOs (`daos` package).

Ownership is a strict tree: User → Box → PdfEntry. Foreign keys use
``ON DELETE CASCADE`` and are the only deletion propagation mechanism.

Contents
--------
- User (``users``)
    Registered account: e-mail (unique), display name, bcrypt digest.

- Box (``boxes``)
    Named collection owned by one user, with optional retention date and a
    ``status`` (owned | restricted | borrowed | active).

- PdfEntry (``pdfs``)
    Titled record inside a box, optionally backed by an uploaded PDF file.

- LicenseCode (``license_codes``) / LicenseUsage (``license_usage``)
    Registration-gating codes with a usage ceiling and the record of who
    consumed them.

Importing this package registers every model on the shared metadata.
"""

from boxcloud.database.entities.user import User
from boxcloud.database.entities.box import Box, BoxStatus, DEFAULT_BOX_STATUS
from boxcloud.database.entities.pdf_entry import PdfEntry
from boxcloud.database.entities.license import LicenseCode, LicenseUsage

__all__ = [
    "User",
    "Box",
    "BoxStatus",
    "DEFAULT_BOX_STATUS",
    "PdfEntry",
    "LicenseCode",
    "LicenseUsage",
]
