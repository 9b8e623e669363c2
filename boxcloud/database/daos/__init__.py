"""
DAOs Package — Data Access Layer (SQLAlchemy 2.0)
=================================================

The `daos` package provides the Data Access Layer for the application.
It encapsulates all interactions with SQLAlchemy ORM entities, providing
clean CRUD APIs for the core layer while hiding direct query details.

Conventions
-----------
- Session lifecycle (open/commit/rollback) is handled by callers through
  `@transactional`
- DAOs log and re-raise exceptions so upper layers decide error policy

Contents
--------
- UserDao
    Creates users and fetches them by id or e-mail.

- BoxDao
    Creates, updates and deletes boxes; owner-scoped lookups; box listing
    with live entry counts; public lookup joined with the owner name.

- PdfDao
    Inserts file-backed and title-only entries (with the legacy NOT NULL
    fallback), lists entries, resolves storage keys, deletes entries and
    computes per-box statistics.

- LicenseDao
    Reads and registers license codes, consumes uses atomically and records
    which user consumed a code.
"""
