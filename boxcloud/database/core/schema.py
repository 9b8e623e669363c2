"""
Schema bootstrap and legacy migration.

`init_database` runs on every startup and is idempotent:

1. `metadata.create_all` creates any missing table (users, boxes, pdfs,
   license_codes, license_usage). A failure here propagates: the service
   cannot run without its tables.
2. Structural migrations bring databases written by older releases up to
   date. Each runs in its own transaction; failures are logged and swallowed
   so the service keeps serving with whatever schema exists.
   - `pdfs` without a `title` column, or with `filename` declared NOT NULL,
     is rebuilt. Titles are backfilled from title → filename →
     original_name → "Untitled"; every other column is copied unchanged.
   - `boxes` missing `retention_date` / `status` gets them added.
3. Missing indexes are created.
"""

import logging

from sqlalchemy import inspect, text
from sqlalchemy.engine import Connection, Engine

from boxcloud.database.config.connection_engine import connection_engine, metadata
import boxcloud.database.entities  # noqa: F401  (registers every model on `metadata`)

logger = logging.getLogger(__name__)

LEGACY_TITLE_FALLBACK = "Untitled"

_PDFS_REBUILD_DDL = """
CREATE TABLE pdfs_new (
    id VARCHAR(36) NOT NULL PRIMARY KEY,
    title TEXT NOT NULL,
    filename TEXT,
    original_name TEXT,
    path TEXT,
    size INTEGER DEFAULT 0,
    box_id VARCHAR(36) NOT NULL,
    upload_date DATETIME DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (box_id) REFERENCES boxes (id) ON DELETE CASCADE
)
"""

_PDFS_REBUILD_INSERT = text(
    """
    INSERT INTO pdfs_new (id, title, filename, original_name, path, size, box_id, upload_date)
    VALUES (:id, :title, :filename, :original_name, :path, :size, :box_id,
            COALESCE(:upload_date, CURRENT_TIMESTAMP))
    """
)


def pdfs_needs_migration(conn: Connection) -> bool:
    """True when `pdfs` exists in a legacy shape (no title, or NOT NULL filename)."""
    inspector = inspect(conn)
    if not inspector.has_table("pdfs"):
        return False
    columns = {col["name"]: col for col in inspector.get_columns("pdfs")}
    filename_col = columns.get("filename")
    return "title" not in columns or (filename_col is not None and not filename_col["nullable"])


def legacy_title(row) -> str:
    """Best available title for a legacy row."""
    for key in ("title", "filename", "original_name"):
        value = row.get(key)
        if value:
            return value
    return LEGACY_TITLE_FALLBACK


def migrate_pdfs_table(conn: Connection) -> int:
    """
    Rebuild `pdfs` in the current shape, inside the caller's transaction.

    Returns
    -------
    int
        Number of rows carried over.
    """
    conn.exec_driver_sql("DROP TABLE IF EXISTS pdfs_new")
    conn.exec_driver_sql(_PDFS_REBUILD_DDL)

    rows = conn.execute(text("SELECT * FROM pdfs")).mappings().all()
    if rows:
        logger.info(f"Migrating {len(rows)} existing entries")
    for row in rows:
        conn.execute(
            _PDFS_REBUILD_INSERT,
            {
                "id": row.get("id"),
                "title": legacy_title(row),
                "filename": row.get("filename"),
                "original_name": row.get("original_name"),
                "path": row.get("path"),
                "size": row.get("size") or 0,
                "box_id": row.get("box_id"),
                "upload_date": row.get("upload_date"),
            },
        )

    conn.exec_driver_sql("DROP TABLE pdfs")
    conn.exec_driver_sql("ALTER TABLE pdfs_new RENAME TO pdfs")
    return len(rows)


def add_missing_box_columns(conn: Connection) -> list[str]:
    """Add `retention_date` / `status` to a legacy `boxes` table. Returns the added column names."""
    inspector = inspect(conn)
    if not inspector.has_table("boxes"):
        return []
    existing = {col["name"] for col in inspector.get_columns("boxes")}
    added = []
    if "retention_date" not in existing:
        conn.exec_driver_sql("ALTER TABLE boxes ADD COLUMN retention_date DATE")
        added.append("retention_date")
    if "status" not in existing:
        conn.exec_driver_sql("ALTER TABLE boxes ADD COLUMN status TEXT NOT NULL DEFAULT 'active'")
        added.append("status")
    return added


def create_missing_indexes(engine: Engine) -> None:
    with engine.begin() as conn:
        for table in metadata.sorted_tables:
            for index in table.indexes:
                index.create(conn, checkfirst=True)


def run_migrations(engine: Engine) -> None:
    """Apply the legacy-shape migrations; errors are logged and swallowed."""
    try:
        with engine.begin() as conn:
            if pdfs_needs_migration(conn):
                logger.info("Migrating pdfs table for title support")
                migrate_pdfs_table(conn)
                logger.info("pdfs table migration completed")
            else:
                logger.debug("pdfs table is already up to date")
    except Exception:
        logger.exception("pdfs table migration failed; continuing with the existing schema")

    try:
        with engine.begin() as conn:
            added = add_missing_box_columns(conn)
            if added:
                logger.info(f"Added columns to boxes: {', '.join(added)}")
    except Exception:
        logger.exception("boxes table migration failed; continuing with the existing schema")

    try:
        create_missing_indexes(engine)
    except Exception:
        logger.exception("Index creation failed; continuing without them")


def init_database(engine: Engine = connection_engine) -> None:
    """Create tables and indexes and migrate legacy shapes. Safe to call on every start."""
    metadata.create_all(engine)
    run_migrations(engine)
    logger.info(f"Database tables initialized at {engine.url.database}")
