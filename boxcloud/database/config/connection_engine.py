"""
Connection Engine (SQLAlchemy)

Purpose
-------
Centralizes database initialization for the application:
- Builds the SQLite connection URL from environment-backed settings.
- Creates the Engine (connection pool + SQL execution entry point).
- Turns on SQLite foreign-key enforcement for every new connection, which the
  box → entry cascade relies on.
- Defines shared MetaData for table and schema objects.
- Exposes a Declarative Base class for ORM models.

Notes
-----
- Uses `URL.create(...)` so the file location stays environment-driven.
- All ORM models must inherit from `declarativeBase` to participate in
  `metadata.create_all` and ORM features.
"""

import os

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL
from sqlalchemy.orm import declarative_base
from sqlalchemy.schema import MetaData
from boxcloud.database.config.config import settings

# --------------------------------------------------------------------
# Construct the SQLAlchemy connection URL using values from Settings.
# --------------------------------------------------------------------
connection_url = URL.create(
    drivername="sqlite",
    database=os.path.abspath(settings.DB_PATH),
)
"""SQLAlchemy URL of the single-file SQLite store named by `DB_PATH`."""

# --------------------------------------------------------------------
# Engine object: core interface to the database.
# Request handlers run in a threadpool, so connections may cross threads.
# --------------------------------------------------------------------
connection_engine = create_engine(
    connection_url,
    connect_args={"check_same_thread": False},
)
"""Engine object: Core interface to the database.
Responsible for managing connections, executing SQL, and pooling.
"""


@event.listens_for(connection_engine, "connect")
def _configure_sqlite_connection(dbapi_connection, connection_record):
    """SQLite ships with foreign keys off; ON DELETE CASCADE needs them on."""
    # Hand transaction control to SQLAlchemy so SAVEPOINT and DDL stay transactional.
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@event.listens_for(connection_engine, "begin")
def _begin_sqlite_transaction(conn):
    conn.exec_driver_sql("BEGIN")


metadata = MetaData()
"""
Metadata object: Stores schema-level information about tables, constraints, indexes, etc. Shared across all models.
"""

declarativeBase = declarative_base(metadata=metadata)
"""Declarative Base: Root class for ORM models.
All model classes should inherit from this to gain ORM features and automatic schema generation.
 """
