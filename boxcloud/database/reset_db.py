"""
Development utility: delete the SQLite database file so the next start
recreates an empty schema. Stored uploads are left alone.

Usage: ``python -m boxcloud.database.reset_db``
"""

import logging
import os

from boxcloud.database.config.config import settings

logger = logging.getLogger(__name__)


def reset_database(db_path: str | None = None) -> bool:
    """
    Remove the database file.

    Returns
    -------
    bool
        True if a file was deleted, False if there was none.
    """
    path = os.path.abspath(db_path or settings.DB_PATH)
    if not os.path.exists(path):
        logger.info(f"No database found at {path}")
        return False
    os.remove(path)
    logger.info(f"Database deleted: {path}")
    return True


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    reset_database()
