"""
Box DAO

Purpose
-------
Data-access layer for the `Box` ORM entity:
- Create, update and delete boxes
- Owner-scoped lookups (one query answers both "does it exist" and "is it
  yours", so callers can report a single not-found error)
- Listing with a live entry count
- Public lookup joined with the owner's display name

Design
------
- Requires an active SQLAlchemy `Session` supplied by the caller.
- Deletes are issued as SQL `DELETE` statements so the database's
  `ON DELETE CASCADE` removes the box's entries.
"""

import logging
from datetime import date

from sqlalchemy import desc, func
from sqlalchemy.orm import Session
from boxcloud.database.entities.box import Box
from boxcloud.database.entities.pdf_entry import PdfEntry
from boxcloud.database.entities.user import User

logger = logging.getLogger(__name__)


class BoxDao:
    """
    Data Access Object (DAO) for managing Box entities.
    """

    def createBox(self, session: Session, box: Box) -> Box:
        try:
            session.add(box)
            session.flush()
            return box
        except Exception as e:
            logger.error(f"Error in BoxDao.createBox. Error: {e}")
            raise

    def fetchOwnedBox(self, session: Session, box_id: str, user_id: str) -> Box | None:
        """
        Fetch a box only if it belongs to `user_id`.

        Returns
        -------
        Box | None
            None when the box does not exist or has another owner.
        """
        try:
            return (
                session.query(Box)
                .filter(Box.id == box_id, Box.user_id == user_id)
                .first()
            )
        except Exception as e:
            logger.error(f"Error in BoxDao.fetchOwnedBox. Error: {e}")
            raise

    def fetchBoxById(self, session: Session, box_id: str) -> Box | None:
        try:
            return session.query(Box).filter(Box.id == box_id).first()
        except Exception as e:
            logger.error(f"Error in BoxDao.fetchBoxById. Error: {e}")
            raise

    def fetchBoxWithOwnerName(self, session: Session, box_id: str):
        """
        Fetch a box together with its owner's display name.

        Returns
        -------
        tuple[Box, str] | None
        """
        try:
            return (
                session.query(Box, User.name)
                .join(User, Box.user_id == User.id)
                .filter(Box.id == box_id)
                .first()
            )
        except Exception as e:
            logger.error(f"Error in BoxDao.fetchBoxWithOwnerName. Error: {e}")
            raise

    def fetchBoxesWithCountByUserId(self, session: Session, user_id: str):
        """
        Fetch every box of a user with its number of entries, newest first.

        Returns
        -------
        list[tuple[Box, int]]
        """
        try:
            return (
                session.query(Box, func.count(PdfEntry.id))
                .outerjoin(PdfEntry, PdfEntry.box_id == Box.id)
                .filter(Box.user_id == user_id)
                .group_by(Box.id)
                .order_by(desc(Box.created_at))
                .all()
            )
        except Exception as e:
            logger.error(f"Error in BoxDao.fetchBoxesWithCountByUserId. Error: {e}")
            raise

    def countEntries(self, session: Session, box_id: str) -> int:
        try:
            return session.query(func.count(PdfEntry.id)).filter(PdfEntry.box_id == box_id).scalar() or 0
        except Exception as e:
            logger.error(f"Error in BoxDao.countEntries. Error: {e}")
            raise

    def updateBox(self, session: Session, box: Box, name: str, retention_date: date | None, status: str) -> Box:
        """Replace the mutable fields of `box`."""
        try:
            box.name = name
            box.retention_date = retention_date
            box.status = status
            session.flush()
            return box
        except Exception as e:
            logger.error(f"Error in BoxDao.updateBox. Error: {e}")
            raise

    def deleteBox(self, session: Session, box_id: str) -> int:
        """Delete the box row; entry rows go with it through the FK cascade."""
        try:
            deleted = (
                session.query(Box)
                .filter(Box.id == box_id)
                .delete(synchronize_session=False)
            )
            session.expire_all()
            return deleted
        except Exception as e:
            logger.error(f"Error in BoxDao.deleteBox. Error: {e}")
            raise
