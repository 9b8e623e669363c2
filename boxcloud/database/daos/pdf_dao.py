"""
PDF Entry DAO

Purpose
-------
Data-access layer for the `PdfEntry` ORM entity (`pdfs` table):
- Insert file-backed and title-only entries
- List a box's entries (newest first) and their storage keys
- Look up an entry inside a box, or by storage key
- Delete entries
- Aggregate statistics for the public view

Legacy schema fallback
----------------------
Databases created by old releases may still declare the file columns NOT
NULL. `createTitleOnlyEntry` first tries NULLs inside a savepoint and, if the
database rejects them with a NOT NULL violation, retries with `''` / `0`
placeholders. The savepoint keeps the surrounding transaction usable.
"""

import logging

from sqlalchemy import and_, case, desc, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from boxcloud.database.entities.pdf_entry import PdfEntry

logger = logging.getLogger(__name__)


class PdfDao:
    """
    Data Access Object (DAO) for managing PdfEntry entities.
    """

    def createEntry(self, session: Session, entry: PdfEntry) -> PdfEntry:
        try:
            session.add(entry)
            session.flush()
            return entry
        except Exception as e:
            logger.error(f"Error in PdfDao.createEntry. Error: {e}")
            raise

    def createTitleOnlyEntry(self, session: Session, entry: PdfEntry) -> PdfEntry:
        """
        Insert an entry without a file, tolerating a legacy NOT NULL schema.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        entry : PdfEntry
            Entity with `filename`, `original_name` and `path` set to None.

        Returns
        -------
        PdfEntry
            The persisted entity (file fields may hold `''` after the fallback).
        """
        try:
            with session.begin_nested():
                session.add(entry)
            return entry
        except IntegrityError as e:
            if "NOT NULL constraint failed" not in str(e.orig):
                logger.error(f"Error in PdfDao.createTitleOnlyEntry. Error: {e}")
                raise
            logger.warning("Fallback: using empty values for file fields of a title-only entry")
            fallback = PdfEntry(title=entry.title, box_id=entry.box_id, filename="", original_name="", path="", size=0)
            fallback.id = entry.id
            fallback.upload_date = entry.upload_date
            session.add(fallback)
            session.flush()
            return fallback

    def fetchEntriesByBoxId(self, session: Session, box_id: str) -> list[PdfEntry]:
        """Return the entries of a box, most recently uploaded first."""
        try:
            return (
                session.query(PdfEntry)
                .filter(PdfEntry.box_id == box_id)
                .order_by(desc(PdfEntry.upload_date))
                .all()
            )
        except Exception as e:
            logger.error(f"Error in PdfDao.fetchEntriesByBoxId. Error: {e}")
            raise

    def fetchPathsByBoxId(self, session: Session, box_id: str) -> list[str]:
        """Return the storage keys of every file-backed entry in a box."""
        try:
            rows = (
                session.query(PdfEntry.path)
                .filter(PdfEntry.box_id == box_id, PdfEntry.path.isnot(None), PdfEntry.path != "")
                .all()
            )
            return [row[0] for row in rows]
        except Exception as e:
            logger.error(f"Error in PdfDao.fetchPathsByBoxId. Error: {e}")
            raise

    def fetchEntryInBox(self, session: Session, entry_id: str, box_id: str) -> PdfEntry | None:
        try:
            return (
                session.query(PdfEntry)
                .filter(PdfEntry.id == entry_id, PdfEntry.box_id == box_id)
                .first()
            )
        except Exception as e:
            logger.error(f"Error in PdfDao.fetchEntryInBox. Error: {e}")
            raise

    def fetchEntryByPath(self, session: Session, path: str) -> PdfEntry | None:
        try:
            return session.query(PdfEntry).filter(PdfEntry.path == path).first()
        except Exception as e:
            logger.error(f"Error in PdfDao.fetchEntryByPath. Error: {e}")
            raise

    def deleteEntry(self, session: Session, entry: PdfEntry) -> None:
        try:
            session.delete(entry)
            session.flush()
        except Exception as e:
            logger.error(f"Error in PdfDao.deleteEntry. Error: {e}")
            raise

    def fetchStatsByBoxId(self, session: Session, box_id: str):
        """
        Aggregate a box's entries.

        Returns
        -------
        tuple
            (entry count, entries with a file, total size, first upload, last upload)
        """
        try:
            return (
                session.query(
                    func.count(PdfEntry.id),
                    func.coalesce(
                        func.sum(case((and_(PdfEntry.path.isnot(None), PdfEntry.path != ""), 1), else_=0)), 0
                    ),
                    func.coalesce(func.sum(PdfEntry.size), 0),
                    func.min(PdfEntry.upload_date),
                    func.max(PdfEntry.upload_date),
                )
                .filter(PdfEntry.box_id == box_id)
                .one()
            )
        except Exception as e:
            logger.error(f"Error in PdfDao.fetchStatsByBoxId. Error: {e}")
            raise
