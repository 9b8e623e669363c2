"""
License DAO

Purpose
-------
Data-access layer for `LicenseCode` and `LicenseUsage`:
- Look up and register license codes
- Consume one use of a code atomically
- Record and query which user consumed a code

Design
------
`consumeLicense` is a single conditional UPDATE
(`current_uses = current_uses + 1 WHERE current_uses < max_uses`), so the
usage ceiling holds without any read-modify-write in Python.
"""

import logging

from sqlalchemy import update
from sqlalchemy.orm import Session
from boxcloud.database.entities.license import LicenseCode, LicenseUsage
from boxcloud.database.entities.user import User

logger = logging.getLogger(__name__)


class LicenseDao:
    """
    Data Access Object (DAO) for license codes and their usage records.
    """

    def fetchLicense(self, session: Session, code: str) -> LicenseCode | None:
        try:
            return session.query(LicenseCode).filter(LicenseCode.code == code).first()
        except Exception as e:
            logger.error(f"Error in LicenseDao.fetchLicense. Error: {e}")
            raise

    def createLicense(self, session: Session, license_code: LicenseCode) -> LicenseCode:
        try:
            session.add(license_code)
            session.flush()
            return license_code
        except Exception as e:
            logger.error(f"Error in LicenseDao.createLicense. Error: {e}")
            raise

    def consumeLicense(self, session: Session, code: str) -> bool:
        """
        Increment the use counter of `code` if it is still under its limit.

        Returns
        -------
        bool
            True if one use was consumed, False if the code is exhausted or unknown.
        """
        try:
            result = session.execute(
                update(LicenseCode)
                .where(LicenseCode.code == code, LicenseCode.current_uses < LicenseCode.max_uses)
                .values(current_uses=LicenseCode.current_uses + 1)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount == 1
        except Exception as e:
            logger.error(f"Error in LicenseDao.consumeLicense. Error: {e}")
            raise

    def recordUsage(self, session: Session, code: str, user_id: str) -> LicenseUsage:
        try:
            usage = LicenseUsage(license_code=code, user_id=user_id)
            session.add(usage)
            session.flush()
            return usage
        except Exception as e:
            logger.error(f"Error in LicenseDao.recordUsage. Error: {e}")
            raise

    def fetchUsageByCodeAndEmail(self, session: Session, code: str, email: str) -> LicenseUsage | None:
        """Return a usage of `code` by the account registered with `email`, if any."""
        try:
            return (
                session.query(LicenseUsage)
                .join(User, LicenseUsage.user_id == User.id)
                .filter(LicenseUsage.license_code == code, User.email == email)
                .first()
            )
        except Exception as e:
            logger.error(f"Error in LicenseDao.fetchUsageByCodeAndEmail. Error: {e}")
            raise
