"""
User DAO

Purpose
-------
Thin data-access layer for the `User` ORM entity. Provides:
- Creation (the caller supplies an already-hashed password)
- Lookup by id or e-mail

Design
------
- The DAO expects an active SQLAlchemy `Session` supplied by the caller
  (normally injected by `@transactional`).
- Validation, hashing and uniqueness rules live in the core layer.

Error Handling
--------------
- Each method logs the failure and re-raises so upper layers decide the
  error policy.
"""

import logging

from sqlalchemy.orm import Session
from boxcloud.database.entities.user import User

logger = logging.getLogger(__name__)


class UserDao:
    """
    Data Access Object (DAO) for managing User entities.
    """

    def createUser(self, session: Session, user_data: User) -> User:
        """
        Stage a new user row.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        user_data : User
            User entity whose `password` already holds a digest.

        Returns
        -------
        User
            The staged entity (flushed, so constraint violations surface here).
        """
        try:
            session.add(user_data)
            session.flush()
            return user_data
        except Exception as e:
            logger.error(f"Error in UserDao.createUser. Error Message: {e}")
            raise

    def fetchUserById(self, session: Session, user_id: str) -> User | None:
        """Return the user with `user_id`, or None."""
        try:
            return session.query(User).filter(User.id == user_id).first()
        except Exception as e:
            logger.error(f"Error in UserDao.fetchUserById. Error Message: {e}")
            raise

    def fetchUserByEmail(self, session: Session, email: str) -> User | None:
        """
        Fetch a user by e-mail (exact, case-sensitive match).

        Returns
        -------
        User | None
            The matching user, or None.
        """
        try:
            return session.query(User).filter(User.email == email).first()
        except Exception as e:
            logger.error(f"Error in UserDao.fetchUserByEmail. Error Message: {e}")
            raise
