"""
Session scoping for the core layer
==================================

A function decorated with ``@transactional`` receives a ``session`` keyword
argument. The outermost decorated call owns the session: it commits when the
call returns and rolls back when it raises. Nested decorated calls join the
outer session, so a core function that calls several others still commits
or rolls back as one unit (the upload pipeline relies on this to make its
row inserts all-or-nothing).

The active session lives in a context variable, so request handlers running
in the threadpool never share one.
"""

from functools import wraps
from sqlalchemy.orm import sessionmaker
import contextvars
from boxcloud.database.config.connection_engine import connection_engine

SessionLocal = sessionmaker(bind=connection_engine, expire_on_commit=False)
"""Session factory bound to the application engine."""

db_session_context = contextvars.ContextVar("db_session_context", default=None)
"""Context variable storing the active SQLAlchemy session."""


def transactional(func):
    """
    Decorator to wrap functions in a managed SQLAlchemy transaction.

    Ensures that:
    - If a session already exists in context, it is reused.
    - Otherwise, a new session is created, committed, and closed.
    - On errors, the session is rolled back and closed, and the error re-raised.

    Parameters
    ----------
    func : callable
        The function to wrap. It must accept a `session` keyword argument.

    Returns
    -------
    callable
        The wrapped function, executed within a database transaction.

    Example
    -------
    >>> @transactional
    ... def create_box(session, owner_id, name):
    ...     session.add(Box(name=name, user_id=owner_id))
    """
    @wraps(func)
    def wrap_func(*args, **kwargs):
        session = db_session_context.get()
        if session is not None:
            return func(*args, session=session, **kwargs)

        session = SessionLocal()
        token = db_session_context.set(session)

        try:
            result = func(*args, session=session, **kwargs)
            session.flush()
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
            db_session_context.reset(token)

        return result

    return wrap_func
