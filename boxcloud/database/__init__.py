"""
The `database` package owns everything that touches the SQLite store:
settings, ORM entities, data access objects and the transactional core
functions the routers call.

Contents:
    - config:
        pydantic-settings `Settings` and the SQLAlchemy engine (foreign keys
        enforced on every connection).

    - entities:
        User, Box, PdfEntry, LicenseCode and LicenseUsage models.

    - daos:
        Per-entity query helpers operating on a caller-supplied session.

    - core:
        Schema bootstrap/migration and the service functions behind each
        endpoint.

    - helpers:
        The `@transactional` decorator and session factory.

    - reset_db:
        Deletes the database file (development only).
"""
