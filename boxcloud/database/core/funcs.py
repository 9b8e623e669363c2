"""
Service-layer operations for accounts and license codes.

All database-facing functions are wrapped with the `@transactional`
decorator, which manages SQLAlchemy sessions and transactions automatically.
Each function accepts (and uses) an injected `session: Session` provided by
the decorator.

Registration consumes one use of a license code in the same transaction that
inserts the user, so a failed registration never burns a use and a code can
never exceed its `max_uses`.
"""

import json
import logging
import os

from sqlalchemy.orm import Session

from boxcloud.api.errors import Conflict, InvalidInput, Unauthorized
from boxcloud.crypt.encrypt_decrypt import EncryptionDec, MIN_PASSWORD_LENGTH
from boxcloud.database.daos.license_dao import LicenseDao
from boxcloud.database.daos.user_dao import UserDao
from boxcloud.database.entities.license import LicenseCode
from boxcloud.database.entities.user import User
from boxcloud.database.helpers.transactionManagement import transactional

logger = logging.getLogger(__name__)


def _user_details(user: User) -> dict:
    return {"id": user.id, "name": user.name, "email": user.email}


@transactional
def register_user(session: Session, name: str, email: str, password: str, license_code: str) -> dict:
    """
    Validate input, check the license code, create a new user and consume the code.

    Parameters
    ----------
    session : Session
        Active SQLAlchemy session (injected by @transactional).
    name, email, password, license_code : str
        Registration form fields.

    Returns
    -------
    dict
        {'id', 'name', 'email'} of the created account.

    Raises
    ------
    InvalidInput
        Missing fields, short password, unknown/exhausted license, or a license
        the same e-mail already used.
    Conflict
        An account with this e-mail already exists.
    """
    if not all(value and str(value).strip() for value in (name, email, password, license_code)):
        raise InvalidInput(
            "Name, email, password, and license code are required",
            error="Missing required fields",
        )

    enc = EncryptionDec()
    if not enc.is_valid_password(password):
        raise InvalidInput(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
            error="Invalid password",
        )

    name = name.strip()
    email = email.strip()
    license_code = license_code.strip()

    user_dao = UserDao()
    license_dao = LicenseDao()

    license_row = license_dao.fetchLicense(session, license_code)
    if license_row is None:
        raise InvalidInput("Invalid license code", error="Invalid license code")
    if license_row.current_uses >= license_row.max_uses:
        raise InvalidInput("License code has reached maximum usage limit", error="Invalid license code")

    if user_dao.fetchUserByEmail(session, email) is not None:
        raise Conflict("An account with this email already exists", error="User already exists")

    if license_dao.fetchUsageByCodeAndEmail(session, license_code, email) is not None:
        raise InvalidInput(
            "This license code has already been used by this email address",
            error="License code already used",
        )

    user = user_dao.createUser(session, User(name=name, email=email, password=enc.hash_password(password)))

    # The conditional UPDATE is the real guard; the read above only picks the message.
    if not license_dao.consumeLicense(session, license_code):
        raise InvalidInput("License code has reached maximum usage limit", error="Invalid license code")
    license_dao.recordUsage(session, license_code, user.id)

    logger.info(f"Registered user {user.id}")
    return _user_details(user)


@transactional
def login_user(session: Session, email: str, password: str) -> dict:
    """
    Authenticate a user by e-mail and password.

    Returns
    -------
    dict
        {'id', 'name', 'email'} of the authenticated user.

    Raises
    ------
    InvalidInput
        E-mail or password missing.
    Unauthorized
        Unknown e-mail or wrong password (same message for both).
    """
    if not email or not password:
        raise InvalidInput("Email and password are required", error="Missing credentials")

    user = UserDao().fetchUserByEmail(session, email.strip())
    if user is None or not EncryptionDec().check_passwords(password, user.password):
        raise Unauthorized("Invalid email or password", error="Invalid credentials")
    return _user_details(user)


@transactional
def get_user_by_id(session: Session, user_id: str) -> dict | None:
    """Return {'id', 'name', 'email'} of an existing user, or None."""
    user = UserDao().fetchUserById(session, user_id)
    return _user_details(user) if user else None


@transactional
def add_license_code(session: Session, code: str, max_uses: int = 1, current_uses: int = 0) -> bool:
    """
    Register a license code.

    Returns
    -------
    bool
        False when the code already exists (its counters are left untouched).
    """
    license_dao = LicenseDao()
    if license_dao.fetchLicense(session, code) is not None:
        return False
    license_dao.createLicense(session, LicenseCode(code=code, max_uses=max_uses, current_uses=current_uses))
    return True


@transactional
def get_license_code(session: Session, code: str) -> dict | None:
    row = LicenseDao().fetchLicense(session, code)
    if row is None:
        return None
    return {"code": row.code, "maxUses": row.max_uses, "currentUses": row.current_uses}


def import_license_codes(path: str) -> int:
    """
    Import codes from a JSON file shaped like
    ``{"licenseCodes": {"CODE": {"maxUses": 5, "currentUses": 0}}}``.

    Codes already present in the database are skipped. A missing or unreadable
    file is logged and imports nothing.

    Returns
    -------
    int
        Number of codes added.
    """
    if not os.path.isfile(path):
        logger.warning(f"License codes file not found: {path}")
        return 0

    try:
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, ValueError) as e:
        logger.error(f"Could not read license codes from {path}: {e}")
        return 0
    codes = data.get("licenseCodes") if isinstance(data, dict) else None
    if codes is not None and not isinstance(codes, dict):
        logger.error(f"Ignoring {path}: \"licenseCodes\" must be an object")
        return 0

    added = 0
    for code, spec in (codes or {}).items():
        spec = spec or {}
        if add_license_code(
            code=code,
            max_uses=int(spec.get("maxUses", 1)),
            current_uses=int(spec.get("currentUses", 0)),
        ):
            added += 1
    logger.info(f"Imported {added} license code(s) from {path}")
    return added
