import bcrypt

from boxcloud.database.config.config import settings

MIN_PASSWORD_LENGTH = 6
"""Shortest password accepted at registration."""


class EncryptionDec:
    """
    Utility class for password hashing and validation.

    Methods
    -------
    hash_password(text: str) -> str
        Hashes a plaintext password using bcrypt with a generated salt.
    check_passwords(plain_text: str, passwd: str) -> bool
        Verifies a plaintext password against a hashed password.
    is_valid_password(password: str) -> bool
        Validates that a password is at least ``MIN_PASSWORD_LENGTH`` characters.
    """

    def __init__(self, rounds: int | None = None):
        """
        Parameters
        ----------
        rounds : int, optional
            bcrypt work factor; defaults to ``settings.BCRYPT_ROUNDS`` (12).
        """
        self.rounds = rounds or settings.BCRYPT_ROUNDS

    def hash_password(self, text: str) -> str:
        """
        Hash a plaintext password using bcrypt.

        Parameters
        ----------
        text : str
            The plaintext password.

        Returns
        -------
        str
            The bcrypt-hashed password (UTF-8 decoded).
        """
        salt = bcrypt.gensalt(rounds=self.rounds)
        hashed = bcrypt.hashpw(text.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def check_passwords(self, plain_text: str, passwd: str) -> bool:
        """
        Verify if a plaintext password matches a hashed password.

        A stored value that is not a bcrypt digest never matches.
        """
        try:
            return bcrypt.checkpw(plain_text.encode("utf-8"), passwd.encode("utf-8"))
        except ValueError:
            return False

    def is_valid_password(self, password: str) -> bool:
        return len(password) >= MIN_PASSWORD_LENGTH
