import pytest
from jose import jwt

from boxcloud.api.utils import InvalidToken, create_access_token, issue_token, verify_token
from boxcloud.crypt.encrypt_decrypt import EncryptionDec
from boxcloud.database.config.config import settings


def test_hash_and_check_password():
    enc = EncryptionDec(rounds=4)
    digest = enc.hash_password("secret1")
    assert digest != "secret1"
    assert enc.check_passwords("secret1", digest)
    assert not enc.check_passwords("secret2", digest)


def test_malformed_digest_does_not_verify():
    assert EncryptionDec(rounds=4).check_passwords("secret1", "not-a-bcrypt-hash") is False


@pytest.mark.parametrize("password, ok", [("12345", False), ("123456", True), ("", False)])
def test_minimum_password_length(password, ok):
    assert EncryptionDec(rounds=4).is_valid_password(password) is ok


def test_token_resolves_to_user_id():
    token = issue_token("user-123")
    assert verify_token(token) == "user-123"
    claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert claims["sub"] == "user-123"
    assert claims["userId"] == "user-123"
    assert "exp" in claims


def test_expired_token_is_rejected():
    token = create_access_token({"sub": "user-123"}, expires_minutes=-1)
    with pytest.raises(InvalidToken):
        verify_token(token)


def test_token_signed_with_other_key_is_rejected():
    token = jwt.encode({"sub": "user-123"}, "another-key", algorithm="HS256")
    with pytest.raises(InvalidToken):
        verify_token(token)


def test_token_without_subject_is_rejected():
    with pytest.raises(InvalidToken):
        verify_token(create_access_token({"role": "nobody"}))
