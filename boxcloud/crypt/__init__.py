"""
The `crypt` package provides the password primitives used by the
authentication workflow.

Contents
--------
- encrypt_decrypt
    Utility module exposing the `EncryptionDec` class:
        * `hash_password` — hashes plaintext passwords using bcrypt (work factor from `BCRYPT_ROUNDS`, 12 by default)
        * `check_passwords` — verifies a plaintext password against a hashed one
        * `is_valid_password` — enforces the minimum password length (6)
"""
