"""
Password hashing helpers.
"""

from __future__ import annotations

import bcrypt

from .schemas import MAX_PASSWORD_BYTES


class PasswordError(RuntimeError):
    pass


def hash_password(plain_password: str) -> str:
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise PasswordError("Password is empty.")
    if len(password) > MAX_PASSWORD_BYTES:
        raise PasswordError(f"Password is longer than {MAX_PASSWORD_BYTES} bytes.")
    return bcrypt.hashpw(password, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    if len(password) > MAX_PASSWORD_BYTES:
        # bcrypt<5 would silently compare only the first 72 bytes.
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        # Not a bcrypt hash (e.g. a legacy plaintext row).
        return False
