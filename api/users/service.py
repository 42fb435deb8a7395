"""
User business logic.

Not exposed over HTTP; used by admin tooling and tests. Passwords never reach
storage in plaintext.
"""

from __future__ import annotations

import logging

from core.errors import ApiError
from storage import DuplicateUsername, IStorage

from . import schemas, security

logger = logging.getLogger(__name__)


class UsernameTaken(ApiError):
    def __init__(self, username: str) -> None:
        super().__init__(409, "Username is already taken.")
        self.username = username


async def register_user(payload: schemas.InsertUser, *, store: IStorage) -> schemas.User:
    existing = await store.get_user_by_username(payload.username)
    if existing is not None:
        raise UsernameTaken(payload.username)

    hashed = schemas.InsertUser(
        username=payload.username,
        password=security.hash_password(payload.password),
    )
    try:
        user = await store.create_user(hashed)
    except DuplicateUsername as exc:
        # Lost a race with a concurrent registration.
        raise UsernameTaken(payload.username) from exc

    logger.info("user_registered id=%s", user.id)
    return user


async def authenticate(username: str, password: str, *, store: IStorage) -> schemas.User | None:
    user = await store.get_user_by_username(username)
    if user is None:
        return None
    if not security.verify_password(password, user.password):
        return None
    return user
