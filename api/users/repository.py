"""
User persistence helpers.
"""

from __future__ import annotations

from core import db


async def create_user(*, username: str, password: str) -> dict:
    row = await db.fetch_one(
        """
        INSERT INTO users (username, password)
        VALUES ($1, $2)
        RETURNING id, username, password
        """,
        username,
        password,
    )
    if row is None:
        raise RuntimeError("Failed to create user.")
    return row


async def get_user_by_id(user_id: int) -> dict | None:
    return await db.fetch_one(
        """
        SELECT id, username, password
        FROM users
        WHERE id = $1
        """,
        user_id,
    )


async def get_user_by_username(username: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT id, username, password
        FROM users
        WHERE username = $1
        """,
        username,
    )
