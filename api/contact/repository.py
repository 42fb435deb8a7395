"""
Contact message persistence (raw SQL).
"""

from __future__ import annotations

from core import db

_COLUMNS = "id, first_name, last_name, email, service_type, message, created_at"


async def insert_contact_message(
    *,
    first_name: str,
    last_name: str,
    email: str,
    message: str,
    service_type: str | None = None,
) -> dict:
    row = await db.fetch_one(
        f"""
        INSERT INTO contact_messages (first_name, last_name, email, service_type, message)
        VALUES ($1, $2, $3, $4, $5)
        RETURNING {_COLUMNS}
        """,
        first_name,
        last_name,
        email,
        service_type,
        message,
    )
    if row is None:
        raise RuntimeError("Failed to insert contact message.")
    return row


async def list_contact_messages() -> list[dict]:
    return await db.fetch_all(
        f"""
        SELECT {_COLUMNS}
        FROM contact_messages
        ORDER BY created_at DESC, id DESC
        """
    )


async def get_contact_message(message_id: int) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {_COLUMNS}
        FROM contact_messages
        WHERE id = $1
        """,
        message_id,
    )
