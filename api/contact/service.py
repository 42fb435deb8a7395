"""
Contact form business logic.

Maps each request to one storage call and shapes the JSON envelopes the
site's front end expects. Unexpected storage failures are logged here and
surfaced to the client only as a generic message.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from core.errors import ApiError
from storage import IStorage

from . import schemas

logger = logging.getLogger(__name__)

# contact_messages.id is a Postgres serial (int4).
_MAX_ID = 2**31 - 1
_ID_PATTERN = re.compile(r"-?[0-9]+")


def parse_contact_id(raw: str) -> int:
    text = (raw or "").strip()
    if not _ID_PATTERN.fullmatch(text):
        raise ApiError(400, "Invalid ID format")
    return int(text)


async def submit(payload: Any, *, store: IStorage) -> dict:
    data = schemas.validate_contact(payload)
    try:
        created = await store.create_contact_message(data)
    except Exception as exc:
        logger.exception("contact_submit_failed")
        raise ApiError(500, "An unexpected error occurred while processing your request") from exc

    logger.info("contact_submitted id=%s service_type=%s", created.id, created.service_type)
    return {
        "success": True,
        "message": "Contact message received successfully",
        "data": {
            "id": created.id,
            "createdAt": created.to_wire()["createdAt"],
        },
    }


async def list_all(*, store: IStorage) -> dict:
    try:
        messages = await store.get_all_contact_messages()
    except Exception as exc:
        logger.exception("contact_list_failed")
        raise ApiError(500, "An error occurred while retrieving contact messages") from exc
    return {"success": True, "data": [m.to_wire() for m in messages]}


async def get_one(raw_id: str, *, store: IStorage) -> dict:
    message_id = parse_contact_id(raw_id)
    if not 1 <= message_id <= _MAX_ID:
        raise ApiError(404, "Contact message not found")

    try:
        message = await store.get_contact_message_by_id(message_id)
    except Exception as exc:
        logger.exception("contact_get_failed id=%s", message_id)
        raise ApiError(500, "An error occurred while retrieving the contact message") from exc

    if message is None:
        raise ApiError(404, "Contact message not found")
    return {"success": True, "data": message.to_wire()}
