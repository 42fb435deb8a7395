"""
Contact form API endpoints.
"""

from __future__ import annotations

import json
from typing import Any

from fastapi import APIRouter, Depends, Request, status

from core.errors import ValidationFailed
from storage import IStorage, get_storage

from . import service

router = APIRouter(prefix="/api/contact")

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def _read_payload(request: Request) -> Any:
    """
    Decode a JSON or HTML-form body into plain Python data.

    Shape checks are left to `contact.schemas`.
    """
    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith(_FORM_TYPES):
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}

    body = await request.body()
    if not body.strip():
        return None
    try:
        return json.loads(body)
    except ValueError as exc:
        raise ValidationFailed(
            [{"field": "body", "message": "JSON decode error", "type": "json_invalid"}]
        ) from exc


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_contact_message(
    request: Request,
    store: IStorage = Depends(get_storage),
) -> dict:
    """
    Accept a contact form submission, posted as JSON or as a plain HTML form.

    The body is validated by `contact.schemas` rather than FastAPI so that
    failures come back as 400 with the site's error envelope.
    """
    payload = await _read_payload(request)
    return await service.submit(payload, store=store)


@router.get("")
async def list_contact_messages(store: IStorage = Depends(get_storage)) -> dict:
    # Admin view; newest first.
    return await service.list_all(store=store)


@router.get("/{contact_id}")
async def get_contact_message(
    contact_id: str,
    store: IStorage = Depends(get_storage),
) -> dict:
    return await service.get_one(contact_id, store=store)
