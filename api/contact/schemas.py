"""
Contact message schemas.

Wire names are camelCase (what the site's form posts); attributes and
columns are snake_case.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.errors import ValidationFailed, field_errors

MIN_MESSAGE_CHARS = 5


class InsertContactMessage(BaseModel):
    # Unknown keys (e.g. the form's honeypot field) are dropped.
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    first_name: str = Field(..., alias="firstName", min_length=1)
    last_name: str = Field(..., alias="lastName", min_length=1)
    email: str
    service_type: str | None = Field(default=None, alias="serviceType")
    message: str = Field(..., min_length=MIN_MESSAGE_CHARS)

    @field_validator("email")
    @classmethod
    def email_format(cls, value: str) -> str:
        # Checked only; the address is stored exactly as the visitor typed it.
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError as exc:
            raise ValueError(f"value is not a valid email address: {exc}") from exc
        return value

    @field_validator("service_type")
    @classmethod
    def blank_service_type(cls, value: str | None) -> str | None:
        # HTML forms post an unselected <select> as "".
        if value is not None and not value.strip():
            return None
        return value


class ContactMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
    email: str
    service_type: str | None = Field(default=None, alias="serviceType")
    message: str
    created_at: datetime = Field(..., alias="createdAt")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


def validate_contact(data: Any) -> InsertContactMessage:
    """
    Validate an untrusted request body.

    Raises `ValidationFailed` listing every failing field at once.
    """
    try:
        return InsertContactMessage.model_validate(data)
    except ValidationError as exc:
        raise ValidationFailed(field_errors(exc.errors())) from exc
