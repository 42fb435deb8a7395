"""
User schemas.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

# bcrypt only looks at the first 72 bytes and bcrypt>=5 refuses longer input.
MAX_PASSWORD_BYTES = 72


class InsertUser(BaseModel):
    model_config = ConfigDict(extra="ignore")

    username: str = Field(..., min_length=1, max_length=150)
    password: str = Field(..., min_length=1)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes.")
        return value


class User(BaseModel):
    id: int
    username: str
    # Holds whatever the caller stored; users.service stores bcrypt hashes.
    password: str
