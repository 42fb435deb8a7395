"""
API error type and the JSON envelope it renders to.

Every failure response has the shape:
    {"success": false, "message": "...", "errors": [...]}   # errors optional
"""

from __future__ import annotations

from typing import Any


class ApiError(RuntimeError):
    def __init__(
        self,
        status_code: int,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.errors = errors

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"success": False, "message": self.message}
        if self.errors is not None:
            payload["errors"] = self.errors
        return payload


class ValidationFailed(ApiError):
    """Input did not match a schema; `errors` lists every offending field."""

    def __init__(self, errors: list[dict[str, Any]]) -> None:
        super().__init__(400, "Validation error", errors=errors)


def field_errors(raw_errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Flatten pydantic error dicts into `{field, message, type}` items.

    `loc` entries such as ("body", "email") or ("email",) become "email";
    an empty location means the whole body was rejected.
    """
    out: list[dict[str, Any]] = []
    for err in raw_errors:
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        if err.get("type") == "json_invalid":
            # loc carries a character offset, not a field.
            loc = []
        field = ".".join(loc) if loc else "body"
        out.append(
            {
                "field": field,
                "message": str(err.get("msg") or "Invalid value"),
                "type": str(err.get("type") or "value_error"),
            }
        )
    return out
