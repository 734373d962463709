"""
validations.py

Request body decoding for the subscribe function.

The body is decoded with a strict pydantic model: wrong JSON types fail
closed instead of being coerced. Range and shape checks are done by
is_email / is_length so every message names the offending field, e.g.
"body.list_id must be at least 4 chars long".
"""
import json
import re
from typing import Any, Dict, List, Optional

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import ValidationError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

EMAIL_MIN_LENGTH = 5
EMAIL_MAX_LENGTH = 100
LIST_ID_MIN_LENGTH = 4
LIST_ID_MAX_LENGTH = 16

# Readable names for pydantic's strict-mode type errors
_TYPE_NAMES = {
    "string_type": "a string",
    "list_type": "a list",
    "dict_type": "an object",
}


def is_length(ctx: str, value: Any, min_length: int, max_length: int) -> None:
    if not isinstance(value, str):
        raise ValueError(f"{ctx} must be a string")
    if len(value) < min_length:
        raise ValueError(f"{ctx} must be at least {min_length} chars long")
    if len(value) > max_length:
        raise ValueError(f"{ctx} must contain {max_length} chars at most")


def is_email(ctx: str, value: Any) -> None:
    if not isinstance(value, str):
        raise ValueError(f"{ctx} must be a string")
    is_length(ctx, value, EMAIL_MIN_LENGTH, EMAIL_MAX_LENGTH)
    if not EMAIL_PATTERN.fullmatch(value):
        raise ValueError(f"{ctx} is not an email address")


class SubscriptionRequest(BaseModel):
    """Decoded request body."""

    model_config = ConfigDict(strict=True, extra="ignore", frozen=True)

    email: str
    list_id: str
    interests: List[str] = Field(default_factory=list)
    merge_fields: Dict[str, str] = Field(default_factory=dict)

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        is_email("body.email", value)
        return value

    @field_validator("list_id")
    @classmethod
    def _check_list_id(cls, value: str) -> str:
        is_length("body.list_id", value, LIST_ID_MIN_LENGTH, LIST_ID_MAX_LENGTH)
        return value


def _field_path(loc) -> str:
    path = "body"
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}"
    return path


def _describe(error: Dict[str, Any]) -> str:
    """Turn the first pydantic error into a field-identifying message."""
    ctx = _field_path(error.get("loc", ()))
    kind = error.get("type", "")
    if kind == "value_error":
        # Raised by is_email / is_length, already carries the field name
        return str(error["ctx"]["error"])
    if kind == "missing":
        return f"{ctx} is required"
    if kind in _TYPE_NAMES:
        return f"{ctx} must be {_TYPE_NAMES[kind]}"
    return f"{ctx}: {error.get('msg', 'invalid value')}"


def parse_body(raw_body: Optional[str]) -> Dict[str, Any]:
    """Parse a raw request body into a JSON object."""
    if raw_body is None or (isinstance(raw_body, str) and not raw_body.strip()):
        raise ValidationError("body must be a JSON object")
    if isinstance(raw_body, bytes):
        raw_body = raw_body.decode("utf-8", errors="replace")
    try:
        body = json.loads(raw_body)
    except (TypeError, ValueError):
        raise ValidationError("body is not valid JSON")
    if not isinstance(body, dict):
        raise ValidationError("body must be a JSON object")
    return body


def validate_request(raw_body: Optional[str]) -> SubscriptionRequest:
    """
    Decode and validate a raw request body.

    Raises ValidationError on the first violation; nothing else is checked
    after a malformed body.
    """
    body = parse_body(raw_body)
    try:
        return SubscriptionRequest.model_validate(body)
    except pydantic.ValidationError as e:
        errors = e.errors()
        message = _describe(errors[0]) if errors else "body is invalid"
        raise ValidationError(message, body=body) from e
