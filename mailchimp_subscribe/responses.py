"""
responses.py

Builds the HTTP response returned by the handler. Every response has the
same body shape: {"error": str | null, "data": {...}}.
"""
import json
from typing import Any, Dict, Optional

from .errors import SubscribeError, ValidationError
from .subscribe import Outcome, OutcomeKind

HEADERS = {"Content-Type": "application/json"}

# (existing_member, profile_updated) reported for each successful outcome
_SUCCESS_FLAGS = {
    OutcomeKind.ALREADY_SATISFIED: (True, False),
    OutcomeKind.UPDATED: (True, True),
    OutcomeKind.CREATED: (False, False),
}


def response(data: Optional[Dict[str, Any]] = None, status_code: int = 200,
             error: Optional[str] = None) -> Dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": dict(HEADERS),
        "body": json.dumps({"error": error, "data": data or {}}),
    }


def build_response(outcome: Outcome, email: str) -> Dict[str, Any]:
    """Map a subscribe() outcome to a response."""
    if outcome.kind is OutcomeKind.FAILED:
        return response({"email": email}, outcome.status_code, outcome.reason)

    existing_member, profile_updated = _SUCCESS_FLAGS[outcome.kind]
    return response({
        "email": email,
        "subscribed": True,
        "existing_member": existing_member,
        "profile_updated": profile_updated,
    })


def error_response(error: SubscribeError) -> Dict[str, Any]:
    """Map a ConfigError / ValidationError raised before any Mailchimp call."""
    data = None
    if isinstance(error, ValidationError):
        data = error.body
    return response(data, error.status_code, error.message)
