#!/usr/bin/env python3
"""
handler.py

Serverless entry point for the Mailchimp subscribe function.

Expects an HTTP-style event whose "body" is a JSON string:

    {"email": "jane@example.com", "list_id": "a1b2c3d4e5", "interests": ["9f8e7d"]}

and returns {"statusCode", "headers", "body"}. The handler never raises:
configuration problems answer 500, bad input 400, Mailchimp failures 500 (or
Mailchimp's own status when a create is rejected).
"""
import base64
import binascii
import logging
from typing import Any, Dict, Optional

from .config import Settings, load_settings, validate_environment
from .errors import ConfigError, ValidationError
from .mailchimp import MailchimpClient, MemberProvider
from .notifications import (
    disable_notifier, initialize_notifier, notify_error, send_final_notification
)
from .responses import build_response, error_response
from .subscribe import subscribe
from .validations import validate_request

logger = logging.getLogger(__name__)

_logging_configured = False


def configure_logging(level: str = "INFO") -> None:
    """Set up root logging once per container."""
    global _logging_configured
    if not _logging_configured:
        logging.basicConfig(
            level=level,
            format="%(asctime)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            handlers=[logging.StreamHandler()]
        )
        # Quiet noisy libs
        logging.getLogger("urllib3").setLevel(logging.INFO)
        logging.getLogger("requests").setLevel(logging.INFO)
        _logging_configured = True
    logging.getLogger().setLevel(level)


def _configure_alerts(settings: Settings) -> None:
    if settings.teams_webhook_url:
        initialize_notifier(settings.teams_webhook_url)
    else:
        disable_notifier()


def _event_body(event: Optional[Dict[str, Any]]) -> Optional[str]:
    if event is None:
        event = {}
    if not isinstance(event, dict):
        raise ValidationError("event must be an object with a body")
    body = event.get("body")
    if body and event.get("isBase64Encoded"):
        try:
            return base64.b64decode(body, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            raise ValidationError("body is not valid base64")
    return body


def handler(event: Optional[Dict[str, Any]], context: Any = None,
            provider: Optional[MemberProvider] = None) -> Dict[str, Any]:
    """
    Subscribe the email in the event body to the given Mailchimp list.

    provider replaces the Mailchimp client (tests, local runs); the real
    client is built from MAILCHIMP_API_KEY otherwise.
    """
    settings = load_settings()
    configure_logging(settings.log_level)

    try:
        validate_environment(settings)
    except ConfigError as e:
        logger.error(f"❌ {e.message}")
        return error_response(e)

    try:
        request = validate_request(_event_body(event))
    except ValidationError as e:
        logger.warning(f"⚠️ Rejected request: {e.message}")
        return error_response(e)

    _configure_alerts(settings)
    if provider is None:
        provider = MailchimpClient(settings.mailchimp_api_key, settings.mailchimp_dc)

    try:
        outcome = subscribe(request, provider)
        if not outcome.ok:
            notify_error("Mailchimp subscribe failed", {
                "email": request.email,
                "list_id": request.list_id,
                "status_code": outcome.status_code,
                "error": outcome.reason,
            })
    finally:
        send_final_notification()

    logger.info(f"📋 {request.email} -> {outcome.kind.value} ({outcome.status_code})")
    return build_response(outcome, request.email)
