"""
errors.py

Error taxonomy for the subscribe function. Every error carries the HTTP
status code the handler responds with.
"""
from typing import Any, Dict, Optional


class SubscribeError(Exception):
    """Base class for all errors converted into a response envelope"""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ConfigError(SubscribeError):
    """Required configuration (the Mailchimp API key) is missing or unusable"""

    status_code = 500


class ValidationError(SubscribeError):
    """Request body is malformed or a field is out of range"""

    status_code = 400

    def __init__(self, message: str, body: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        # Parsed body, echoed back in the 400 response when it was a JSON object
        self.body = body


class ReadError(SubscribeError):
    """Member lookup failed for a reason other than not-found"""

    status_code = 500

    def __init__(self, message: str, provider_status: Optional[int] = None):
        super().__init__(message)
        self.provider_status = provider_status


class WriteError(SubscribeError):
    """Create or update call was rejected by Mailchimp"""

    status_code = 500

    def __init__(self, message: str, provider_status: Optional[int] = None):
        super().__init__(message)
        self.provider_status = provider_status
