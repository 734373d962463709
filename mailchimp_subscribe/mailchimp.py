#!/usr/bin/env python3
"""
mailchimp.py

Thin client for the Mailchimp Marketing API v3 list-member endpoints used by
the subscribe function:

    GET   /lists/{list_id}/members/{subscriber_hash}
    PATCH /lists/{list_id}/members/{subscriber_hash}
    POST  /lists/{list_id}/members

Anything implementing MemberProvider can stand in for the real client.
"""
import hashlib
import json
import logging
from typing import Any, Dict, Optional, Protocol

import requests

from .config import MAILCHIMP_API_VERSION

logger = logging.getLogger(__name__)


def calculate_subscriber_hash(email: str) -> str:
    """Calculate MD5 hash of lowercase email address for Mailchimp API."""
    return hashlib.md5(email.lower().encode()).hexdigest()


class MailchimpAPIError(Exception):
    """Non-2xx response or transport failure talking to Mailchimp"""

    def __init__(self, status_code: Optional[int], title: str = "", detail: str = ""):
        self.status_code = status_code
        self.title = title
        self.detail = detail
        super().__init__(self.message)

    @property
    def message(self) -> str:
        if self.detail:
            return self.detail
        if self.title:
            return self.title
        if self.status_code:
            return f"Mailchimp API returned HTTP {self.status_code}"
        return "Mailchimp API request failed"


class MemberProvider(Protocol):
    """Lookup / update / create capability for list members."""

    def get_member(self, list_id: str, subscriber_hash: str) -> Optional[Dict[str, Any]]:
        """Return the member record, or None when Mailchimp reports 404."""
        ...

    def update_member(self, list_id: str, subscriber_hash: str, body: Dict[str, Any]) -> Dict[str, Any]:
        ...

    def create_member(self, list_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        ...


class MailchimpClient:
    """requests-based MemberProvider talking to one Mailchimp datacenter"""

    def __init__(self, api_key: str, dc: str, session: Optional[requests.Session] = None):
        self.base_url = f"https://{dc}.api.mailchimp.com/{MAILCHIMP_API_VERSION}"
        self.session = session or requests.Session()
        self.session.auth = ("anystring", api_key)
        self.session.headers.update({"Content-Type": "application/json"})

    def _member_url(self, list_id: str, subscriber_hash: str = "") -> str:
        url = f"{self.base_url}/lists/{list_id}/members"
        return f"{url}/{subscriber_hash}" if subscriber_hash else url

    def _request(self, method: str, url: str, body: Optional[Dict[str, Any]] = None) -> requests.Response:
        logger.debug(f"Mailchimp {method} {url}")
        if body is not None:
            logger.debug(json.dumps(body, indent=2))
        try:
            return self.session.request(method, url, json=body)
        except requests.exceptions.RequestException as e:
            logger.error(f"❌ Mailchimp {method} {url} failed: {e}")
            raise MailchimpAPIError(None, "Request failed", str(e)) from e

    @staticmethod
    def _raise_for_status(response: requests.Response) -> None:
        if response.status_code < 400:
            return
        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {}
        raise MailchimpAPIError(
            response.status_code,
            title=str(payload.get("title", "")),
            detail=str(payload.get("detail", "")),
        )

    @staticmethod
    def _json(response: requests.Response) -> Dict[str, Any]:
        try:
            payload = response.json()
        except ValueError:
            logger.debug("No JSON response body")
            return {}
        if not isinstance(payload, dict):
            raise MailchimpAPIError(response.status_code, "Invalid response",
                                    f"Expected a JSON object from Mailchimp, got {type(payload).__name__}")
        return payload

    def get_member(self, list_id: str, subscriber_hash: str) -> Optional[Dict[str, Any]]:
        response = self._request("GET", self._member_url(list_id, subscriber_hash))
        if response.status_code == 404:
            return None
        self._raise_for_status(response)
        return self._json(response)

    def update_member(self, list_id: str, subscriber_hash: str, body: Dict[str, Any]) -> Dict[str, Any]:
        response = self._request("PATCH", self._member_url(list_id, subscriber_hash), body)
        self._raise_for_status(response)
        return self._json(response)

    def create_member(self, list_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        response = self._request("POST", self._member_url(list_id), body)
        self._raise_for_status(response)
        return self._json(response)
