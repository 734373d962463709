"""
Shared fixtures for the subscribe function tests.
No test talks to the real Mailchimp API: providers are FakeProvider doubles
and requests is patched where the real client is exercised.
"""
import json

import pytest

from mailchimp_subscribe import notifications
from mailchimp_subscribe.mailchimp import MailchimpAPIError

API_KEY = "0123456789abcdef0123456789abcdef-us6"
LIST_ID = "a1b2c3d4e5"
EMAIL = "jane@example.com"


class FakeProvider:
    """MemberProvider double that records every call"""

    def __init__(self, member=None, get_error=None, update_error=None, create_error=None):
        self.member = member
        self.get_error = get_error
        self.update_error = update_error
        self.create_error = create_error
        self.calls = []

    def get_member(self, list_id, subscriber_hash):
        self.calls.append(("get", list_id, subscriber_hash, None))
        if self.get_error:
            raise self.get_error
        return self.member

    def update_member(self, list_id, subscriber_hash, body):
        self.calls.append(("update", list_id, subscriber_hash, body))
        if self.update_error:
            raise self.update_error
        return dict(self.member or {}, **body)

    def create_member(self, list_id, body):
        self.calls.append(("create", list_id, None, body))
        if self.create_error:
            raise self.create_error
        return dict(body, id="new")

    def calls_of(self, kind):
        return [call for call in self.calls if call[0] == kind]

    @property
    def writes(self):
        return [call for call in self.calls if call[0] in ("update", "create")]


@pytest.fixture
def provider_factory():
    return FakeProvider


@pytest.fixture
def api_error():
    return MailchimpAPIError


@pytest.fixture
def env(monkeypatch):
    """Valid configuration with alerts disabled"""
    monkeypatch.setenv("MAILCHIMP_API_KEY", API_KEY)
    monkeypatch.delenv("MAILCHIMP_DC", raising=False)
    monkeypatch.delenv("TEAMS_WEBHOOK_URL", raising=False)
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    return monkeypatch


@pytest.fixture(autouse=True)
def reset_notifier():
    notifications.disable_notifier()
    yield
    notifications.disable_notifier()


@pytest.fixture
def make_event():
    def _make_event(**body):
        payload = {"email": EMAIL, "list_id": LIST_ID}
        payload.update(body)
        return {"httpMethod": "POST", "body": json.dumps(payload)}
    return _make_event


def parse(response):
    """Decode a handler response body"""
    return json.loads(response["body"])
