"""
Membership reader / writer tests.
"""
import pytest

from mailchimp_subscribe.errors import ReadError, WriteError
from mailchimp_subscribe.mailchimp import MailchimpAPIError, calculate_subscriber_hash
from mailchimp_subscribe.members import (
    MemberSnapshot, check_existing, create_member, format_interests,
    has_all_interests, update_member
)
from mailchimp_subscribe.validations import SubscriptionRequest

from conftest import EMAIL, LIST_ID


def request(**fields):
    data = {"email": EMAIL, "list_id": LIST_ID}
    data.update(fields)
    return SubscriptionRequest(**data)


@pytest.mark.parametrize("requested, current, expected", [
    ([], None, True),
    ([], {"int1": False}, True),
    (["int1"], {"int1": True}, True),
    (["int1", "int2"], {"int1": True, "int2": True, "int3": False}, True),
    (["int1"], {"int1": False}, False),
    (["int1"], {}, False),
    (["int1"], None, False),
    (["int1", "int2"], {"int1": True}, False),
])
def test_has_all_interests(requested, current, expected):
    assert has_all_interests(requested, current) is expected


def test_format_interests():
    assert format_interests(["int1", "int2"]) == {"int1": True, "int2": True}
    assert format_interests([]) == {}


def test_check_existing_not_found(provider_factory):
    provider = provider_factory(member=None)
    snapshot = check_existing(request(), provider)
    assert snapshot == MemberSnapshot(exists=False, subscribed=False, interests_satisfied=False)
    assert snapshot.raw_status is None
    assert provider.calls == [("get", LIST_ID, calculate_subscriber_hash(EMAIL), None)]


def test_check_existing_subscribed(provider_factory):
    provider = provider_factory(member={"status": "subscribed", "interests": {"int1": True}})
    snapshot = check_existing(request(interests=["int1"]), provider)
    assert snapshot == MemberSnapshot(True, True, True, "subscribed")


@pytest.mark.parametrize("status", ["unsubscribed", "pending", "cleaned", "archived"])
def test_check_existing_not_subscribed(provider_factory, status):
    provider = provider_factory(member={"status": status, "interests": {}})
    snapshot = check_existing(request(), provider)
    assert snapshot.exists is True
    assert snapshot.subscribed is False
    assert snapshot.interests_satisfied is True
    assert snapshot.raw_status == status


def test_check_existing_missing_interest(provider_factory):
    provider = provider_factory(member={"status": "subscribed", "interests": {"int1": False}})
    snapshot = check_existing(request(interests=["int1"]), provider)
    assert snapshot.interests_satisfied is False


def test_check_existing_hashes_mixed_case_email(provider_factory):
    provider = provider_factory(member=None)
    check_existing(request(email="Jane@Example.com"), provider)
    assert provider.calls[0][2] == calculate_subscriber_hash("jane@example.com")


def test_check_existing_provider_error_is_read_error(provider_factory):
    provider = provider_factory(get_error=MailchimpAPIError(401, "API Key Invalid", "Your API key may be invalid."))
    with pytest.raises(ReadError) as exc:
        check_existing(request(), provider)
    assert exc.value.message == "Your API key may be invalid."
    assert exc.value.provider_status == 401


def test_update_sends_status_only_without_interests(provider_factory):
    provider = provider_factory(member={"status": "unsubscribed"})
    update_member(request(), provider)
    (_, list_id, subscriber_hash, body), = provider.calls_of("update")
    assert list_id == LIST_ID
    assert subscriber_hash == calculate_subscriber_hash(EMAIL)
    assert body == {"status": "subscribed"}


def test_update_sends_requested_interests(provider_factory):
    provider = provider_factory(member={"status": "subscribed"})
    update_member(request(interests=["int1", "int2"]), provider)
    body = provider.calls_of("update")[0][3]
    assert body == {"status": "subscribed", "interests": {"int1": True, "int2": True}}


def test_update_failure_is_write_error(provider_factory):
    provider = provider_factory(update_error=MailchimpAPIError(500, "Internal Server Error"))
    with pytest.raises(WriteError) as exc:
        update_member(request(), provider)
    assert exc.value.message == "Internal Server Error"
    assert len(provider.calls_of("update")) == 1


def test_create_body(provider_factory):
    provider = provider_factory()
    create_member(request(interests=["int1"], merge_fields={"FNAME": "Jane"}), provider)
    (_, list_id, _, body), = provider.calls_of("create")
    assert list_id == LIST_ID
    assert body == {
        "email_address": EMAIL,
        "status": "subscribed",
        "merge_fields": {"FNAME": "Jane"},
        "interests": {"int1": True},
    }


def test_create_body_defaults(provider_factory):
    provider = provider_factory()
    create_member(request(), provider)
    assert provider.calls_of("create")[0][3] == {
        "email_address": EMAIL, "status": "subscribed", "merge_fields": {}
    }


def test_create_failure_carries_provider_status(provider_factory):
    provider = provider_factory(create_error=MailchimpAPIError(
        400, "Forgotten Email Not Subscribed", "jane@example.com was permanently deleted"))
    with pytest.raises(WriteError) as exc:
        create_member(request(), provider)
    assert exc.value.provider_status == 400
    assert exc.value.message == "jane@example.com was permanently deleted"
    assert len(provider.calls_of("create")) == 1


def test_unusual_status_is_only_logged(provider_factory, caplog):
    provider = provider_factory(member={"status": "cleaned", "interests": {}})
    with caplog.at_level("WARNING", logger="mailchimp_subscribe.members"):
        check_existing(request(), provider)
    assert "has status 'cleaned'" in caplog.text
