#!/usr/bin/env python3
"""
members.py

Membership reader and writer.

check_existing() looks the member up by subscriber hash and reduces the
Mailchimp record to a MemberSnapshot. update_member() / create_member() issue
exactly one write each and are never retried.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .config import SUBSCRIBED_STATUS
from .errors import ReadError, WriteError
from .mailchimp import MailchimpAPIError, MemberProvider, calculate_subscriber_hash
from .validations import SubscriptionRequest

logger = logging.getLogger(__name__)

# Statuses a member can be re-subscribed from without surprises
EXPECTED_STATUSES = ("subscribed", "unsubscribed")


@dataclass(frozen=True)
class MemberSnapshot:
    exists: bool
    subscribed: bool
    interests_satisfied: bool
    raw_status: Optional[str] = None


NOT_FOUND = MemberSnapshot(exists=False, subscribed=False, interests_satisfied=False)


def has_all_interests(requested: List[str], current: Optional[Dict[str, Any]]) -> bool:
    """True iff every requested interest id is present and true on the member."""
    current = current or {}
    return all(current.get(interest) is True for interest in requested)


def format_interests(interests: List[str]) -> Dict[str, bool]:
    return {interest: True for interest in interests}


def check_existing(request: SubscriptionRequest, provider: MemberProvider) -> MemberSnapshot:
    """
    Read the current state of request.email on request.list_id.

    A 404 is a normal answer (the member does not exist). Any other failure
    raises ReadError: the real state is unknown, so the caller must not write.
    """
    subscriber_hash = calculate_subscriber_hash(request.email)
    try:
        member = provider.get_member(request.list_id, subscriber_hash)
    except MailchimpAPIError as e:
        logger.error(f"❌ Lookup failed for {request.email} on list {request.list_id}: "
                     f"{e.status_code} {e.message}")
        raise ReadError(e.message, provider_status=e.status_code) from e

    if member is None:
        logger.info(f"{request.email} is not a member of list {request.list_id}")
        return NOT_FOUND

    status = member.get("status")
    if status not in EXPECTED_STATUSES:
        logger.warning(f"⚠️ {request.email} has status '{status}' on list {request.list_id}")

    snapshot = MemberSnapshot(
        exists=True,
        subscribed=status == SUBSCRIBED_STATUS,
        interests_satisfied=has_all_interests(request.interests, member.get("interests")),
        raw_status=status,
    )
    logger.debug(f"Current state for {request.email}: {snapshot}")
    return snapshot


def update_member(request: SubscriptionRequest, provider: MemberProvider,
                  status: str = SUBSCRIBED_STATUS) -> Dict[str, Any]:
    """
    Patch an existing member's status and, if any were requested, interests.
    Interests not in the request are left as they are on Mailchimp.
    """
    body: Dict[str, Any] = {"status": status}
    if request.interests:
        body["interests"] = format_interests(request.interests)

    try:
        result = provider.update_member(request.list_id, calculate_subscriber_hash(request.email), body)
    except MailchimpAPIError as e:
        logger.error(f"❌ Update failed for {request.email}: {e.status_code} {e.message}")
        raise WriteError(e.message, provider_status=e.status_code) from e

    logger.info(f"✅ Updated {request.email} on list {request.list_id} (status={status})")
    return result


def create_member(request: SubscriptionRequest, provider: MemberProvider,
                  status: str = SUBSCRIBED_STATUS) -> Dict[str, Any]:
    """Create a new member. Only call after check_existing() reported no member."""
    body: Dict[str, Any] = {
        "email_address": request.email,
        "status": status,
        "merge_fields": dict(request.merge_fields),
    }
    if request.interests:
        body["interests"] = format_interests(request.interests)

    try:
        result = provider.create_member(request.list_id, body)
    except MailchimpAPIError as e:
        logger.error(f"❌ Create failed for {request.email}: {e.status_code} {e.message}")
        raise WriteError(e.message, provider_status=e.status_code) from e

    logger.info(f"✅ Created {request.email} on list {request.list_id} (status={status})")
    return result
