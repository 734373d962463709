#!/usr/bin/env python3
"""
subscribe.py

Reconciles one subscription request against Mailchimp:
read the member, decide, write at most once.

    (exists, subscribed, interests_satisfied)
    (False, _,     _    )  -> create, status=subscribed
    (True,  True,  True )  -> nothing to do
    (True,  False, _    )  -> update, status=subscribed
    (True,  True,  False)  -> update, status=subscribed
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .config import SUBSCRIBED_STATUS
from .errors import ReadError, WriteError
from .mailchimp import MemberProvider
from .members import MemberSnapshot, check_existing, create_member, update_member
from .validations import SubscriptionRequest

logger = logging.getLogger(__name__)


class Action(Enum):
    CREATE = "create"
    UPDATE = "update"
    NONE = "none"


class OutcomeKind(Enum):
    ALREADY_SATISFIED = "already_satisfied"
    UPDATED = "updated"
    CREATED = "created"
    FAILED = "failed"


@dataclass(frozen=True)
class Outcome:
    kind: OutcomeKind
    reason: Optional[str] = None
    status_code: int = 200

    @classmethod
    def failed(cls, reason: str, status_code: Optional[int] = None) -> "Outcome":
        return cls(OutcomeKind.FAILED, reason=reason, status_code=status_code or 500)

    @property
    def ok(self) -> bool:
        return self.kind is not OutcomeKind.FAILED


def decide(snapshot: MemberSnapshot) -> Action:
    if not snapshot.exists:
        return Action.CREATE
    if snapshot.subscribed and snapshot.interests_satisfied:
        return Action.NONE
    return Action.UPDATE


def subscribe(request: SubscriptionRequest, provider: MemberProvider) -> Outcome:
    """
    Ensure request.email is subscribed to request.list_id with the requested
    interests. Provider failures come back as a FAILED outcome, never raised.
    """
    try:
        snapshot = check_existing(request, provider)
    except ReadError as e:
        return Outcome.failed(e.message)

    action = decide(snapshot)
    logger.info(f"{request.email} on list {request.list_id}: "
                f"exists={snapshot.exists} status={snapshot.raw_status} "
                f"interests_satisfied={snapshot.interests_satisfied} -> {action.value}")

    if action is Action.NONE:
        return Outcome(OutcomeKind.ALREADY_SATISFIED)

    if action is Action.UPDATE:
        try:
            update_member(request, provider, status=SUBSCRIBED_STATUS)
        except WriteError as e:
            return Outcome.failed(e.message)
        return Outcome(OutcomeKind.UPDATED)

    try:
        create_member(request, provider, status=SUBSCRIBED_STATUS)
    except WriteError as e:
        # Mailchimp's own status (e.g. 400 "Member Exists") is passed through on create
        return Outcome.failed(e.message, e.provider_status)
    return Outcome(OutcomeKind.CREATED)
