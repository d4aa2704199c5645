"""
OpenMusic API — Access Policy
==============================

What:  Decides whether a user may act on an owned resource.
How:   Two pure functions build an AccessDecision; services gather the facts
       (owner column, collaboration row) and callers either inspect the
       decision or raise from it.

Decision table (precedence: existence > ownership > collaboration):

    record exists │ owner == user │ collaborator │ decision
    ──────────────┼───────────────┼──────────────┼──────────────────────────
    no            │ –             │ –            │ NOT_FOUND
    yes           │ yes           │ –            │ ALLOWED
    yes           │ no            │ yes          │ ALLOWED
    yes           │ no            │ no           │ DENIED (ownership reason)

A collaboration never changes the NOT_FOUND or owner outcomes; it can only
turn an ownership denial into ALLOWED. When it cannot, the ownership denial
is returned unchanged so callers always see the same rejection reason.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from openmusic.exceptions import AuthorizationError, NotFoundError

NOT_OWNER_REASON = "You are not the owner of this resource"


class AccessOutcome(str, Enum):
    ALLOWED = "allowed"
    DENIED = "denied"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class AccessDecision:
    """Result of an access check: Allowed | Denied(reason) | NotFound."""

    outcome: AccessOutcome
    reason: Optional[str] = None

    @classmethod
    def allowed(cls) -> "AccessDecision":
        return cls(AccessOutcome.ALLOWED)

    @classmethod
    def denied(cls, reason: str) -> "AccessDecision":
        return cls(AccessOutcome.DENIED, reason)

    @classmethod
    def not_found(cls) -> "AccessDecision":
        return cls(AccessOutcome.NOT_FOUND)

    @property
    def is_allowed(self) -> bool:
        return self.outcome is AccessOutcome.ALLOWED

    def raise_for_outcome(self, resource: str, resource_id: str) -> None:
        """
        Turn a negative decision into the matching application exception.

        Raises:
            NotFoundError:      outcome is NOT_FOUND (→ 404)
            AuthorizationError: outcome is DENIED (→ 403)
        """
        if self.outcome is AccessOutcome.NOT_FOUND:
            raise NotFoundError(resource=resource, resource_id=resource_id)
        if self.outcome is AccessOutcome.DENIED:
            raise AuthorizationError(
                message=self.reason or NOT_OWNER_REASON,
                context={"resource": resource, "resource_id": resource_id},
            )


def decide_ownership(owner: Optional[str], user_id: str) -> AccessDecision:
    """
    First step: existence, then ownership.

    Args:
        owner:   Owner column of the record, or None when no record matched.
        user_id: The authenticated caller.
    """
    if owner is None:
        return AccessDecision.not_found()
    if owner != user_id:
        return AccessDecision.denied(NOT_OWNER_REASON)
    return AccessDecision.allowed()


def decide_access(ownership: AccessDecision, is_collaborator: bool) -> AccessDecision:
    """
    Second step: collaboration may only rescue an ownership denial.

    Anything other than DENIED passes through untouched, and a failed
    collaboration lookup keeps the original denial.
    """
    if ownership.outcome is not AccessOutcome.DENIED:
        return ownership
    if is_collaborator:
        return AccessDecision.allowed()
    return ownership
