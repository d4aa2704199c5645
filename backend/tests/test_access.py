"""
OpenMusic API — Access Policy Unit Tests
=========================================

What:  The decision table in openmusic.core.access, without any database.

    record exists │ owner == user │ collaborator │ decision
    no            │ –             │ –            │ NOT_FOUND
    yes           │ yes           │ –            │ ALLOWED
    yes           │ no            │ yes          │ ALLOWED
    yes           │ no            │ no           │ DENIED (ownership reason)
"""

import pytest

from openmusic.core.access import (
    NOT_OWNER_REASON,
    AccessDecision,
    AccessOutcome,
    decide_access,
    decide_ownership,
)
from openmusic.exceptions import AuthorizationError, NotFoundError


class TestDecideOwnership:

    def test_missing_record_is_not_found(self):
        assert decide_ownership(None, "user-1").outcome is AccessOutcome.NOT_FOUND

    def test_owner_is_allowed(self):
        assert decide_ownership("user-1", "user-1").is_allowed

    def test_other_user_is_denied_with_reason(self):
        decision = decide_ownership("user-1", "user-2")
        assert decision.outcome is AccessOutcome.DENIED
        assert decision.reason == NOT_OWNER_REASON


class TestDecideAccess:

    @pytest.mark.parametrize("is_collaborator", [True, False])
    def test_not_found_ignores_collaboration(self, is_collaborator):
        decision = decide_access(AccessDecision.not_found(), is_collaborator)
        assert decision.outcome is AccessOutcome.NOT_FOUND

    @pytest.mark.parametrize("is_collaborator", [True, False])
    def test_owner_stays_allowed(self, is_collaborator):
        assert decide_access(AccessDecision.allowed(), is_collaborator).is_allowed

    def test_collaborator_rescues_denial(self):
        denied = AccessDecision.denied(NOT_OWNER_REASON)
        assert decide_access(denied, True).is_allowed

    def test_failed_collaboration_keeps_original_denial(self):
        denied = AccessDecision.denied("original reason")
        decision = decide_access(denied, False)
        assert decision is denied
        assert decision.reason == "original reason"


class TestRaiseForOutcome:

    def test_allowed_does_not_raise(self):
        AccessDecision.allowed().raise_for_outcome("playlist", "playlist-1")

    def test_not_found_raises_not_found(self):
        with pytest.raises(NotFoundError, match="playlist-1"):
            AccessDecision.not_found().raise_for_outcome("playlist", "playlist-1")

    def test_denied_raises_authorization_with_reason(self):
        with pytest.raises(AuthorizationError) as exc_info:
            AccessDecision.denied("nope").raise_for_outcome("playlist", "playlist-1")
        assert exc_info.value.message == "nope"
        assert exc_info.value.context["resource_id"] == "playlist-1"
