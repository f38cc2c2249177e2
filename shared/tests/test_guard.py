"""
Unit tests for RequirePrincipal and ensure_owner.
"""

import pytest

from shared.auth import RequirePrincipal, VerifiedPrincipal, ensure_owner
from shared.errors import AuthorizationError, TokenRejectedError
from shared.logging import principal_id_var
from shared.test_helpers import StubTokenVerifier


@pytest.mark.asyncio
async def test_missing_header_never_reaches_verifier():
    verifier = StubTokenVerifier()

    with pytest.raises(TokenRejectedError):
        await RequirePrincipal(verifier)(authorization=None)

    assert verifier.call_count == 0


@pytest.mark.asyncio
async def test_valid_token_returns_principal_and_binds_log_context():
    verifier = StubTokenVerifier().allow("good", principal_id=9)

    principal = await RequirePrincipal(verifier)(authorization="Bearer good")

    assert principal.principal_id == 9
    assert verifier.calls == ["good"]
    assert principal_id_var.get() == "9"


@pytest.mark.asyncio
async def test_rejected_token_propagates():
    verifier = StubTokenVerifier()

    with pytest.raises(TokenRejectedError):
        await RequirePrincipal(verifier)(authorization="Bearer unknown")

    assert verifier.call_count == 1


def test_ensure_owner_allows_matching_id():
    principal = VerifiedPrincipal(principal_id=3)

    assert ensure_owner(principal, 3) is principal


def test_ensure_owner_rejects_mismatch_with_403():
    with pytest.raises(AuthorizationError) as exc_info:
        ensure_owner(VerifiedPrincipal(principal_id=3), 4)

    assert exc_info.value.status_code == 403
    assert exc_info.value.details == {"principal_id": 3, "resource_id": 4}
