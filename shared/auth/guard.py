"""
Request authentication and resource ownership checks.
"""

from typing import Optional

from fastapi import Header

from shared.errors import AuthorizationError
from shared.logging import get_logger, set_principal_context
from .tokens import VerifiedPrincipal
from .verification import TokenVerifier, extract_bearer_token


class RequirePrincipal:
    """FastAPI dependency resolving the caller's verified principal.

    A missing or malformed header is rejected before the verifier is
    consulted. The principal is returned to the handler as a value; it is
    not stored on the request.
    """

    def __init__(self, verifier: TokenVerifier):
        self.verifier = verifier
        self.logger = get_logger("auth.guard")

    async def __call__(self, authorization: Optional[str] = Header(default=None)) -> VerifiedPrincipal:
        token = extract_bearer_token(authorization)
        principal = await self.verifier.verify(token)

        set_principal_context(principal.principal_id)
        self.logger.info("Request authenticated", principal_id=principal.principal_id)
        return principal


def ensure_owner(principal: VerifiedPrincipal, resource_id: int) -> VerifiedPrincipal:
    """Reject unless the principal owns the resource with the given id."""
    if principal.principal_id != resource_id:
        raise AuthorizationError(
            "Access denied: resource belongs to another principal",
            details={"principal_id": principal.principal_id, "resource_id": resource_id}
        )
    return principal
