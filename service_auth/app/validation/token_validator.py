"""
Token validation service for Auth service.
"""

from typing import Optional

from pydantic import BaseModel

from shared.auth import IssuedToken, TokenIssuer, VerifiedPrincipal
from shared.errors import TokenRejectedError
from shared.logging import get_logger
from shared.metrics import MetricsCollector
from ..accounts import Principal


class TokenValidationResponse(BaseModel):
    """Response model for token validation."""
    valid: bool = True
    principal_id: int
    username: Optional[str] = None
    role: Optional[str] = None
    expires_at: Optional[str] = None


class TokenValidator:
    """Issues tokens at login and validates them for other services."""

    def __init__(self, issuer: TokenIssuer, metrics: MetricsCollector):
        self.issuer = issuer
        self.metrics = metrics
        self.logger = get_logger("auth.validator")

    def issue_for(self, principal: Principal) -> IssuedToken:
        issued = self.issuer.issue(principal.id, username=principal.username, role=principal.role)
        self.logger.info(
            "Token issued",
            principal_id=principal.id,
            expires_at=issued.expires_at.isoformat()
        )
        return issued

    def validate(self, token: str) -> TokenValidationResponse:
        """Validate a token, raising TokenRejectedError when it is not acceptable."""
        # Remove Bearer prefix if present
        if token.startswith("Bearer "):
            token = token[7:]

        try:
            principal: VerifiedPrincipal = self.issuer.verify(token)
        except TokenRejectedError as e:
            self.metrics.increment_counter("token_validations_total", status="invalid")
            self.logger.warning("Token validation failed", reason=e.details.get("reason"))
            raise

        self.metrics.increment_counter("token_validations_total", status="valid")
        return TokenValidationResponse(**principal.to_dict())
