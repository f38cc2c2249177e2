"""
Token validation package.

Issues tokens for authenticated principals and validates tokens presented
by downstream services through ``GET /auth/validate-token``. Validation
checks signature, issuer and expiry only; there is no revocation list, so a
token stays valid until it expires.
"""

from .token_validator import TokenValidationResponse, TokenValidator

__all__ = ["TokenValidationResponse", "TokenValidator"]
