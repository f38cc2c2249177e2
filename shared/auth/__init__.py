"""
Token issuance, verification and ownership checks shared by all services.
"""

from .tokens import IssuedToken, TokenIssuer, VerifiedPrincipal
from .verification import (
    LocalTokenVerifier,
    RemoteTokenVerifier,
    TokenVerifier,
    create_token_verifier,
    extract_bearer_token,
)
from .guard import RequirePrincipal, ensure_owner

__all__ = [
    "IssuedToken",
    "TokenIssuer",
    "VerifiedPrincipal",
    "TokenVerifier",
    "LocalTokenVerifier",
    "RemoteTokenVerifier",
    "create_token_verifier",
    "extract_bearer_token",
    "RequirePrincipal",
    "ensure_owner",
]
