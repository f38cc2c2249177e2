"""
Bearer token issuance and verification.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from shared.config import BaseConfig
from shared.errors import TokenRejectedError
from shared.logging import get_logger


@dataclass(frozen=True)
class VerifiedPrincipal:
    """Identity established by a successful token verification."""

    principal_id: int
    username: Optional[str] = None
    role: Optional[str] = None
    expires_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "principal_id": self.principal_id,
            "username": self.username,
            "role": self.role,
            "expires_at": self.expires_at.isoformat() if self.expires_at else None,
        }


@dataclass(frozen=True)
class IssuedToken:
    token: str
    issued_at: datetime
    expires_at: datetime


class TokenIssuer:
    """Signs and checks HS256 tokens with a shared secret.

    Tokens are never revoked; a token stays valid until ``exp``.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", issuer: str = "student-portal-auth",
                 ttl_seconds: int = 3600):
        self.secret = secret
        self.algorithm = algorithm
        self.issuer = issuer
        self.ttl = timedelta(seconds=ttl_seconds)
        self.logger = get_logger("auth.tokens")

    @classmethod
    def from_config(cls, config: BaseConfig) -> "TokenIssuer":
        return cls(
            secret=config.jwt_secret,
            algorithm=config.jwt_algorithm,
            issuer=config.jwt_issuer,
            ttl_seconds=config.token_ttl_seconds,
        )

    def issue(self, principal_id: int, username: Optional[str] = None, role: Optional[str] = None,
              now: Optional[datetime] = None) -> IssuedToken:
        """Issue a signed token for an already authenticated principal."""
        issued_at = (now or datetime.now(timezone.utc)).replace(microsecond=0)
        expires_at = issued_at + self.ttl
        payload = {
            "iss": self.issuer,
            "sub": str(principal_id),
            "iat": issued_at,
            "exp": expires_at,
        }
        if username is not None:
            payload["username"] = username
        if role is not None:
            payload["role"] = role

        token = jwt.encode(payload, self.secret, algorithm=self.algorithm)
        return IssuedToken(token=token, issued_at=issued_at, expires_at=expires_at)

    def verify(self, token: str) -> VerifiedPrincipal:
        """Check signature, issuer and expiry; raise TokenRejectedError otherwise."""
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options={"require": ["exp", "iat", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenRejectedError("Token expired", details={"reason": "expired"})
        except jwt.InvalidTokenError as e:
            self.logger.debug("Token rejected", error=str(e))
            raise TokenRejectedError("Invalid token", details={"reason": "invalid"})

        try:
            principal_id = int(claims["sub"])
        except (TypeError, ValueError):
            raise TokenRejectedError("Invalid token subject", details={"reason": "invalid_subject"})

        return VerifiedPrincipal(
            principal_id=principal_id,
            username=claims.get("username"),
            role=claims.get("role"),
            expires_at=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
        )
