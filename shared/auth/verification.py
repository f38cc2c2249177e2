"""
Token verification client used by downstream services.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

import httpx

from shared.config import BaseConfig
from shared.errors import TokenRejectedError
from shared.logging import get_logger
from .tokens import TokenIssuer, VerifiedPrincipal

BEARER_PREFIX = "Bearer "


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Pull the token out of an Authorization header value."""
    if not authorization:
        raise TokenRejectedError("Authorization header required", details={"reason": "missing"})

    if not authorization.startswith(BEARER_PREFIX):
        raise TokenRejectedError("Invalid authorization header format", details={"reason": "scheme"})

    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise TokenRejectedError("Empty bearer token", details={"reason": "empty"})

    return token


class TokenVerifier(ABC):
    """Resolves a bearer token to the principal it was issued for."""

    @abstractmethod
    async def verify(self, token: str) -> VerifiedPrincipal:
        """Return the verified principal or raise TokenRejectedError."""

    async def close(self):
        """Release resources held by the verifier."""


class LocalTokenVerifier(TokenVerifier):
    """Checks tokens in-process with the shared signing secret."""

    def __init__(self, issuer: TokenIssuer):
        self.issuer = issuer

    async def verify(self, token: str) -> VerifiedPrincipal:
        return self.issuer.verify(token)


class RemoteTokenVerifier(TokenVerifier):
    """Asks the auth service to validate each token.

    One GET per call with an explicit timeout. No retry and no caching:
    any failure of the call rejects the token.
    """

    def __init__(self, auth_service_url: str, timeout: float = 5.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.auth_service_url = auth_service_url.rstrip('/')
        self.timeout = timeout
        self.transport = transport
        self.logger = get_logger("auth.verification")

    async def verify(self, token: str) -> VerifiedPrincipal:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(
                    f"{self.auth_service_url}/auth/validate-token",
                    params={"token": token}
                )
        except httpx.TimeoutException:
            self.logger.error("Auth service timeout", timeout=self.timeout)
            raise TokenRejectedError("Token verification timed out", details={"reason": "timeout"})
        except httpx.HTTPError as e:
            self.logger.error("Auth service request error", error=str(e))
            raise TokenRejectedError("Token verification unavailable", details={"reason": "unavailable"})

        if not response.is_success:
            self.logger.warning("Token verification failed", status_code=response.status_code)
            raise TokenRejectedError(
                "Token verification failed",
                details={"reason": "rejected", "status_code": response.status_code}
            )

        try:
            body = response.json()
            expires_at = body.get("expires_at")
            return VerifiedPrincipal(
                principal_id=int(body["principal_id"]),
                username=body.get("username"),
                role=body.get("role"),
                expires_at=datetime.fromisoformat(expires_at) if expires_at else None,
            )
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            self.logger.error("Malformed verification response", error=str(e))
            raise TokenRejectedError("Malformed verification response", details={"reason": "malformed"})


def create_token_verifier(config: BaseConfig) -> TokenVerifier:
    """Build the verifier selected by ``token_verification_mode``."""
    mode = config.token_verification_mode.lower()
    if mode == "remote":
        return RemoteTokenVerifier(config.auth_service_url, timeout=config.verify_timeout_seconds)
    if mode == "local":
        return LocalTokenVerifier(TokenIssuer.from_config(config))
    raise ValueError(f"Unsupported token verification mode: {config.token_verification_mode}")
