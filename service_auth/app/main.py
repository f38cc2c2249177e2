"""
Auth service for the Student Portal.
"""

from typing import Optional

from fastapi import Query
from fastapi.responses import PlainTextResponse

from shared.auth import TokenIssuer
from shared.base_service import BaseService
from shared.config import ServiceConfig
from shared.errors import AuthenticationError
from shared.persistence import TableFactory
from .accounts import PRINCIPAL_COLUMNS, PRINCIPAL_TABLE, PrincipalStore, RegistrationRequest
from .validation import TokenValidationResponse, TokenValidator


class AuthService(BaseService):
    """Auth service implementation."""

    def __init__(self, config: Optional[ServiceConfig] = None):
        super().__init__("auth", 8010, config=config)
        self.tables = TableFactory(self.config)
        self.principals = PrincipalStore(
            self.tables.table(PRINCIPAL_TABLE, PRINCIPAL_COLUMNS),
            hash_rounds=self.config.password_hash_rounds
        )
        self.token_validator = TokenValidator(TokenIssuer.from_config(self.config), self.metrics)

        self._setup_auth_routes()

    async def on_startup(self):
        await self.tables.start()

    async def on_shutdown(self):
        await self.tables.stop()

    def _setup_auth_routes(self):
        """Set up auth-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "auth",
                "message": "Student Portal - Auth Service",
                "version": "1.0.0"
            }

        @self.app.post("/auth/register", response_class=PlainTextResponse)
        async def register(request: RegistrationRequest):
            """Register a principal with a username and password."""
            await self.principals.register(request.username, request.password)
            return "User registered successfully"

        @self.app.post("/auth/login", response_class=PlainTextResponse)
        async def login(username: str = Query(...), password: str = Query(...)):
            """Exchange credentials for a bearer token."""
            try:
                principal = await self.principals.authenticate(username, password)
            except AuthenticationError:
                self.metrics.increment_counter("logins_total", status="failure")
                raise

            self.metrics.increment_counter("logins_total", status="success")
            return self.token_validator.issue_for(principal).token

        @self.app.get("/auth/validate-token", response_model=TokenValidationResponse)
        async def validate_token(token: str = Query(...)):
            """Validate a token on behalf of another service."""
            return self.token_validator.validate(token)

    async def _check_dependencies(self):
        """Check auth dependencies."""
        return {"database": await self.tables.check()}


def create_app(config: Optional[ServiceConfig] = None):
    """Create FastAPI application."""
    service = AuthService(config)
    return service.app


if __name__ == "__main__":
    service = AuthService()
    service.run()
