"""
API Gateway service for the Student Portal.
"""

from typing import Optional

import httpx
from fastapi import Request

from shared.base_service import BaseService
from shared.config import ServiceConfig
from shared.errors import PortalException
from .adapters import ServiceProxy
from .domain import RouteTable

PROXIED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


class RouteNotFoundError(PortalException):
    """No downstream service owns the requested path."""

    status_code = 404

    def __init__(self, path: str):
        super().__init__("ROUTE_NOT_FOUND", f"No service handles {path}", {"path": path})


class GatewayService(BaseService):
    """API Gateway service implementation.

    Forwards requests by path prefix. The gateway does not authenticate;
    bearer tokens pass through untouched to the owning service.
    """

    def __init__(self, config: Optional[ServiceConfig] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        super().__init__("gateway", 8000, config=config)
        self.routes = RouteTable.from_config(self.config)
        self.proxy = ServiceProxy(timeout=self.config.gateway_timeout_seconds, transport=transport)

        self._setup_gateway_routes()

    def _setup_gateway_routes(self):
        """Set up gateway routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "gateway",
                "message": "Student Portal - API Gateway",
                "version": "1.0.0"
            }

        @self.app.get("/gateway/routes")
        async def list_routes():
            """Describe the route table."""
            return {"routes": self.routes.describe()}

        # Registered last so the gateway's own endpoints take precedence
        @self.app.api_route("/{path:path}", methods=PROXIED_METHODS, include_in_schema=False)
        async def forward(path: str, request: Request):
            route = self.routes.resolve(request.url.path)
            if route is None:
                raise RouteNotFoundError(request.url.path)

            try:
                response = await self.proxy.forward(route, request)
            except PortalException:
                self.metrics.increment_counter("proxied_requests_total", service=route.service, status_code="502")
                raise

            self.metrics.increment_counter(
                "proxied_requests_total",
                service=route.service,
                status_code=str(response.status_code)
            )
            return response

    async def _check_dependencies(self):
        """Check downstream services."""
        dependencies = {}
        for service, base_url in self.routes.services().items():
            dependencies[service] = await self.proxy.probe(base_url)
        return dependencies


def create_app(config: Optional[ServiceConfig] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
    """Create FastAPI application."""
    service = GatewayService(config, transport)
    return service.app


if __name__ == "__main__":
    service = GatewayService()
    service.run()
