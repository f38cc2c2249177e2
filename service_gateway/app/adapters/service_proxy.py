"""
HTTP proxy adapter forwarding gateway requests to downstream services.
"""

from typing import Dict, Optional

import httpx
from fastapi import Request, Response

from shared.errors import ExternalServiceError
from shared.logging import get_logger, request_id_var
from ..domain.routing import Route

# Connection-scoped headers are never replayed across the hop
HOP_BY_HOP_HEADERS = frozenset({
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailers",
    "transfer-encoding",
    "upgrade",
    "host",
    "content-length",
})

# httpx already decoded the body, so the upstream encoding no longer applies
STRIPPED_RESPONSE_HEADERS = HOP_BY_HOP_HEADERS | {"content-encoding"}


def _filter_headers(headers, excluded) -> Dict[str, str]:
    return {name: value for name, value in headers.items() if name.lower() not in excluded}


class ServiceProxy:
    """Replays a request against the service owning its route."""

    def __init__(self, timeout: float = 30.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout = timeout
        self.transport = transport
        self.logger = get_logger("gateway.proxy")

    async def forward(self, route: Route, request: Request) -> Response:
        url = f"{route.base_url}{request.url.path}"
        if request.url.query:
            url = f"{url}?{request.url.query}"

        headers = _filter_headers(request.headers, HOP_BY_HOP_HEADERS)
        request_id = request_id_var.get()
        if request_id:
            headers["x-request-id"] = request_id

        body = await request.body()

        # The query string may carry credentials; failures report the path only
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                upstream = await client.request(request.method, url, content=body, headers=headers)
        except httpx.TimeoutException:
            self.logger.error("Downstream timeout", service=route.service, path=request.url.path)
            raise ExternalServiceError(route.service, "timeout", details={"path": request.url.path})
        except httpx.HTTPError as e:
            self.logger.error(
                "Downstream request error",
                service=route.service,
                path=request.url.path,
                error=type(e).__name__
            )
            raise ExternalServiceError(route.service, "unavailable", details={"path": request.url.path})

        self.logger.info(
            "Request forwarded",
            service=route.service,
            method=request.method,
            path=request.url.path,
            status_code=upstream.status_code
        )

        return Response(
            content=upstream.content,
            status_code=upstream.status_code,
            headers=_filter_headers(upstream.headers, STRIPPED_RESPONSE_HEADERS)
        )

    async def probe(self, base_url: str) -> str:
        """Return "ok" when the service's health endpoint answers 200."""
        try:
            async with httpx.AsyncClient(timeout=min(self.timeout, 5.0), transport=self.transport) as client:
                response = await client.get(f"{base_url}/health")
            return "ok" if response.status_code == 200 else "error"
        except httpx.HTTPError:
            return "error"
