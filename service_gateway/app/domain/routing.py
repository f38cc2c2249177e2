"""
Static route table mapping path prefixes to owning services.
"""

from dataclasses import dataclass
from typing import List, Optional

from shared.config import BaseConfig


@dataclass(frozen=True)
class Route:
    """One prefix owned by one downstream service."""
    prefix: str
    service: str
    base_url: str

    def matches(self, path: str) -> bool:
        return path == self.prefix or path.startswith(self.prefix + "/")


class RouteTable:
    """Resolves a request path to the route with the longest matching prefix."""

    def __init__(self, routes: List[Route]):
        self.routes = sorted(routes, key=lambda route: len(route.prefix), reverse=True)

    @classmethod
    def from_config(cls, config: BaseConfig) -> "RouteTable":
        auth_url = config.auth_service_url.rstrip("/")
        students_url = config.students_service_url.rstrip("/")
        todos_url = config.todos_service_url.rstrip("/")
        return cls([
            Route("/auth", "auth", auth_url),
            Route("/api/students", "students", students_url),
            Route("/students", "students", students_url),
            Route("/api/todo", "todos", todos_url),
            Route("/api/todos", "todos", todos_url),
        ])

    def resolve(self, path: str) -> Optional[Route]:
        for route in self.routes:
            if route.matches(path):
                return route
        return None

    def services(self) -> dict:
        """Distinct service name to base URL."""
        return {route.service: route.base_url for route in self.routes}

    def describe(self) -> List[dict]:
        return [
            {"prefix": route.prefix, "service": route.service, "base_url": route.base_url}
            for route in self.routes
        ]
