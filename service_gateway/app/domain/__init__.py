"""
Domain utilities for the Gateway Service.

Holds request routing decisions that do not belong to adapters or
transport-specific layers.
"""

from .routing import Route, RouteTable

__all__ = [
    "Route",
    "RouteTable",
]
