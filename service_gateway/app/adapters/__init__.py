"""
Adapters package for the Gateway Service.

Contains the HTTP client wrapper used to reach internal services. The
adapter owns request replay, timeouts and the mapping of transport
failures onto shared errors.
"""

from .service_proxy import ServiceProxy

__all__ = [
    "ServiceProxy",
]
