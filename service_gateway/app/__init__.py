"""
API Gateway Service package for the Student Portal.

The gateway fronts client requests and forwards each one to the service
that owns its path prefix. It performs no authentication, rate limiting or
caching; downstream services verify tokens themselves.

Structure:
- app.main: FastAPI app, gateway endpoints and the catch-all forwarder.
- app.adapters: HTTP proxy for internal services.
- app.domain: Route table.
"""
