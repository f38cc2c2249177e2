"""
Shared utilities for the Student Portal services.

This package aggregates common building blocks consumed by all services:

- config: Service configuration via pydantic-settings
- logging: Structured logging with trace correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses
- persistence: Single-table stores (in-memory or PostgreSQL)
- auth: Token issuance, verification client, ownership guard

Any cross-service logic should live here to avoid import cycles across
service packages. Do not import from service_* packages into shared/.
"""
