"""
Auth Service package for the Student Portal.

This package exposes the FastAPI application that registers principals,
issues bearer tokens at login and validates tokens for the other services:

- app.main: Application entrypoint that wires routes and lifecycle.
- app.accounts: Principal storage and bcrypt password hashing.
- app.validation: Token issuance and validation responses.

Design notes:
- Module import must not perform IO. The database pool (when configured)
  is opened in the lifespan startup hook.
- Use the shared/ utilities for logging, metrics, errors and tokens.
"""
