"""
Principal accounts: registration, password hashing, credential checks.
"""

from .store import (
    PRINCIPAL_COLUMNS,
    PRINCIPAL_TABLE,
    Principal,
    PrincipalStore,
    RegistrationRequest,
)

__all__ = [
    "PRINCIPAL_COLUMNS",
    "PRINCIPAL_TABLE",
    "Principal",
    "PrincipalStore",
    "RegistrationRequest",
]
