"""Security utilities - access tokens and caller identity.

Re-exports all security-related names for convenience.
"""

from src.portfolio.core.security.caller import Caller
from src.portfolio.core.security.crypto import (
    ACCESS_TOKEN_TYPE,
    create_access_token,
    decode_token,
)

__all__ = [
    "ACCESS_TOKEN_TYPE",
    "Caller",
    "create_access_token",
    "decode_token",
]
