"""Revocation for signed JWTs: invalidate by token, user, client or user+client."""
from jwt_revocation.config import Settings, get_settings
from jwt_revocation.constants import InvalidationScope
from jwt_revocation.core.identity import ByScope, ByToken
from jwt_revocation.errors import InvalidatedTokenError, InvalidTargetError, RevocationError
from jwt_revocation.invalidator import TokenInvalidator
from jwt_revocation.signing import JoseSigningService, SigningService
from jwt_revocation.store import KeyValueStore, create_redis
from jwt_revocation.utils.logging import configure_logging, setup_logging

__all__ = [
    "ByScope",
    "ByToken",
    "InvalidTargetError",
    "InvalidatedTokenError",
    "InvalidationScope",
    "JoseSigningService",
    "KeyValueStore",
    "RevocationError",
    "Settings",
    "SigningService",
    "TokenInvalidator",
    "configure_logging",
    "create_redis",
    "get_settings",
    "setup_logging",
]
