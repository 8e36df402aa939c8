"""Invalidation registry, token metadata and revocation decisions."""
from jwt_revocation.core.decision import DecisionEngine
from jwt_revocation.core.headers import TokenMetadata, compose_metadata, extract_metadata
from jwt_revocation.core.identity import (
    ByScope,
    ByToken,
    ClientIdentity,
    TokenIdentity,
    UserClientIdentity,
    UserIdentity,
    as_target,
    canonicalize,
)
from jwt_revocation.core.registry import InvalidationRegistry

__all__ = [
    "ByScope",
    "ByToken",
    "ClientIdentity",
    "DecisionEngine",
    "InvalidationRegistry",
    "TokenIdentity",
    "TokenMetadata",
    "UserClientIdentity",
    "UserIdentity",
    "as_target",
    "canonicalize",
    "compose_metadata",
    "extract_metadata",
]
