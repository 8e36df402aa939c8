"""Exceptions raised by the revocation layer.

Signature and claim failures are never wrapped: they surface as the
``jose.exceptions.JOSEError`` subclasses raised by the signing service.
"""

from jwt_revocation.constants import InvalidationScope


class RevocationError(Exception):
    """Base class for errors raised by this package."""


class InvalidatedTokenError(RevocationError):
    """A signature-valid token was revoked by an invalidation record."""

    def __init__(self, scope: InvalidationScope, invalidated_at: float):
        self.scope = InvalidationScope(scope)
        self.invalidated_at = invalidated_at
        super().__init__(f"Token was invalidated (scope={self.scope})")


class InvalidTargetError(RevocationError, ValueError):
    """An invalidation target is neither a token nor a user/client selector."""
