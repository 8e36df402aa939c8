"""Verification-time revocation decision.

Runs after the signature has been verified. The issuance instant of the
token is compared with the invalidation instants of the scopes it belongs
to, most specific first:

    user-client -> user -> client -> token

An invalidation only takes effect when it is strictly later than the
issuance instant; equal instants leave the token valid.
"""

import logging
from collections.abc import Mapping
from typing import Any

from jwt_revocation.core.headers import TokenMetadata, is_instant
from jwt_revocation.core.identity import (
    ClientIdentity,
    Identity,
    TokenIdentity,
    UserClientIdentity,
    UserIdentity,
)
from jwt_revocation.core.registry import InvalidationRegistry
from jwt_revocation.errors import InvalidatedTokenError

logger = logging.getLogger(__name__)


def native_issued_at(payload: Any) -> Any:
    """The signing service's own ``iat`` claim, if the payload has one."""
    if isinstance(payload, Mapping):
        return payload.get("iat")
    return None


def applicable_identities(token: str, metadata: TokenMetadata) -> list[Identity]:
    """Identities a token with *metadata* belongs to, most specific first."""
    identities: list[Identity] = []
    if metadata.user is not None and metadata.client is not None:
        identities.append(UserClientIdentity(metadata.user, metadata.client))
    if metadata.user is not None:
        identities.append(UserIdentity(metadata.user))
    if metadata.client is not None:
        identities.append(ClientIdentity(metadata.client))
    identities.append(TokenIdentity(token))
    return identities


class DecisionEngine:
    """Decides whether a verified token has been revoked."""

    def __init__(self, registry: InvalidationRegistry):
        self.registry = registry

    async def check(self, token: str, metadata: TokenMetadata | None, payload: Any) -> None:
        """
        Raise :class:`InvalidatedTokenError` if *token* has been revoked.

        Args:
            token: The compact token string.
            metadata: Metadata extracted from the token header, or ``None``
                for tokens issued without it.
            payload: The verified payload, used for its native ``iat``.
        """
        if metadata is None:
            await self._check_unstamped(token, native_issued_at(payload))
            return

        issued_at = metadata.iat if metadata.iat is not None else native_issued_at(payload)
        if not is_instant(issued_at):
            logger.warning(
                "Token metadata has no numeric issuance instant; skipping revocation checks"
            )
            return

        for identity in applicable_identities(token, metadata):
            invalidated_at = await self.registry.lookup(identity)
            if invalidated_at is not None and invalidated_at > issued_at:
                raise InvalidatedTokenError(identity.scope, invalidated_at)
        logger.debug("Token passed revocation checks (issued_at=%s)", issued_at)

    async def _check_unstamped(self, token: str, issued_at: Any) -> None:
        """Token-scope check for tokens that carry no metadata."""
        identity = TokenIdentity(token)
        invalidated_at = await self.registry.lookup(identity)
        if invalidated_at is None:
            return
        # Without a comparable instant any record is enough
        if not is_instant(issued_at) or invalidated_at > issued_at:
            raise InvalidatedTokenError(identity.scope, invalidated_at)
