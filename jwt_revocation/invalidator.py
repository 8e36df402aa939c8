"""Token signing and verification with revocation support.

Usage::

    from jwt_revocation import JoseSigningService, TokenInvalidator

    invalidator = TokenInvalidator(JoseSigningService(), redis)

    token = await invalidator.sign({"sub": "42"}, secret, user=42, client="mobile")

    # Every token issued so far to user 42 on the mobile client
    await invalidator.invalidate({"user": 42, "client": "mobile"})

    await invalidator.verify(token, secret)  # raises InvalidatedTokenError
"""

import logging
import time
from collections.abc import Callable, Mapping
from datetime import timedelta
from typing import Any

from jwt_revocation.config import Settings, get_settings
from jwt_revocation.core.decision import DecisionEngine
from jwt_revocation.core.headers import compose_metadata, extract_metadata, issuance_instant
from jwt_revocation.core.identity import Identifier, Target, as_target
from jwt_revocation.core.registry import InvalidationRegistry
from jwt_revocation.signing import JoseSigningService, SigningService
from jwt_revocation.store import KeyValueStore

logger = logging.getLogger(__name__)


class TokenInvalidator:
    """
    Signs tokens with identity metadata and rejects revoked ones on verify.

    The store handle is owned by the caller. *clock* must be the clock
    family the signing service stamps ``iat`` with (wall-clock seconds).
    """

    def __init__(
        self,
        signer: SigningService,
        store: KeyValueStore,
        settings: Settings | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.signer = signer
        self.settings = settings or get_settings()
        self.clock = clock
        self.registry = InvalidationRegistry(store, self.settings, clock)
        self.engine = DecisionEngine(self.registry)

    @classmethod
    def from_settings(
        cls, store: KeyValueStore, settings: Settings | None = None
    ) -> "TokenInvalidator":
        """Build an invalidator signing with python-jose as configured in *settings*."""
        settings = settings or get_settings()
        return cls(JoseSigningService.from_settings(settings), store, settings)

    async def sign(
        self,
        payload: Any,
        key: str | None = None,
        *,
        user: Identifier | None = None,
        client: Identifier | None = None,
        precise: bool = False,
        headers: Mapping[str, Any] | None = None,
        algorithm: str | None = None,
        expires_in: timedelta | None = None,
    ) -> str:
        """
        Sign *payload*, tagging the token with *user* and/or *client*.

        Args:
            payload: Claim mapping, or a ``str``/``bytes`` payload.
            key: Signing secret or private key; defaults to the configured
                ``jwt_secret_key``.
            user: Identifier of the user the token is issued to.
            client: Identifier of the client the token is issued for.
            precise: Stamp a millisecond-resolution issuance instant even
                for mapping payloads, whose native ``iat`` only has
                whole-second resolution.
            headers: Extra JWS header entries.
            algorithm: Override the signing service's default algorithm.
            expires_in: Token lifetime (mapping payloads only).
        """
        metadata = compose_metadata(
            user=user, client=client, iat=issuance_instant(payload, precise, self.clock)
        )
        merged = dict(headers) if headers else {}
        if not metadata.is_empty:
            merged[self.settings.metadata_header] = metadata.to_header()

        return self.signer.sign(
            payload,
            key if key is not None else self.settings.jwt_secret_key,
            headers=merged or None,
            algorithm=algorithm,
            expires_in=expires_in,
        )

    async def invalidate(self, target: str | Mapping[str, Any] | Target) -> None:
        """
        Invalidate a token, or every token of a user, a client, or a user
        on a client, issued up to now.

        A selector with neither ``user`` nor ``client`` does nothing.
        Store failures propagate.
        """
        identity = as_target(target).identity()
        if identity is None:
            return
        instant = await self.registry.record(identity)
        logger.info("Recorded invalidation (scope=%s, at=%s)", identity.scope, instant)

    async def revert(self, target: str | Mapping[str, Any] | Target) -> bool:
        """
        Undo an invalidation made with the same target.

        Returns True if an invalidation was found and removed.
        """
        identity = as_target(target).identity()
        if identity is None:
            return False
        reverted = await self.registry.revert(identity)
        if reverted:
            logger.info("Reverted invalidation (scope=%s)", identity.scope)
        return reverted

    async def verify(
        self,
        token: str,
        key: str | None = None,
        *,
        complete: bool = False,
        algorithms: list[str] | None = None,
        audience: str | None = None,
        issuer: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> Any:
        """
        Verify *token* and check it against recorded invalidations.

        Returns the payload, or ``{"header": ..., "payload": ...}`` when
        *complete* is set.

        Raises:
            jose.exceptions.JOSEError: Bad signature or invalid claims.
            InvalidatedTokenError: The token has been revoked.
        """
        payload = self.signer.verify(
            token,
            key if key is not None else self.settings.jwt_secret_key,
            algorithms=algorithms,
            audience=audience,
            issuer=issuer,
            options=options,
        )
        header = self.signer.get_unverified_header(token)
        metadata = extract_metadata(header, self.settings.metadata_header)

        await self.engine.check(token, metadata, payload)

        if complete:
            return {"header": header, "payload": payload}
        return payload
