"""Store-backed registry of invalidation records.

One record per identity maps its canonical key to the instant it was
invalidated. Key format:

* token:        ``{token}``
* user:         ``user::{user}``
* client:       ``client::{client}``
* user-client:  ``user::{user}::client::{client}``

Values are decimal strings with millisecond precision
(e.g. ``"1718031234.567"``). No TTL is set; retention is left to the store.
"""

import logging
import time
from collections.abc import Callable

from jwt_revocation.config import Settings, get_settings
from jwt_revocation.constants import INSTANT_PRECISION
from jwt_revocation.core.headers import now_instant
from jwt_revocation.core.identity import (
    ClientIdentity,
    Identity,
    TokenIdentity,
    UserClientIdentity,
    UserIdentity,
    canonicalize,
)
from jwt_revocation.store import KeyValueStore

logger = logging.getLogger(__name__)


class InvalidationRegistry:
    """
    Records, looks up and removes invalidations.

    Writes propagate store failures to the caller: a revocation that did
    not persist must never look like it succeeded. Lookups fail open and
    report "no record" when the store or the stored value is unusable.
    """

    def __init__(
        self,
        store: KeyValueStore,
        settings: Settings | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.settings = settings or get_settings()
        self.clock = clock

    def _make_key(self, identity: Identity) -> str:
        """Create the store key for *identity*."""
        user_prefix = self.settings.user_key_prefix
        client_prefix = self.settings.client_key_prefix
        match identity:
            case TokenIdentity(token=token):
                return token
            case UserIdentity(user=user):
                return f"{user_prefix}{canonicalize(user)}"
            case ClientIdentity(client=client):
                return f"{client_prefix}{canonicalize(client)}"
            case UserClientIdentity(user=user, client=client):
                return f"{user_prefix}{canonicalize(user)}::{client_prefix}{canonicalize(client)}"
        raise TypeError(f"Unsupported identity: {identity!r}")

    async def record(self, identity: Identity) -> float:
        """
        Invalidate *identity* as of now, overwriting any earlier record.

        Returns:
            The invalidation instant that was written.
        """
        instant = now_instant(self.clock)
        await self.store.set(self._make_key(identity), f"{instant:.{INSTANT_PRECISION}f}")
        return instant

    async def _read(self, identity: Identity) -> float | None:
        """Read and parse the record for *identity*; store and parse errors propagate."""
        value = await self.store.get(self._make_key(identity))
        if value is None:
            return None
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return float(value)

    async def lookup(self, identity: Identity) -> float | None:
        """Return the invalidation instant for *identity*, or ``None``."""
        try:
            return await self._read(identity)
        except Exception as e:
            logger.warning(
                "Invalidation lookup failed (scope=%s), treating as not invalidated: %s",
                identity.scope,
                e,
            )
            return None

    async def remove(self, identity: Identity) -> None:
        """Delete the record for *identity*; a missing record is not an error."""
        await self.store.delete(self._make_key(identity))

    async def revert(self, identity: Identity) -> bool:
        """
        Undo the invalidation of *identity*.

        Returns True if a record existed and was removed, False otherwise
        (the store is left untouched in that case). Store failures
        propagate, on the read as well as the delete.
        """
        if await self._read(identity) is None:
            return False
        await self.remove(identity)
        return True
