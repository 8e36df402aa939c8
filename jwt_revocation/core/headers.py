"""Token metadata carried in the JWS header.

Tokens signed through :class:`~jwt_revocation.invalidator.TokenInvalidator`
get an extra header entry holding the user, the client and, when stamped,
a millisecond-resolution issuance instant. The entry lives in the header
rather than in the claims so that any payload type can carry it.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from jwt_revocation.constants import INSTANT_PRECISION
from jwt_revocation.core.identity import Identifier, to_jsonable


def now_instant(clock: Callable[[], float]) -> float:
    """Current time in seconds since the epoch, truncated to milliseconds."""
    scale = 10**INSTANT_PRECISION
    return int(clock() * scale) / scale


def is_instant(value: Any) -> bool:
    """Whether *value* is usable as a numeric instant."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True)
class TokenMetadata:
    """Auxiliary identity metadata of a token."""

    user: Identifier | None = None
    client: Identifier | None = None
    iat: float | None = None

    @property
    def is_empty(self) -> bool:
        return self.user is None and self.client is None and self.iat is None

    def to_header(self) -> dict[str, Any]:
        """Header entry value; absent fields are left out entirely."""
        entry: dict[str, Any] = {}
        if self.user is not None:
            entry["user"] = to_jsonable(self.user)
        if self.client is not None:
            entry["client"] = to_jsonable(self.client)
        if self.iat is not None:
            entry["iat"] = self.iat
        return entry


def compose_metadata(
    user: Identifier | None = None,
    client: Identifier | None = None,
    iat: float | None = None,
) -> TokenMetadata:
    return TokenMetadata(user=user, client=client, iat=iat)


def extract_metadata(header: Mapping[str, Any], header_name: str) -> TokenMetadata | None:
    """Read the metadata entry from an unverified JWS header.

    Returns ``None`` when the token was issued without metadata.
    """
    entry = header.get(header_name)
    if not isinstance(entry, Mapping):
        return None
    return TokenMetadata(
        user=entry.get("user"),
        client=entry.get("client"),
        iat=entry.get("iat"),
    )


def issuance_instant(
    payload: Any, precise: bool, clock: Callable[[], float]
) -> float | None:
    """Decide whether to stamp a sub-second issuance instant at sign time.

    Mapping payloads get a whole-second ``iat`` claim from the signing
    service, so they are only stamped in precise mode. Other payloads
    carry no claims at all and are always stamped.
    """
    if precise or not isinstance(payload, Mapping):
        return now_instant(clock)
    return None
