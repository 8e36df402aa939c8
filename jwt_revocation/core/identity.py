"""Identities that invalidations are recorded against.

An identity selects one of four scopes: a single token, every token of a
user, every token of a client, or every token of a user on a client.
User and client identifiers may be primitives or structured values; they
are reduced to a canonical string before being used in a store key so
that two equal objects always address the same record.
"""

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, ClassVar

from pydantic import BaseModel

from jwt_revocation.constants import InvalidationScope
from jwt_revocation.errors import InvalidTargetError

Identifier = str | int | float | bool | Mapping[str, Any] | Sequence[Any] | BaseModel


def to_jsonable(value: Any) -> Any:
    """Convert an identifier to plain JSON-compatible data."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Mapping):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        return [to_jsonable(v) for v in value]
    raise InvalidTargetError(f"Unsupported identifier type: {type(value).__name__}")


def canonicalize(identifier: Identifier) -> str:
    """Return the canonical string form of *identifier*.

    Strings are used as-is. Everything else is serialized as compact JSON
    with sorted keys, so ``{"a": 1, "b": 2}`` and ``{"b": 2, "a": 1}``
    canonicalize identically and ``1`` becomes ``"1"``. Integral floats
    are written as integers, so ``1.0`` and ``1`` address the same record.
    """
    if isinstance(identifier, str):
        return identifier
    return json.dumps(to_jsonable(identifier), sort_keys=True, separators=(",", ":"))


@dataclass(frozen=True)
class TokenIdentity:
    token: str

    scope: ClassVar[InvalidationScope] = InvalidationScope.TOKEN


@dataclass(frozen=True)
class UserIdentity:
    user: Identifier

    scope: ClassVar[InvalidationScope] = InvalidationScope.USER


@dataclass(frozen=True)
class ClientIdentity:
    client: Identifier

    scope: ClassVar[InvalidationScope] = InvalidationScope.CLIENT


@dataclass(frozen=True)
class UserClientIdentity:
    user: Identifier
    client: Identifier

    scope: ClassVar[InvalidationScope] = InvalidationScope.USER_CLIENT


Identity = TokenIdentity | UserIdentity | ClientIdentity | UserClientIdentity


# ---------------------------------------------------------------------------
# Invalidation targets: what callers pass to invalidate() / revert()
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ByToken:
    """Target a single token."""

    token: str

    def identity(self) -> Identity:
        return TokenIdentity(self.token)


@dataclass(frozen=True)
class ByScope:
    """Target every token issued for a user, a client, or both."""

    user: Identifier | None = None
    client: Identifier | None = None

    def identity(self) -> Identity | None:
        """Most specific identity for the given selectors, or ``None`` if empty."""
        if self.user is not None and self.client is not None:
            return UserClientIdentity(self.user, self.client)
        if self.user is not None:
            return UserIdentity(self.user)
        if self.client is not None:
            return ClientIdentity(self.client)
        return None


Target = ByToken | ByScope


def as_target(value: str | Mapping[str, Any] | Target) -> Target:
    """Resolve a raw token string or ``{"user", "client"}`` mapping into a target."""
    if isinstance(value, (ByToken, ByScope)):
        return value
    if isinstance(value, str):
        return ByToken(value)
    if isinstance(value, Mapping):
        unknown = set(value) - {"user", "client"}
        if unknown:
            raise InvalidTargetError(f"Unknown target fields: {', '.join(sorted(unknown))}")
        return ByScope(user=value.get("user"), client=value.get("client"))
    raise InvalidTargetError(
        f"Target must be a token string or a user/client mapping, got {type(value).__name__}"
    )
