"""Signing service backed by python-jose.

The revocation layer never touches signatures itself; it talks to a
:class:`SigningService`. :class:`JoseSigningService` is the default one:

* mapping payloads are JWT claim sets, handled by ``jose.jwt``. They get a
  whole-second ``iat`` claim when the caller did not set one.
* ``str`` / ``bytes`` payloads are signed as raw JWS content via
  ``jose.jws`` with a ``cty`` header of ``text/plain``, and verify back
  to ``str`` without claim validation, even when they look like JSON.

Verification failures raise ``jose`` exceptions unchanged.
"""

import json
import time
from collections.abc import Callable, Mapping
from datetime import timedelta
from typing import Any, Protocol

from jose import jws, jwt

from jwt_revocation.config import Settings

# Content type marking tokens whose payload is raw content, not a claim set
RAW_CONTENT_TYPE = "text/plain"


class SigningService(Protocol):
    """Interface for the token signing library."""

    def sign(
        self,
        payload: Any,
        key: str,
        *,
        headers: Mapping[str, Any] | None = None,
        algorithm: str | None = None,
        expires_in: timedelta | None = None,
    ) -> str: ...

    def verify(
        self,
        token: str,
        key: str,
        *,
        algorithms: list[str] | None = None,
        audience: str | None = None,
        issuer: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> Any: ...

    def get_unverified_header(self, token: str) -> dict[str, Any]: ...


class JoseSigningService:
    """:class:`SigningService` implementation using python-jose."""

    def __init__(self, algorithm: str = "HS256", clock: Callable[[], float] = time.time):
        self.algorithm = algorithm
        self.clock = clock

    @classmethod
    def from_settings(cls, settings: Settings) -> "JoseSigningService":
        return cls(algorithm=settings.jwt_algorithm)

    def sign(
        self,
        payload: Any,
        key: str,
        *,
        headers: Mapping[str, Any] | None = None,
        algorithm: str | None = None,
        expires_in: timedelta | None = None,
    ) -> str:
        """Sign *payload* and return the compact serialization."""
        algorithm = algorithm or self.algorithm
        extra_headers = dict(headers) if headers else None

        if isinstance(payload, Mapping):
            claims = dict(payload)
            now = int(self.clock())
            claims.setdefault("iat", now)
            if expires_in is not None:
                claims["exp"] = now + int(expires_in.total_seconds())
            return jwt.encode(claims, key, algorithm=algorithm, headers=extra_headers)

        if expires_in is not None:
            raise ValueError("expires_in is only supported for mapping payloads")
        if isinstance(payload, str):
            payload = payload.encode("utf-8")
        raw_headers = {**(extra_headers or {}), "cty": RAW_CONTENT_TYPE}
        return jws.sign(payload, key, headers=raw_headers, algorithm=algorithm)

    def verify(
        self,
        token: str,
        key: str,
        *,
        algorithms: list[str] | None = None,
        audience: str | None = None,
        issuer: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> Any:
        """Verify *token* and return its payload.

        Raises ``jose.exceptions.JWSError`` for a bad signature and
        ``jose.exceptions.JWTError`` subclasses for invalid claims.
        """
        algorithms = algorithms or [self.algorithm]
        raw = jws.verify(token, key, algorithms)
        if jws.get_unverified_header(token).get("cty") == RAW_CONTENT_TYPE:
            return raw.decode("utf-8")

        try:
            content = json.loads(raw)
        except ValueError:
            content = None

        if isinstance(content, Mapping):
            # Claim sets get exp/nbf/iat/aud/iss validation on top of the signature
            return jwt.decode(
                token,
                key,
                algorithms=algorithms,
                audience=audience,
                issuer=issuer,
                options=options,
            )
        return raw.decode("utf-8")

    def get_unverified_header(self, token: str) -> dict[str, Any]:
        return jwt.get_unverified_header(token)
