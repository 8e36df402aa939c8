"""Shared test fixtures for jwt-revocation."""

import os

# Set test JWT secret before any package imports trigger Settings() validation.
os.environ.setdefault("REVOCATION_JWT_SECRET_KEY", "test-secret-for-unit-tests-0123456789")

from collections.abc import AsyncGenerator  # noqa: E402

import fakeredis.aioredis  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from jwt_revocation.config import Settings  # noqa: E402
from jwt_revocation.invalidator import TokenInvalidator  # noqa: E402
from jwt_revocation.signing import JoseSigningService  # noqa: E402
from tests.helpers.clock import FakeClock  # noqa: E402

# ---------------------------------------------------------------------------
# Fake Redis (drop-in async replacement)
# ---------------------------------------------------------------------------


def _make_fake_redis():
    """Create a fakeredis instance that behaves like redis.asyncio.Redis."""
    return fakeredis.aioredis.FakeRedis(decode_responses=True)


@pytest_asyncio.fixture()
async def redis_client() -> AsyncGenerator[fakeredis.aioredis.FakeRedis, None]:
    """Provide a fake Redis client."""
    client = _make_fake_redis()
    yield client
    await client.aclose()


# ---------------------------------------------------------------------------
# Settings / clock
# ---------------------------------------------------------------------------


@pytest.fixture()
def settings() -> Settings:
    return Settings(jwt_secret_key="test-secret-for-unit-tests-0123456789")


@pytest.fixture()
def clock() -> FakeClock:
    """Controllable wall clock shared by the signer and the registry."""
    return FakeClock(1_700_000_000.25)


# ---------------------------------------------------------------------------
# Invalidator wired to fake Redis
# ---------------------------------------------------------------------------


@pytest.fixture()
def invalidator(redis_client, settings, clock) -> TokenInvalidator:
    signer = JoseSigningService(algorithm=settings.jwt_algorithm, clock=clock)
    return TokenInvalidator(signer, redis_client, settings, clock=clock)
