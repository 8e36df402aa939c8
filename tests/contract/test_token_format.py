"""Contract tests for the token and store formats.

Other services read the metadata header and the invalidation keys
directly (e.g. a gateway that only verifies), so both formats are
pinned here:

- Metadata header: ``{"user": ..., "client": ..., "iat": ...}`` under the
  configured header name, absent fields omitted
- Store keys: raw token / ``user::`` / ``client::`` / ``user::..::client::..``
- Store values: decimal seconds with three fractional digits
"""

import pytest
from jose import jwt

from jwt_revocation import InvalidatedTokenError, InvalidationScope
from tests.helpers.token_factory import create_foreign_token

SECRET = "SECRET"


# ---------------------------------------------------------------------------
# Contract: metadata header
# ---------------------------------------------------------------------------


class TestMetadataHeader:
    async def test_string_payload_header(self, invalidator, settings, clock):
        token = await invalidator.sign("PAYLOAD", SECRET, user=1, client="web")
        header = jwt.get_unverified_header(token)

        assert header["alg"] == "HS256"
        assert header[settings.metadata_header] == {
            "user": 1,
            "client": "web",
            "iat": clock.now,
        }

    async def test_mapping_payload_uses_native_iat(self, invalidator, settings):
        token = await invalidator.sign({"sub": "42"}, SECRET, user=1)
        header = jwt.get_unverified_header(token)

        assert header[settings.metadata_header] == {"user": 1}
        assert jwt.get_unverified_claims(token)["iat"] == 1700000000

    async def test_precise_mapping_payload_is_stamped(self, invalidator, settings, clock):
        token = await invalidator.sign({"sub": "42"}, SECRET, precise=True)
        header = jwt.get_unverified_header(token)

        assert header[settings.metadata_header] == {"iat": clock.now}

    async def test_plain_mapping_token_has_no_metadata(self, invalidator, settings):
        token = await invalidator.sign({"sub": "42"}, SECRET)
        assert settings.metadata_header not in jwt.get_unverified_header(token)

    async def test_caller_headers_are_merged(self, invalidator, settings):
        token = await invalidator.sign("PAYLOAD", SECRET, client="web", headers={"kid": "k1"})
        header = jwt.get_unverified_header(token)

        assert header["kid"] == "k1"
        assert header[settings.metadata_header]["client"] == "web"


# ---------------------------------------------------------------------------
# Contract: store keys and values
# ---------------------------------------------------------------------------


class TestStoreFormat:
    @pytest.mark.parametrize(
        "target, key",
        [
            ({"user": 1}, "user::1"),
            ({"client": "web"}, "client::web"),
            ({"user": 1, "client": "web"}, "user::1::client::web"),
            ({"user": {"b": 2, "a": 1}}, 'user::{"a":1,"b":2}'),
        ],
    )
    async def test_scope_keys(self, invalidator, redis_client, target, key):
        await invalidator.invalidate(target)
        assert await redis_client.keys("*") == [key]

    async def test_token_key_and_value(self, invalidator, redis_client, clock):
        token = await invalidator.sign("PAYLOAD", SECRET)
        await invalidator.invalidate(token)

        assert await redis_client.get(token) == "1700000000.250"

    async def test_records_written_by_other_services_are_honoured(
        self, invalidator, redis_client, clock
    ):
        token = await invalidator.sign("PAYLOAD", SECRET, user="alice")
        await redis_client.set("user::alice", f"{clock.now + 5:.3f}")

        with pytest.raises(InvalidatedTokenError) as exc_info:
            await invalidator.verify(token, SECRET)
        assert exc_info.value.scope == InvalidationScope.USER


# ---------------------------------------------------------------------------
# Contract: tokens issued outside the revocation layer
# ---------------------------------------------------------------------------


class TestForeignTokens:
    async def test_foreign_token_verifies(self, invalidator):
        token = create_foreign_token(SECRET, user_id="user-7", issued_at=1700000000)
        payload = await invalidator.verify(token, SECRET)
        assert payload["sub"] == "user-7"

    async def test_foreign_token_revoked_by_token_scope(self, invalidator, clock):
        token = create_foreign_token(SECRET, issued_at=1700000000)
        await invalidator.invalidate(token)

        with pytest.raises(InvalidatedTokenError) as exc_info:
            await invalidator.verify(token, SECRET)
        assert exc_info.value.scope == InvalidationScope.TOKEN

    async def test_foreign_token_without_iat_revoked_by_any_record(self, invalidator):
        token = create_foreign_token(SECRET)
        await invalidator.invalidate(token)

        with pytest.raises(InvalidatedTokenError):
            await invalidator.verify(token, SECRET)

    async def test_foreign_token_ignores_user_scope(self, invalidator, clock):
        token = create_foreign_token(SECRET, user_id="user-7", issued_at=1700000000)
        clock.advance(1)
        await invalidator.invalidate({"user": "user-7"})

        assert (await invalidator.verify(token, SECRET))["sub"] == "user-7"
