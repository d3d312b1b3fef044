"""Unit tests for JWTAuthProvider.

Covers claim extraction, the JWKS cache and the ES256 validation path.
"""

from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import httpx
import pytest
from jose import jwt as jose_jwt

from infrastructure.auth import jwt_provider as jwt_provider_module
from infrastructure.auth.jwt_provider import JWTAuthProvider, _get_jwks_keys, reset_jwks_cache
from infrastructure.auth.provider import TokenUser

JWKS_URL = "https://example.supabase.co/auth/v1/.well-known/jwks.json"

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_hs256_token(payload: dict, secret: str = "test-secret") -> str:
    """Create an HS256-signed JWT with a given payload."""
    return jose_jwt.encode(payload, secret, algorithm="HS256")


def _mock_jwks_client(payload: dict | None = None, error: Exception | None = None) -> AsyncMock:
    response = MagicMock()
    response.json.return_value = payload or {"keys": []}
    response.raise_for_status = MagicMock()

    client = AsyncMock()
    if error is not None:
        client.get.side_effect = error
    else:
        client.get.return_value = response
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    return client


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clear_jwks_cache():
    """Reset the module-level JWKS cache around every test."""
    reset_jwks_cache()
    yield
    reset_jwks_cache()


@pytest.fixture
def hs256_provider() -> JWTAuthProvider:
    return JWTAuthProvider(secret_key="test-secret", algorithm="HS256", expire_minutes=30)


# ---------------------------------------------------------------------------
# Tests: claims
# ---------------------------------------------------------------------------


class TestValidateTokenClaims:
    async def test_round_trips_created_token(self, hs256_provider: JWTAuthProvider):
        user = TokenUser(id=uuid4(), email="u@example.com", display_name="U", email_verified=True)

        result = await hs256_provider.validate_token(hs256_provider.create_token(user))

        assert result is not None
        assert result.id == user.id
        assert result.display_name == "U"
        assert result.role == "authenticated"
        assert result.email_verified is True

    @pytest.mark.parametrize(
        "payload",
        [
            {"email": "user@example.com"},
            {"sub": str(uuid4())},
            {"sub": "", "email": "user@example.com"},
            {"sub": str(uuid4()), "email": ""},
            {"sub": "not-a-uuid", "email": "user@example.com"},
        ],
    )
    async def test_should_return_none_for_incomplete_claims(
        self, hs256_provider: JWTAuthProvider, payload: dict
    ):
        token = _make_hs256_token({**payload, "exp": 9999999999})

        assert await hs256_provider.validate_token(token) is None

    async def test_email_confirmed_at_marks_verified(self, hs256_provider: JWTAuthProvider):
        token = _make_hs256_token(
            {
                "sub": str(uuid4()),
                "email": "user@example.com",
                "email_confirmed_at": "2026-01-01T00:00:00Z",
                "exp": 9999999999,
            }
        )

        result = await hs256_provider.validate_token(token)

        assert result is not None
        assert result.email_verified is True

    async def test_unverified_by_default(self, hs256_provider: JWTAuthProvider):
        token = _make_hs256_token(
            {"sub": str(uuid4()), "email": "user@example.com", "exp": 9999999999}
        )

        result = await hs256_provider.validate_token(token)

        assert result is not None
        assert result.email_verified is False
        assert result.display_name is None

    async def test_garbage_token(self, hs256_provider: JWTAuthProvider):
        assert await hs256_provider.validate_token("not-a-jwt") is None


# ---------------------------------------------------------------------------
# Tests: _get_jwks_keys
# ---------------------------------------------------------------------------


class TestGetJwksKeys:
    async def test_should_return_empty_dict_when_no_jwks_url(self):
        with patch.object(jwt_provider_module, "settings") as mock_settings:
            mock_settings.supabase_jwks_url = ""

            assert await _get_jwks_keys() == {}

    async def test_should_fetch_and_cache_keys_without_kid_skipped(self):
        client = _mock_jwks_client(
            {
                "keys": [
                    {"kty": "EC", "crv": "P-256"},
                    {"kid": "key-1", "kty": "EC", "crv": "P-256"},
                ]
            }
        )

        with (
            patch.object(jwt_provider_module, "settings") as mock_settings,
            patch.object(jwt_provider_module.httpx, "AsyncClient", return_value=client),
        ):
            mock_settings.supabase_jwks_url = JWKS_URL

            result = await _get_jwks_keys()
            assert list(result) == ["key-1"]

            client.get.reset_mock()
            assert await _get_jwks_keys() == result
            client.get.assert_not_called()

    async def test_refresh_bypasses_cache(self):
        client = _mock_jwks_client({"keys": [{"kid": "k", "kty": "EC"}]})

        with (
            patch.object(jwt_provider_module, "settings") as mock_settings,
            patch.object(jwt_provider_module.httpx, "AsyncClient", return_value=client),
        ):
            mock_settings.supabase_jwks_url = JWKS_URL

            await _get_jwks_keys()
            await _get_jwks_keys(refresh=True)

            assert client.get.call_count == 2

    async def test_should_return_empty_dict_on_http_error(self):
        client = _mock_jwks_client(error=httpx.ConnectError("Connection refused"))

        with (
            patch.object(jwt_provider_module, "settings") as mock_settings,
            patch.object(jwt_provider_module.httpx, "AsyncClient", return_value=client),
        ):
            mock_settings.supabase_jwks_url = JWKS_URL

            assert await _get_jwks_keys() == {}


# ---------------------------------------------------------------------------
# Tests: _validate_es256
# ---------------------------------------------------------------------------


class TestValidateEs256:
    async def test_should_return_none_when_header_has_no_kid(
        self, hs256_provider: JWTAuthProvider
    ):
        result = await hs256_provider._validate_es256("dummy.token.value", {"alg": "ES256"})

        assert result is None

    async def test_unknown_kid_refetches_once(self, hs256_provider: JWTAuthProvider):
        with patch.object(
            jwt_provider_module, "_get_jwks_keys", new_callable=AsyncMock
        ) as mock_get_jwks:
            mock_get_jwks.return_value = {"other-kid": {"kty": "EC"}}

            result = await hs256_provider._validate_es256(
                "dummy.token.value", {"alg": "ES256", "kid": "missing-kid"}
            )

        assert result is None
        assert mock_get_jwks.call_count == 2
        assert mock_get_jwks.call_args.kwargs == {"refresh": True}

    async def test_should_decode_token_when_kid_found(self, hs256_provider: JWTAuthProvider):
        key_data = {"kid": "test-kid", "kty": "EC", "crv": "P-256"}
        payload = {"sub": str(uuid4()), "email": "test@example.com"}

        with (
            patch.object(
                jwt_provider_module, "_get_jwks_keys", new_callable=AsyncMock
            ) as mock_get_jwks,
            patch.object(jwt_provider_module, "ECKey") as mock_eckey_cls,
            patch.object(jwt_provider_module, "jwt") as mock_jwt,
        ):
            mock_get_jwks.return_value = {"test-kid": key_data}
            mock_jwt.decode.return_value = payload

            result = await hs256_provider._validate_es256(
                "es256.token.value", {"alg": "ES256", "kid": "test-kid"}
            )

        assert result == payload
        mock_eckey_cls.assert_called_once_with(key_data, algorithm="ES256")
        mock_jwt.decode.assert_called_once_with(
            "es256.token.value",
            mock_eckey_cls.return_value,
            algorithms=["ES256"],
            options={"verify_aud": False},
        )

    async def test_rotated_key_found_after_refetch(self, hs256_provider: JWTAuthProvider):
        key_data = {"kid": "rotated-kid", "kty": "EC", "crv": "P-256"}
        payload = {"sub": str(uuid4()), "email": "rotated@example.com"}

        async def jwks(refresh: bool = False) -> dict:
            return {"rotated-kid": key_data} if refresh else {}

        with (
            patch.object(jwt_provider_module, "_get_jwks_keys", side_effect=jwks),
            patch.object(jwt_provider_module, "ECKey"),
            patch.object(jwt_provider_module, "jwt") as mock_jwt,
        ):
            mock_jwt.decode.return_value = payload

            result = await hs256_provider._validate_es256(
                "rotated.token.value", {"alg": "ES256", "kid": "rotated-kid"}
            )

        assert result == payload


# ---------------------------------------------------------------------------
# Tests: validate_token ES256 delegation
# ---------------------------------------------------------------------------


class TestValidateTokenEs256Path:
    async def test_should_delegate_to_validate_es256(self, hs256_provider: JWTAuthProvider):
        user_id = str(uuid4())
        payload = {
            "sub": user_id,
            "email": "es256user@example.com",
            "user_metadata": {"full_name": "ES256 User"},
            "role": "authenticated",
        }

        with patch.object(jwt_provider_module, "jwt") as mock_jwt:
            mock_jwt.get_unverified_header.return_value = {"alg": "ES256", "kid": "k1"}

            with patch.object(
                hs256_provider, "_validate_es256", new_callable=AsyncMock
            ) as mock_es256:
                mock_es256.return_value = payload

                result = await hs256_provider.validate_token("es256.token.here")

        mock_es256.assert_called_once_with("es256.token.here", {"alg": "ES256", "kid": "k1"})
        assert result is not None
        assert result.display_name == "ES256 User"
        assert str(result.id) == user_id

    async def test_should_return_none_when_es256_validation_fails(
        self, hs256_provider: JWTAuthProvider
    ):
        with patch.object(jwt_provider_module, "jwt") as mock_jwt:
            mock_jwt.get_unverified_header.return_value = {"alg": "ES256", "kid": "k1"}

            with patch.object(
                hs256_provider, "_validate_es256", new_callable=AsyncMock
            ) as mock_es256:
                mock_es256.return_value = None

                assert await hs256_provider.validate_token("es256.token.here") is None
