"""Unit tests for JWTAuthProvider.

Covers HS256 round trips, claim mapping into ActorSession (including the
admin capability), and the ES256/JWKS path against a mocked JWKS endpoint.
"""

from datetime import datetime, timedelta
from typing import Any
from uuid import uuid4

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from jose import jwt as jose_jwt
from jose.backends import ECKey

from domain.entities.session import ActorRole, ActorSession
from infrastructure.auth import jwt_provider as jwt_provider_module
from infrastructure.auth.jwt_provider import JWTAuthProvider, _get_jwks_keys

JWKS_URL = "https://example.supabase.co/auth/v1/.well-known/jwks.json"

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_hs256_token(payload: dict, secret: str = "test-secret") -> str:
    """Create an HS256-signed JWT with a given payload."""
    return jose_jwt.encode(payload, secret, algorithm="HS256")


def _claims(**overrides: Any) -> dict[str, Any]:
    claims: dict[str, Any] = {
        "sub": str(uuid4()),
        "email": "user@example.com",
        "exp": datetime.utcnow() + timedelta(minutes=5),
    }
    claims.update(overrides)
    return claims


def _es256_keypair(kid: str) -> tuple[str, dict[str, Any]]:
    """Return (private PEM, public JWK) for a fresh P-256 key."""
    private = ec.generate_private_key(ec.SECP256R1())
    pem = private.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()
    jwk = ECKey(pem, algorithm="ES256").public_key().to_dict()
    jwk["kid"] = kid
    return pem, jwk


def _jwks_transport(keys: list[dict[str, Any]], calls: list[str]) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        return httpx.Response(200, json={"keys": keys})

    return httpx.MockTransport(handler)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clear_jwks_cache():
    """Reset the module-level JWKS cache before and after every test."""
    jwt_provider_module._jwks_cache = None
    yield
    jwt_provider_module._jwks_cache = None


@pytest.fixture
def hs256_provider() -> JWTAuthProvider:
    """JWTAuthProvider configured for HS256 (local/test tokens)."""
    return JWTAuthProvider(
        secret_key="test-secret",
        algorithm="HS256",
        expire_minutes=30,
        admin_emails=["boss@example.com"],
    )


@pytest.fixture
def mock_jwks(monkeypatch: pytest.MonkeyPatch):
    """Route JWKS fetches to an in-memory transport. Yields (keys, calls)."""
    keys: list[dict[str, Any]] = []
    calls: list[str] = []
    real_client = httpx.AsyncClient

    monkeypatch.setattr(
        jwt_provider_module.settings, "supabase_url", "https://example.supabase.co"
    )
    monkeypatch.setattr(
        jwt_provider_module.httpx,
        "AsyncClient",
        lambda **kw: real_client(transport=_jwks_transport(keys, calls)),
    )
    yield keys, calls


# ---------------------------------------------------------------------------
# Tests: HS256 round trip and claim mapping
# ---------------------------------------------------------------------------


class TestCreateAndValidate:
    async def test_round_trip_preserves_session_fields(self, hs256_provider: JWTAuthProvider):
        session = ActorSession(user_id=uuid4(), email="marc@example.com", display_name="Marc")

        token = hs256_provider.create_token(session)
        result = await hs256_provider.validate_token(token)

        assert result is not None
        assert result.user_id == session.user_id
        assert result.email == "marc@example.com"
        assert result.display_name == "Marc"
        assert result.role == ActorRole.USER
        assert result.access_token == token

    async def test_admin_role_survives_round_trip(self, hs256_provider: JWTAuthProvider):
        session = ActorSession(user_id=uuid4(), email="ops@example.com", role=ActorRole.ADMIN)

        result = await hs256_provider.validate_token(hs256_provider.create_token(session))

        assert result is not None
        assert result.is_admin

    async def test_expired_token_is_rejected(self):
        provider = JWTAuthProvider(secret_key="test-secret", algorithm="HS256", expire_minutes=-1)
        token = provider.create_token(ActorSession(user_id=uuid4(), email="a@example.com"))

        assert await provider.validate_token(token) is None

    async def test_wrong_secret_is_rejected(self, hs256_provider: JWTAuthProvider):
        token = _make_hs256_token(_claims(), secret="other-secret")

        assert await hs256_provider.validate_token(token) is None

    async def test_garbage_is_rejected(self, hs256_provider: JWTAuthProvider):
        assert await hs256_provider.validate_token("not.a.jwt") is None


class TestClaimMapping:
    async def test_missing_sub_yields_none(self, hs256_provider: JWTAuthProvider):
        claims = _claims()
        del claims["sub"]

        assert await hs256_provider.validate_token(_make_hs256_token(claims)) is None

    async def test_missing_email_yields_none(self, hs256_provider: JWTAuthProvider):
        assert await hs256_provider.validate_token(_make_hs256_token(_claims(email=""))) is None

    async def test_non_uuid_sub_yields_none(self, hs256_provider: JWTAuthProvider):
        token = _make_hs256_token(_claims(sub="not-a-uuid"))

        assert await hs256_provider.validate_token(token) is None

    async def test_app_metadata_role_grants_admin(self, hs256_provider: JWTAuthProvider):
        token = _make_hs256_token(_claims(app_metadata={"role": "admin"}))

        result = await hs256_provider.validate_token(token)

        assert result is not None
        assert result.is_admin

    async def test_configured_admin_email_grants_admin(self, hs256_provider: JWTAuthProvider):
        token = _make_hs256_token(_claims(email="Boss@Example.com"))

        result = await hs256_provider.validate_token(token)

        assert result is not None
        assert result.is_admin

    async def test_user_metadata_role_does_not_grant_admin(self, hs256_provider: JWTAuthProvider):
        token = _make_hs256_token(_claims(user_metadata={"role": "admin"}))

        result = await hs256_provider.validate_token(token)

        assert result is not None
        assert not result.is_admin

    def test_supabase_user_object_uses_id_and_name_fallbacks(
        self, hs256_provider: JWTAuthProvider
    ):
        user_id = uuid4()

        result = hs256_provider.session_from_claims(
            {"id": str(user_id), "email": "x@example.com", "user_metadata": {"full_name": "X Y"}},
            access_token="abc",
        )

        assert result is not None
        assert result.user_id == user_id
        assert result.display_name == "X Y"
        assert result.label == "X Y"


# ---------------------------------------------------------------------------
# Tests: JWKS / ES256
# ---------------------------------------------------------------------------


class TestJwks:
    async def test_returns_empty_when_supabase_not_configured(
        self, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.setattr(jwt_provider_module.settings, "supabase_url", "")

        assert await _get_jwks_keys() == {}

    async def test_fetches_once_and_caches(self, mock_jwks):
        keys, calls = mock_jwks
        _, jwk = _es256_keypair("key-1")
        keys.append(jwk)
        keys.append({"kty": "EC"})  # no kid, ignored

        first = await _get_jwks_keys()
        second = await _get_jwks_keys()

        assert list(first) == ["key-1"]
        assert second == first
        assert calls == [JWKS_URL]

    async def test_validates_es256_token(self, mock_jwks, hs256_provider: JWTAuthProvider):
        keys, _ = mock_jwks
        pem, jwk = _es256_keypair("key-1")
        keys.append(jwk)
        claims = _claims(user_metadata={"display_name": "Ecdsa User"})
        token = jose_jwt.encode(claims, pem, algorithm="ES256", headers={"kid": "key-1"})

        result = await hs256_provider.validate_token(token)

        assert result is not None
        assert str(result.user_id) == claims["sub"]
        assert result.display_name == "Ecdsa User"

    async def test_unknown_kid_refetches_then_rejects(
        self, mock_jwks, hs256_provider: JWTAuthProvider
    ):
        keys, calls = mock_jwks
        pem, jwk = _es256_keypair("published")
        keys.append(jwk)
        token = jose_jwt.encode(_claims(), pem, algorithm="ES256", headers={"kid": "rotated"})

        assert await hs256_provider.validate_token(token) is None
        assert len(calls) == 2

    async def test_es256_token_signed_by_other_key_is_rejected(
        self, mock_jwks, hs256_provider: JWTAuthProvider
    ):
        keys, _ = mock_jwks
        _, published = _es256_keypair("key-1")
        attacker_pem, _ = _es256_keypair("key-1")
        keys.append(published)
        token = jose_jwt.encode(
            _claims(), attacker_pem, algorithm="ES256", headers={"kid": "key-1"}
        )

        assert await hs256_provider.validate_token(token) is None
