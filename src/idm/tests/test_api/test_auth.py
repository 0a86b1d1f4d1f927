from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from idm.api.auth import IDM_ADMIN, IDM_USER, TokenVerifier, extract_roles
from idm.exceptions import AuthenticationError

KEY = "unit-test-key"


def encode(claims: dict, key: str = KEY) -> str:
    claims = {"exp": datetime.now(timezone.utc) + timedelta(minutes=5), **claims}
    return jwt.encode(claims, key, algorithm="HS256")


def test_decode_returns_claims():
    verifier = TokenVerifier(KEY, ["HS256"])
    claims = verifier.decode(encode({"sub": "alice", "realm_access": {"roles": [IDM_USER]}}))

    assert claims["sub"] == "alice"
    assert extract_roles(claims) == {IDM_USER}


def test_decode_checks_audience_when_configured():
    verifier = TokenVerifier(KEY, ["HS256"], audience="idm")

    assert verifier.decode(encode({"aud": "idm"}))["aud"] == "idm"
    with pytest.raises(AuthenticationError, match="invalid token"):
        verifier.decode(encode({"aud": "billing"}))


def test_decode_rejects_algorithm_not_allowed():
    verifier = TokenVerifier(KEY, ["RS256"])
    with pytest.raises(AuthenticationError):
        verifier.decode(encode({}))


def test_decode_rejects_garbage():
    with pytest.raises(AuthenticationError) as exc_info:
        TokenVerifier(KEY, ["HS256"]).decode("not-a-jwt")
    assert exc_info.value.http_status() == 401


def test_decode_without_key_is_unauthorized():
    with pytest.raises(AuthenticationError, match="not configured"):
        TokenVerifier(None, ["HS256"]).decode(encode({}))


@pytest.mark.parametrize(
    "claims, expected",
    [
        ({}, set()),
        ({"realm_access": None}, set()),
        ({"realm_access": {"roles": [IDM_ADMIN, 3, IDM_USER]}}, {IDM_ADMIN, IDM_USER}),
    ],
)
def test_extract_roles(claims, expected):
    assert extract_roles(claims) == expected


def test_from_settings(settings):
    verifier = TokenVerifier.from_settings(settings)
    assert verifier.key == settings.JWT_KEY
    assert verifier.algorithms == ["HS256"]
    assert verifier.audience is None
