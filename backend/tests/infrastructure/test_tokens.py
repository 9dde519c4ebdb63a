"""Tests for TokenIssuer: round trip claims, expiry, tampering."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from studyhub.core.errors import UnauthenticatedError
from studyhub.infrastructure.tokens import TokenIssuer

SECRET = "unit-test-secret"


def test_issued_token_verifies_to_same_identity():
    issuer = TokenIssuer(SECRET)
    claims = issuer.verify(issuer.issue(12, "ana@example.com", "Ana"))
    assert claims.id == 12
    assert claims.email == "ana@example.com"
    assert claims.display_name == "Ana"


def test_lifetime_is_seven_days_by_default():
    issuer = TokenIssuer(SECRET)
    claims = issuer.verify(issuer.issue(1, "a@b.c", "A"))
    remaining = claims.expires_at - datetime.now(timezone.utc)
    assert timedelta(days=6, hours=23) < remaining <= timedelta(days=7)


def test_expired_token_rejected():
    past = datetime.now(timezone.utc) - timedelta(days=8)
    token = jwt.encode(
        {"id": 1, "email": "a@b.c", "display_name": "A",
         "iat": int(past.timestamp()), "exp": int((past + timedelta(days=7)).timestamp())},
        SECRET, algorithm="HS256",
    )
    with pytest.raises(UnauthenticatedError) as exc:
        TokenIssuer(SECRET).verify(token)
    assert exc.value.message == "Token expired"


def test_token_signed_with_other_secret_rejected():
    token = TokenIssuer("someone-else").issue(1, "a@b.c", "A")
    with pytest.raises(UnauthenticatedError):
        TokenIssuer(SECRET).verify(token)


def test_garbage_token_rejected():
    with pytest.raises(UnauthenticatedError):
        TokenIssuer(SECRET).verify("not-a-jwt")


def test_token_missing_identity_claims_rejected():
    exp = int((datetime.now(timezone.utc) + timedelta(days=1)).timestamp())
    token = jwt.encode({"email": "a@b.c", "exp": exp}, SECRET, algorithm="HS256")
    with pytest.raises(UnauthenticatedError):
        TokenIssuer(SECRET).verify(token)


def test_non_integer_id_rejected():
    exp = int((datetime.now(timezone.utc) + timedelta(days=1)).timestamp())
    token = jwt.encode(
        {"id": "1", "email": "a@b.c", "display_name": "A", "exp": exp},
        SECRET, algorithm="HS256",
    )
    with pytest.raises(UnauthenticatedError):
        TokenIssuer(SECRET).verify(token)
