from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import jwt
import pytest

from backend.auth.jwt_handler import SessionIssuer
from backend.core.errors import InvalidTokenError

SECRET = 'unit-test-signing-secret-with-enough-length-1'
OTHER_SECRET = 'unit-test-signing-secret-with-enough-length-2'


def _account(**overrides):
    values = {'id': 7, 'email': 'a@x.edu', 'role': 'student'}
    values.update(overrides)
    return SimpleNamespace(**values)


def test_issue_embeds_identity_and_role_claims() -> None:
    issuer = SessionIssuer(SECRET)

    claims = issuer.verify(issuer.issue(_account()))

    assert claims.id == 7
    assert claims.email == 'a@x.edu'
    assert claims.role == 'student'


def test_issue_sets_twelve_hour_expiry_by_default() -> None:
    issuer = SessionIssuer(SECRET)
    issued_at = datetime.now(timezone.utc).replace(microsecond=0)

    claims = issuer.verify(issuer.issue(_account(), now=issued_at))

    assert claims.issued_at == issued_at
    assert claims.expires_at - claims.issued_at == timedelta(hours=12)


def test_verify_accepts_token_before_expiry() -> None:
    issuer = SessionIssuer(SECRET)
    issued_at = datetime.now(timezone.utc) - timedelta(hours=11, minutes=59)

    claims = issuer.verify(issuer.issue(_account(), now=issued_at))

    assert claims.id == 7


def test_verify_rejects_token_after_expiry() -> None:
    issuer = SessionIssuer(SECRET)
    issued_at = datetime.now(timezone.utc) - timedelta(hours=12, seconds=1)
    token = issuer.issue(_account(), now=issued_at)

    with pytest.raises(InvalidTokenError):
        issuer.verify(token)


def test_verify_rejects_token_signed_with_another_secret() -> None:
    token = SessionIssuer(OTHER_SECRET).issue(_account())

    with pytest.raises(InvalidTokenError):
        SessionIssuer(SECRET).verify(token)


@pytest.mark.parametrize('token', ['', 'garbage', 'a.b.c'])
def test_verify_rejects_malformed_tokens(token: str) -> None:
    with pytest.raises(InvalidTokenError):
        SessionIssuer(SECRET).verify(token)


def test_verify_rejects_token_missing_identity_claims() -> None:
    now = datetime.now(timezone.utc)
    token = jwt.encode({'sub': '7', 'iat': now, 'exp': now + timedelta(hours=1)}, SECRET, algorithm='HS256')

    with pytest.raises(InvalidTokenError):
        SessionIssuer(SECRET).verify(token)


def test_issuer_requires_a_secret() -> None:
    with pytest.raises(ValueError):
        SessionIssuer('')
