from datetime import timedelta

import pytest
from jose import jwt

from contactbook.core import Settings
from contactbook.errors import (
    BadSignatureError,
    ConfigurationError,
    ExpiredTokenError,
    MalformedTokenError,
    TokenError,
)
from contactbook.tokens import TokenService

from tests.conftest import SECRET_KEY


def test_issue_and_verify_roundtrip(token_service, clock):
    token = token_service.issue("user-1")
    claims = token_service.verify(token)
    assert claims.sub == "user-1"
    assert claims.iat == int(clock().timestamp())
    assert claims.exp == claims.iat + 24 * 60 * 60


def test_token_carries_only_identity_claims(token_service):
    token = token_service.issue("user-1")
    assert set(jwt.get_unverified_claims(token)) == {"sub", "iat", "exp"}


def test_token_accepted_just_before_expiry(token_service, clock):
    token = token_service.issue("user-1")
    clock.advance(hours=23, minutes=59)
    assert token_service.verify(token).sub == "user-1"


def test_token_rejected_just_after_expiry(token_service, clock):
    token = token_service.issue("user-1")
    clock.advance(hours=24, minutes=1)
    with pytest.raises(ExpiredTokenError):
        token_service.verify(token)


def test_garbage_token_is_malformed(token_service):
    with pytest.raises(MalformedTokenError):
        token_service.verify("not-a-token")


def test_tampered_signature_is_rejected(token_service):
    token = token_service.issue("user-1")
    header, payload, signature = token.split(".")
    flipped = ("A" if signature[0] != "A" else "B") + signature[1:]
    with pytest.raises(BadSignatureError):
        token_service.verify(".".join([header, payload, flipped]))


def test_token_signed_with_other_key_is_rejected(clock):
    foreign = TokenService("some-other-secret-key-of-enough-length", clock=clock)
    ours = TokenService(SECRET_KEY, clock=clock)
    with pytest.raises(BadSignatureError):
        ours.verify(foreign.issue("user-1"))


def test_token_without_subject_is_malformed(token_service, clock):
    now = int(clock().timestamp())
    token = jwt.encode({"iat": now, "exp": now + 60}, SECRET_KEY, algorithm="HS256")
    with pytest.raises(MalformedTokenError):
        token_service.verify(token)


def test_all_rejections_share_a_base_class(token_service):
    with pytest.raises(TokenError):
        token_service.verify("a.b.c")


def test_missing_signing_key_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        TokenService("")


def test_from_settings_uses_configured_lifetime(clock):
    settings = Settings(SECRET_KEY=SECRET_KEY, ACCESS_TOKEN_EXPIRE_MINUTES=10)
    service = TokenService.from_settings(settings, clock=clock)
    token = service.issue("user-1")
    clock.advance(minutes=9)
    service.verify(token)
    clock.advance(minutes=2)
    with pytest.raises(ExpiredTokenError):
        service.verify(token)


def test_custom_lifetime_is_honoured(clock):
    service = TokenService(SECRET_KEY, lifetime=timedelta(hours=1), clock=clock)
    claims = service.verify(service.issue("user-1"))
    assert claims.exp - claims.iat == 3600


def test_token_with_non_string_subject_is_malformed(token_service, clock):
    now = int(clock().timestamp())
    token = jwt.encode(
        {"sub": 123, "iat": now, "exp": now + 60}, SECRET_KEY, algorithm="HS256"
    )
    with pytest.raises(MalformedTokenError):
        token_service.verify(token)
