import threading

import pytest

from contactbook.errors import AuthError, ConflictError, ValidationError
from contactbook.identity import IdentityService


@pytest.fixture()
def identity(user_repo, hasher, token_service, clock):
    return IdentityService(user_repo, hasher, token_service, clock=clock)


def test_register_returns_view_without_hash(identity, clock):
    view = identity.register("alice", "alice@example.com", "secret123")
    assert view.username == "alice"
    assert view.email == "alice@example.com"
    assert view.created_at == clock()
    assert "password_hash" not in view.model_dump()


def test_register_stores_hash_not_password(identity, user_repo, hasher):
    identity.register("alice", "alice@example.com", "secret123")
    stored = user_repo.find_by_email("alice@example.com")
    assert stored.password_hash != "secret123"
    assert hasher.verify("secret123", stored.password_hash)


def test_register_reports_every_violation(identity, user_repo):
    with pytest.raises(ValidationError) as exc_info:
        identity.register("al", "not-an-email", "123")
    violations = exc_info.value.violations
    assert len(violations) == 3
    assert violations[0].startswith("username")
    assert violations[1].startswith("email")
    assert violations[2].startswith("password")
    assert user_repo.find_by_email("not-an-email") is None


def test_register_duplicate_email_conflicts(identity):
    identity.register("alice", "alice@example.com", "secret123")
    with pytest.raises(ConflictError) as exc_info:
        identity.register("someone", "alice@example.com", "different-pass")
    assert exc_info.value.message == "email already exists"


def test_concurrent_registration_lets_exactly_one_through(identity, user_repo):
    # Both threads pass the pre-check before either inserts.
    user_repo.lookup_barrier = threading.Barrier(2)
    outcomes = []

    def attempt(name):
        try:
            identity.register(name, "race@example.com", "secret123")
            outcomes.append("ok")
        except ConflictError:
            outcomes.append("conflict")

    threads = [threading.Thread(target=attempt, args=(n,)) for n in ("one", "two")]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)

    assert sorted(outcomes) == ["conflict", "ok"]


def test_register_then_login_yields_verifiable_token(identity, token_service):
    user = identity.register("alice", "alice@example.com", "secret123")
    result = identity.login("alice@example.com", "secret123")
    assert result.user.id == user.id
    assert token_service.verify(result.token).sub == user.id


def test_wrong_password_and_unknown_email_are_indistinguishable(identity):
    identity.register("alice", "alice@example.com", "secret123")
    with pytest.raises(AuthError) as wrong_password:
        identity.login("alice@example.com", "wrong-pass")
    with pytest.raises(AuthError) as unknown_email:
        identity.login("nobody@example.com", "secret123")
    assert type(wrong_password.value) is type(unknown_email.value)
    assert str(wrong_password.value) == str(unknown_email.value) == "invalid credentials"


def test_get_user_returns_profile(identity):
    user = identity.register("alice", "alice@example.com", "secret123")
    assert identity.get_user(user.id).email == "alice@example.com"


def test_get_user_for_unknown_id_is_auth_error(identity):
    with pytest.raises(AuthError):
        identity.get_user("missing")


def test_login_with_nul_password_does_not_reveal_email(identity):
    identity.register("alice", "alice@example.com", "secret123")
    with pytest.raises(AuthError) as known_email:
        identity.login("alice@example.com", "abc\u0000def")
    with pytest.raises(AuthError) as unknown_email:
        identity.login("nobody@example.com", "abc\u0000def")
    assert str(known_email.value) == str(unknown_email.value) == "invalid credentials"


def test_register_rejects_nul_in_password(identity, user_repo):
    with pytest.raises(ValidationError) as exc_info:
        identity.register("alice", "alice@example.com", "abc\u0000defgh")
    assert exc_info.value.violations == ["password: must not contain NUL characters"]
    assert user_repo.find_by_email("alice@example.com") is None


def test_register_rejects_overlong_fields(identity):
    with pytest.raises(ValidationError) as exc_info:
        identity.register("a" * 101, "alice@example.com", "secret123")
    assert exc_info.value.violations == ["username: must be at most 100 characters"]
