import pytest

from contactbook.errors import HashingError


def test_password_hashing_roundtrip(hasher):
    password = "secret123"
    hashed = hasher.hash(password)
    assert hashed != password
    assert hasher.verify(password, hashed)


def test_wrong_password_does_not_verify(hasher):
    hashed = hasher.hash("secret123")
    assert hasher.verify("secret124", hashed) is False


def test_same_password_hashes_differently(hasher):
    first = hasher.hash("secret123")
    second = hasher.hash("secret123")
    assert first != second
    assert hasher.verify("secret123", first)
    assert hasher.verify("secret123", second)


def test_short_password_is_still_hashed(hasher):
    # Strength rules live in request validation, not here.
    assert hasher.verify("a", hasher.hash("a"))


def test_malformed_digest_raises_hashing_error(hasher):
    with pytest.raises(HashingError):
        hasher.verify("secret123", "not-a-bcrypt-hash")


def test_dummy_verify_returns_nothing(hasher):
    assert hasher.dummy_verify("whatever") is None


def test_password_with_nul_matches_nothing(hasher):
    digest = hasher.hash("secret123")
    assert hasher.verify("abc\x00def", digest) is False


def test_dummy_verify_accepts_password_with_nul(hasher):
    assert hasher.dummy_verify("abc\x00def") is None
