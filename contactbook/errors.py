"""Typed failures raised by the contact book core.

Every outcome other than success is one of these exceptions. The HTTP
layer maps them to status codes in ``main.py``; nothing in the core
retries or swallows them.
"""


class ContactBookError(Exception):
    """Base class for all contact book errors."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ConfigurationError(ContactBookError):
    """Process configuration is unusable (e.g. missing signing key)."""


class ValidationError(ContactBookError):
    """Client input is malformed.

    Attributes:
        violations (list[str]): Every violated rule, not only the first.
    """

    def __init__(self, violations: list[str]):
        super().__init__("; ".join(violations))
        self.violations = list(violations)


class ConflictError(ContactBookError):
    """A uniqueness rule would be broken."""


class AuthError(ContactBookError):
    """Credentials were rejected."""


class TokenError(ContactBookError):
    """A bearer token could not be accepted."""


class MalformedTokenError(TokenError):
    pass


class BadSignatureError(TokenError):
    pass


class ExpiredTokenError(TokenError):
    pass


class NotFoundError(ContactBookError):
    """The requested record does not exist."""


class UnauthorizedError(ContactBookError):
    """The caller is authenticated but does not own the record."""


class HashingError(ContactBookError):
    """Password hashing or verification failed internally."""


class RepositoryError(ContactBookError):
    """Opaque failure reported by the storage collaborator."""


class DuplicateEmailError(RepositoryError):
    """The user directory rejected an insert on its unique email index."""
