"""Password hashing and verification."""

import logging

from passlib.context import CryptContext
from passlib.exc import PasswordValueError

from .errors import HashingError

logger = logging.getLogger("contactbook.auth")


class PasswordHasher:
    """One-way salted bcrypt hashing with a fixed cost factor.

    Instances hold no mutable state once built and may be shared by any
    number of concurrent requests.
    """

    def __init__(self, rounds: int = 12):
        self._context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds
        )
        # Checked on unknown-email logins.
        self._dummy_hash = self.hash("contactbook-timing-dummy")

    def hash(self, password: str) -> str:
        """Return a salted bcrypt digest of ``password``.

        Raises:
            HashingError: If the hashing backend fails.
        """
        try:
            return self._context.hash(password)
        except (ValueError, TypeError) as exc:
            logger.error("Password hashing failed: %s", type(exc).__name__)
            raise HashingError("password hashing failed") from exc

    def verify(self, password: str, digest: str) -> bool:
        """Return ``True`` if ``digest`` was produced from ``password``.

        A password bcrypt cannot accept (e.g. one containing NUL) matches
        nothing and yields ``False``.

        Raises:
            HashingError: If ``digest`` is not a recognizable hash.
        """
        try:
            return self._context.verify(password, digest)
        except PasswordValueError:
            return False
        except (ValueError, TypeError) as exc:
            logger.error("Stored password hash is malformed")
            raise HashingError("stored password hash is malformed") from exc

    def dummy_verify(self, password: str) -> None:
        """Spend the same work as a real verification and discard the result."""
        self.verify(password, self._dummy_hash)
