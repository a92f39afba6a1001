"""Registration and login.

``IdentityService`` keeps no state of its own between calls. It is built
per request from shared, immutable collaborators: the password hasher,
the token service and a user repository.
"""

import logging
import uuid
from typing import Callable

from . import schemas
from .core import utcnow
from .entities import User
from .errors import AuthError, ConflictError, DuplicateEmailError
from .repositories import UserRepository
from .security import PasswordHasher
from .tokens import TokenService
from .validation import ensure_valid, registration_violations

logger = logging.getLogger("contactbook.identity")

INVALID_CREDENTIALS = "invalid credentials"
EMAIL_EXISTS = "email already exists"


class IdentityService:
    """Orchestrates registration, login and identity lookup."""

    def __init__(
        self,
        users: UserRepository,
        hasher: PasswordHasher,
        tokens: TokenService,
        clock: Callable = utcnow,
    ):
        self.users = users
        self.hasher = hasher
        self.tokens = tokens
        self.clock = clock

    def register(self, username: str, email: str, password: str) -> schemas.UserOut:
        """Create a user account.

        Raises:
            ValidationError: With every violated field rule.
            ConflictError: If ``email`` is already registered, whether found
                by the pre-check or rejected by the unique index on insert.
        """
        ensure_valid(registration_violations(username, email, password))

        if self.users.find_by_email(email) is not None:
            raise ConflictError(EMAIL_EXISTS)

        now = self.clock()
        user = User(
            id=str(uuid.uuid4()),
            username=username,
            email=email,
            password_hash=self.hasher.hash(password),
            created_at=now,
            updated_at=now,
        )
        try:
            created = self.users.create(user)
        except DuplicateEmailError as exc:
            # Lost the race against a concurrent registration.
            raise ConflictError(EMAIL_EXISTS) from exc

        logger.info("Registered user %s", created.id)
        return schemas.UserOut.model_validate(created)

    def login(self, email: str, password: str) -> schemas.AuthResponse:
        """Exchange credentials for a token.

        Unknown email and wrong password raise the same ``AuthError``.
        """
        user = self.users.find_by_email(email)
        if user is None:
            self.hasher.dummy_verify(password)
            logger.info("Login failed")
            raise AuthError(INVALID_CREDENTIALS)

        if not self.hasher.verify(password, user.password_hash):
            logger.info("Login failed")
            raise AuthError(INVALID_CREDENTIALS)

        token = self.tokens.issue(user.id)
        logger.info("User %s logged in", user.id)
        return schemas.AuthResponse(
            token=token, user=schemas.UserOut.model_validate(user)
        )

    def get_user(self, user_id: str) -> schemas.UserOut:
        """Return the profile of an authenticated user.

        Raises:
            AuthError: If the user behind a valid token no longer exists.
        """
        user = self.users.find_by_id(user_id)
        if user is None:
            logger.info("Token subject %s has no user record", user_id)
            raise AuthError("could not validate credentials")
        return schemas.UserOut.model_validate(user)
