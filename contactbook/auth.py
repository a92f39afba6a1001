"""Authentication dependencies and service wiring for the HTTP layer.

The password hasher and token service are built once per process and
shared by all requests. Use-case objects are built per request around
the request's database session.
"""

import logging
from functools import lru_cache

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .contact_service import ContactService
from .core import get_settings
from .database import get_db
from .errors import MalformedTokenError
from .identity import IdentityService
from .repositories import SqlContactRepository, SqlUserRepository
from .security import PasswordHasher
from .tokens import TokenService

logger = logging.getLogger("contactbook.auth")

bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache()
def get_password_hasher() -> PasswordHasher:
    """Return the process-wide password hasher."""
    return PasswordHasher(rounds=get_settings().BCRYPT_ROUNDS)


@lru_cache()
def get_token_service() -> TokenService:
    """Return the process-wide token service.

    Raises:
        ConfigurationError: If ``SECRET_KEY`` is not configured.
    """
    return TokenService.from_settings(get_settings())


def get_identity_service(
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> IdentityService:
    return IdentityService(SqlUserRepository(db), hasher, tokens)


def get_contact_service(db: Session = Depends(get_db)) -> ContactService:
    return ContactService(SqlContactRepository(db))


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> str:
    """Resolve the bearer token of the request to a user id.

    Raises:
        TokenError: If the token is absent, malformed, forged or expired.
    """
    if credentials is None:
        logger.info("Rejected request without bearer token")
        raise MalformedTokenError("missing bearer token")
    return tokens.verify(credentials.credentials).sub
