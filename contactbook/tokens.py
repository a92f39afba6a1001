"""Signed, time-bounded identity tokens.

Tokens are HS256 JWTs carrying only ``sub`` (the user id), ``iat`` and
``exp`` as epoch seconds. They prove identity and nothing else: every
ownership decision is re-derived from storage on each request.
"""

import logging
from datetime import timedelta
from typing import Callable

from jose import JWTError, jwt
from jose.exceptions import JWTClaimsError
from pydantic import ValidationError as SchemaValidationError

from .core import Settings, utcnow
from .errors import (
    BadSignatureError,
    ConfigurationError,
    ExpiredTokenError,
    MalformedTokenError,
)
from .schemas import TokenClaims

logger = logging.getLogger("contactbook.auth")


class TokenService:
    """Issue and verify signed identity tokens.

    Args:
        secret_key (str): Symmetric signing key.
        algorithm (str): JWS algorithm, e.g. ``HS256``.
        lifetime (timedelta): Validity window of issued tokens.
        clock (Callable): Returns the current aware UTC datetime.

    Raises:
        ConfigurationError: If ``secret_key`` is empty.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        lifetime: timedelta = timedelta(hours=24),
        clock: Callable = utcnow,
    ):
        if not secret_key:
            raise ConfigurationError("SECRET_KEY must be set")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._lifetime = int(lifetime.total_seconds())
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings, clock: Callable = utcnow):
        """Build the service from application settings."""
        return cls(
            secret_key=settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
            lifetime=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
            clock=clock,
        )

    def issue(self, user_id) -> str:
        """Create a signed token for ``user_id`` valid for the configured lifetime."""
        issued_at = int(self._clock().timestamp())
        claims = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + self._lifetime,
        }
        return jwt.encode(claims, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenClaims:
        """Check signature and expiry of ``token`` and return its claims.

        Raises:
            MalformedTokenError: The token cannot be parsed or lacks claims.
            BadSignatureError: The signature does not match the signing key.
            ExpiredTokenError: ``exp`` is not after the current time.
        """
        try:
            jwt.get_unverified_header(token)
            jwt.get_unverified_claims(token)
        except JWTError as exc:
            logger.info("Rejected token: malformed")
            raise MalformedTokenError("token is malformed") from exc

        try:
            # Expiry is checked below against the injected clock.
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_exp": False},
            )
        except JWTClaimsError as exc:
            logger.info("Rejected token: invalid claims")
            raise MalformedTokenError("token claims are invalid") from exc
        except JWTError as exc:
            logger.info("Rejected token: bad signature")
            raise BadSignatureError("token signature is invalid") from exc

        try:
            claims = TokenClaims.model_validate(payload)
        except SchemaValidationError as exc:
            logger.info("Rejected token: missing or invalid claims")
            raise MalformedTokenError("token claims are invalid") from exc

        if claims.exp <= self._clock().timestamp():
            logger.info("Rejected token: expired (sub=%s)", claims.sub)
            raise ExpiredTokenError("token has expired")
        return claims
