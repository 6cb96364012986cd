"""Password hashing and the bearer-token service (issue and stateless verify)."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt

from supportdesk.core.errors import (
    ExpiredTokenError,
    InvalidSignatureError,
    MalformedTokenError,
)
from supportdesk.schemas.auth import Identity, Role

if TYPE_CHECKING:
    from supportdesk.core.config import Settings

logger = logging.getLogger(__name__)

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

# Min/max lengths for email and password validation.
EMAIL_MAX_LEN = 255
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128

# Used only when no JWT_SECRET is configured outside production.
DEV_JWT_SECRET = "dev-secret-change-in-production"

REQUIRED_CLAIMS = ("sub", "email", "role", "iat", "exp")


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


class ConfigurationError(RuntimeError):
    """Raised at startup when the token service cannot be configured safely."""


@dataclass(frozen=True)
class TokenConfig:
    """Signing configuration for TokenService."""

    secret: str | None
    algorithm: str = "HS256"
    expire_minutes: int = 7 * 24 * 60
    production: bool = False

    @classmethod
    def from_settings(cls, settings: "Settings") -> "TokenConfig":
        secret = settings.JWT_SECRET.get_secret_value() if settings.JWT_SECRET else None
        return cls(
            secret=secret,
            algorithm=settings.JWT_ALGORITHM,
            expire_minutes=settings.JWT_EXPIRE_MINUTES,
            production=settings.APP_ENV == "prod",
        )


class TokenService:
    """
    Issue and verify signed, time-bounded bearer tokens.

    Verification is stateless: the claims inside a valid token (role included)
    are trusted for the rest of the request without re-reading the account.
    A role change therefore only takes effect once older tokens expire, and
    there is no revocation; logout is a client-side discard.
    """

    def __init__(
        self,
        config: TokenConfig,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        secret = config.secret
        if not secret:
            if config.production:
                raise ConfigurationError("JWT secret is not configured in production")
            logger.warning(
                "JWT_SECRET is not set; signing tokens with the insecure development secret"
            )
            secret = DEV_JWT_SECRET
        self._secret = secret
        self._algorithm = config.algorithm
        self._lifetime = timedelta(minutes=config.expire_minutes)
        self._clock = clock or (lambda: datetime.now(UTC))

    @property
    def uses_dev_secret(self) -> bool:
        return self._secret == DEV_JWT_SECRET

    def issue(self, identity: Identity) -> str:
        """Sign a token for the identity, valid for the configured lifetime."""
        now = self._clock()
        payload: dict[str, Any] = {
            "sub": identity.id,
            "email": identity.email,
            "role": identity.role.value,
            "iat": now,
            "exp": now + self._lifetime,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> Identity:
        """
        Check signature and expiry and return the embedded identity.
        Raises InvalidSignatureError, ExpiredTokenError or MalformedTokenError.

        ``exp`` and ``iat`` are checked against the service clock, the same
        one ``issue`` stamps them with.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={
                    "require": list(REQUIRED_CLAIMS),
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.InvalidSignatureError as e:
            raise InvalidSignatureError() from e
        except jwt.PyJWTError as e:
            raise MalformedTokenError() from e
        self._check_lifetime(payload)
        return _identity_from_claims(payload)

    def _check_lifetime(self, payload: dict[str, Any]) -> None:
        issued_at = payload["iat"]
        expires_at = payload["exp"]
        for value in (issued_at, expires_at):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise MalformedTokenError("Token time claims must be numeric")
        now = self._clock().timestamp()
        if issued_at > now:
            raise MalformedTokenError("Token is not yet valid")
        if expires_at <= now:
            raise ExpiredTokenError()


def _identity_from_claims(payload: dict[str, Any]) -> Identity:
    sub = payload.get("sub")
    email = payload.get("email")
    role = payload.get("role")
    if not isinstance(sub, str) or not sub:
        raise MalformedTokenError("Token subject is missing")
    if not isinstance(email, str) or not email:
        raise MalformedTokenError("Token email claim is missing")
    try:
        parsed_role = Role(role)
    except (TypeError, ValueError) as e:
        raise MalformedTokenError("Token role claim is invalid") from e
    return Identity(id=sub, email=email, role=parsed_role)
