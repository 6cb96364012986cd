"""Request-level authorization: resolve the caller from a bearer token and enforce roles."""

import logging
from collections.abc import Mapping
from typing import Any

from supportdesk.core.errors import (
    ForbiddenError,
    MissingCredentialError,
    TokenError,
    UnauthenticatedError,
)
from supportdesk.core.security import TokenService
from supportdesk.schemas.auth import Identity, Role

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def _authorization_header(headers: Mapping[str, str]) -> str | None:
    # Starlette Headers are case-insensitive; plain dicts from callers may not be.
    value = headers.get("authorization")
    if value is None:
        value = headers.get("Authorization")
    return value


class AccessGuard:
    """Authenticates bearer tokens via TokenService and checks exact-match roles."""

    def __init__(self, token_service: TokenService) -> None:
        self._tokens = token_service

    def authenticate(self, headers: Mapping[str, str]) -> Identity:
        """
        Resolve the identity from an ``Authorization: Bearer <token>`` header.

        Raises MissingCredentialError when the header is absent or not of that
        exact form. Every verification failure (bad signature, expired,
        malformed) surfaces as the same generic UnauthenticatedError.
        """
        header = _authorization_header(headers)
        if not header or not header.startswith(BEARER_PREFIX):
            raise MissingCredentialError()
        token = header[len(BEARER_PREFIX):]
        if not token or " " in token:
            raise MissingCredentialError()
        try:
            return self._tokens.verify(token)
        except TokenError as e:
            logger.info("Bearer token rejected", extra={"reason": e.reason})
            raise UnauthenticatedError("Invalid or expired token") from None

    def require_role(self, identity: Identity | None, role: Role) -> Identity:
        """Return the identity if its role equals ``role``; raise otherwise."""
        if identity is None:
            raise UnauthenticatedError()
        if identity.role != role:
            logger.info(
                "Access denied",
                extra={"account_id": identity.id, "required_role": role.value},
            )
            raise ForbiddenError(f"{role.value.capitalize()} access required")
        return identity

    def authenticate_request(self, request: Any) -> Identity:
        """
        Authenticate an in-flight request and attach the identity to
        ``request.state.identity`` for downstream handlers (request-scoped).
        """
        identity = self.authenticate(request.headers)
        request.state.identity = identity
        return identity
