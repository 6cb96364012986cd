"""Register/login/me routes and auth dependencies (get_current_user, require_admin)."""

from functools import lru_cache
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from supportdesk.core.config import get_settings
from supportdesk.core.database import get_db
from supportdesk.core.errors import NotFoundError, UnauthenticatedError
from supportdesk.core.security import TokenConfig, TokenService
from supportdesk.models import Account
from supportdesk.schemas.auth import (
    AccountOut,
    AuthData,
    AuthResponse,
    Identity,
    LoginRequest,
    MeData,
    MeResponse,
    RegisterRequest,
    Role,
)
from supportdesk.services.access import AccessGuard
from supportdesk.services.accounts import CredentialStore, identity_of

router = APIRouter()


@lru_cache
def get_token_service() -> TokenService:
    """Process-wide token service built once from settings."""
    return TokenService(TokenConfig.from_settings(get_settings()))


def get_access_guard(
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> AccessGuard:
    return AccessGuard(tokens)


def get_credential_store(
    db: Annotated[Session, Depends(get_db)],
) -> CredentialStore:
    return CredentialStore(db)


def get_current_user(
    request: Request,
    guard: Annotated[AccessGuard, Depends(get_access_guard)],
) -> Identity:
    """Dependency: require a valid ``Authorization: Bearer <token>`` header. Raises 401 otherwise."""
    return guard.authenticate_request(request)


def require_admin(
    current_user: Annotated[Identity, Depends(get_current_user)],
    guard: Annotated[AccessGuard, Depends(get_access_guard)],
) -> Identity:
    """Dependency: require authenticated user with role 'admin'. Raises 403 for non-admin."""
    return guard.require_role(current_user, Role.ADMIN)


def _auth_response(account: Account, tokens: TokenService) -> AuthResponse:
    token = tokens.issue(identity_of(account))
    return AuthResponse(
        data=AuthData(user=AccountOut.model_validate(account), token=token)
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    store: Annotated[CredentialStore, Depends(get_credential_store)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> AuthResponse:
    """
    Create a 'user' account and return it with a bearer token.
    Admin accounts are created or promoted only through the operator scripts.
    """
    account = store.register(body.email, body.password)
    return _auth_response(account, tokens)


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    store: Annotated[CredentialStore, Depends(get_credential_store)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> AuthResponse:
    """
    Authenticate with email (case-insensitive) and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <token>
    """
    account = store.authenticate(body.email, body.password)
    return _auth_response(account, tokens)


@router.get("/me", response_model=MeResponse)
def me(
    current_user: Annotated[Identity, Depends(get_current_user)],
    store: Annotated[CredentialStore, Depends(get_credential_store)],
) -> MeResponse:
    """Return the caller's account as currently stored."""
    try:
        account = store.get(current_user.id)
    except NotFoundError:
        raise UnauthenticatedError() from None
    return MeResponse(data=MeData(user=AccountOut.model_validate(account)))
