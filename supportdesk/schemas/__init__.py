"""Pydantic request/response schemas."""

from supportdesk.schemas.auth import (
    AccountOut,
    AuthResponse,
    Identity,
    LoginRequest,
    MeResponse,
    RegisterRequest,
    Role,
)
from supportdesk.schemas.document import (
    ContentKind,
    DeleteResponse,
    DocumentDetail,
    DocumentResponse,
    DocumentsListResponse,
    DocumentSummary,
)
from supportdesk.schemas.health import HealthResponse

__all__ = [
    "AccountOut",
    "AuthResponse",
    "ContentKind",
    "DeleteResponse",
    "DocumentDetail",
    "DocumentResponse",
    "DocumentSummary",
    "DocumentsListResponse",
    "HealthResponse",
    "Identity",
    "LoginRequest",
    "MeResponse",
    "RegisterRequest",
    "Role",
]
