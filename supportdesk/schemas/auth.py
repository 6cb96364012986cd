"""Request/response schemas for auth endpoints and the resolved caller identity."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Account roles. Comparison is exact-match; there is no hierarchy."""

    USER = "user"
    ADMIN = "admin"


class Identity(BaseModel):
    """Identity claims carried by a verified bearer token."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Account id (token subject)")
    email: str
    role: Role


class RegisterRequest(BaseModel):
    """Credentials for self-registration. Role cannot be requested here."""

    model_config = ConfigDict(extra="forbid")

    email: str = Field(..., min_length=3, max_length=255, description="Email address")
    password: str = Field(..., min_length=8, max_length=128, description="Password")


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str = Field(..., min_length=1, max_length=255, description="Email address")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class AccountOut(BaseModel):
    """Account as returned to clients (never includes the password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    role: Role
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AuthData(BaseModel):
    user: AccountOut
    token: str = Field(..., description="JWT access token; send as Authorization: Bearer <token>")


class AuthResponse(BaseModel):
    """Response for register and login."""

    success: bool = True
    data: AuthData


class MeData(BaseModel):
    user: AccountOut


class MeResponse(BaseModel):
    success: bool = True
    data: MeData
