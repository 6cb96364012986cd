"""ORM model for user accounts (credential store for auth and RBAC)."""

import uuid

from sqlalchemy import Column, DateTime, String, func

from supportdesk.models.base import Base


def new_id() -> str:
    """Opaque, immutable identifier assigned at creation."""
    return uuid.uuid4().hex


class Account(Base):
    """
    Account for bearer-token authentication and role-based access control.

    email is stored lowercased; role: 'admin' or 'user'. The password hash is
    never serialized outbound.
    """

    __tablename__ = "accounts"

    id = Column(String(32), primary_key=True, default=new_id)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default="user")
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Account id={self.id} email={self.email} role={self.role}>"
