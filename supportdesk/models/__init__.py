"""SQLAlchemy ORM models."""

from supportdesk.models.account import Account
from supportdesk.models.base import Base
from supportdesk.models.document import DocumentRecord

__all__ = ["Account", "Base", "DocumentRecord"]
