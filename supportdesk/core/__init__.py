"""Core app configuration, database and security primitives."""

from supportdesk.core.config import get_settings, settings
from supportdesk.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
