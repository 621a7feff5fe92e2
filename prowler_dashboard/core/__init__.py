"""Core app configuration and database."""

from prowler_dashboard.core.config import Settings, get_settings
from prowler_dashboard.core.database import Database, get_db

__all__ = ["Database", "Settings", "get_settings", "get_db"]
