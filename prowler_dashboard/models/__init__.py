"""SQLAlchemy ORM models."""

from prowler_dashboard.models.asset import Asset
from prowler_dashboard.models.base import Base
from prowler_dashboard.models.configuration import ProwlerConfiguration
from prowler_dashboard.models.session import UserSession
from prowler_dashboard.models.user import User, UserRole

__all__ = ["Asset", "Base", "ProwlerConfiguration", "User", "UserRole", "UserSession"]
