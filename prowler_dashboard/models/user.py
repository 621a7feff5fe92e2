"""ORM model for application users (auth and RBAC)."""

import enum

from sqlalchemy import Column, DateTime, Enum, String, Text, func

from prowler_dashboard.models.base import Base, new_uuid, utcnow


class UserRole(str, enum.Enum):
    """Closed set of roles; privileged routes check capabilities, not strings."""

    ADMIN = "admin"
    USER = "user"

    @property
    def can_manage_users(self) -> bool:
        return self is UserRole.ADMIN


class User(Base):
    """
    User account for session authentication and role-based access control.

    password_hash is nullable only for accounts created before registration completes.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_uuid)
    email = Column(String(255), nullable=False, unique=True, index=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(Text, nullable=True)
    first_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=True)
    profile_image_url = Column(String(2048), nullable=True)
    role = Column(
        Enum(
            UserRole,
            name="user_role",
            native_enum=False,
            length=32,
            values_callable=lambda roles: [r.value for r in roles],
        ),
        nullable=False,
        default=UserRole.USER,
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
    )
