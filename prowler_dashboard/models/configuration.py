"""ORM model for per-user Prowler connection profiles."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, Text, func, text

from prowler_dashboard.models.base import Base, new_uuid, utcnow

CONNECTION_STATUSES = ("connected", "disconnected", "error")


class ProwlerConfiguration(Base):
    """
    One Prowler connection profile. Saving a new profile deactivates the
    previous ones for the same user, so at most one row per user is active.
    """

    __tablename__ = "prowler_configurations"
    __table_args__ = (
        # At most one active row per user, enforced by the store.
        Index(
            "uq_prowler_configurations_one_active",
            "user_id",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active"),
        ),
    )

    id = Column(String(36), primary_key=True, default=new_uuid)
    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    prowler_url = Column(Text, nullable=False)
    prowler_email = Column(Text, nullable=False)
    prowler_password_hash = Column(Text, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    connection_status = Column(String(32), nullable=False, default="disconnected")
    last_sync_at = Column(DateTime(timezone=True), nullable=True)
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
