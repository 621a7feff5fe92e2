"""ORM model for cached Prowler resource findings."""

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, func

from prowler_dashboard.models.base import Base, JSONType, new_uuid, utcnow

ASSET_STATUSES = ("compliant", "non-compliant", "warning", "unknown")
ASSET_SEVERITIES = ("critical", "high", "medium", "low")


class Asset(Base):
    """
    Denormalized snapshot of one Prowler resource.

    Rows are never edited individually; a sync replaces the whole set for a configuration.
    """

    __tablename__ = "assets"

    id = Column(String(36), primary_key=True, default=new_uuid)
    configuration_id = Column(
        String(36),
        ForeignKey("prowler_configurations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    resource_id = Column(Text, nullable=False)
    resource_name = Column(Text, nullable=False)
    resource_type = Column(Text, nullable=False)
    region = Column(Text, nullable=True)
    status = Column(String(32), nullable=False, default="unknown")
    severity = Column(String(32), nullable=True)
    raw_data = Column(JSONType, nullable=True)
    last_checked_at = Column(DateTime(timezone=True), nullable=True)
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
        index=True,
    )
