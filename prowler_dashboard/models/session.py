"""ORM model for server-side login sessions."""

from sqlalchemy import Column, DateTime, ForeignKey, String, func

from prowler_dashboard.models.base import Base, JSONType, utcnow


class UserSession(Base):
    """Login session keyed by an opaque id; the cookie only carries a signed sid."""

    __tablename__ = "sessions"

    sid = Column(String(255), primary_key=True)
    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    data = Column(JSONType, nullable=False, default=dict)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
