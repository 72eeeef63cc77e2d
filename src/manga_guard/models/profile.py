"""SQLAlchemy model for user profiles and their assigned role."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from manga_guard.core.roles import Role, parse_role
from manga_guard.db.session import Base
from manga_guard.db.time import utcnow


class Profile(Base):
    """Public profile keyed by the identity provider's user id."""

    __tablename__ = "profiles"

    user_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    display_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Stored as text; unknown values resolve to the lowest role on read.
    role: Mapped[str] = mapped_column(String(32), nullable=False, default=Role.USER.value)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    @property
    def resolved_role(self) -> Role:
        """Return the role as a :class:`Role`, failing closed to ``user``."""
        return parse_role(self.role)
