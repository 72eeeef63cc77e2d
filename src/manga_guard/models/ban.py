"""Ban records restricting users or anonymous sessions."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, CheckConstraint, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from manga_guard.db.session import Base
from manga_guard.db.time import utcnow
from manga_guard.models.ids import new_id


class RestrictionType(str, Enum):
    """What a ban takes away; ``complete_ban`` covers every other type."""

    COMMENT_BAN = "comment_ban"
    READ_BAN = "read_ban"
    UPLOAD_BAN = "upload_ban"
    COMPLETE_BAN = "complete_ban"


class BannedUser(Base):
    """Restriction on a user id or a session id.

    ``banned_until`` of ``None`` means the ban is permanent. Lifting a ban
    clears ``is_active`` and keeps the row.
    """

    __tablename__ = "banned_users"
    __table_args__ = (
        CheckConstraint(
            "user_id IS NOT NULL OR session_id IS NOT NULL",
            name="ck_banned_users_target",
        ),
        CheckConstraint(
            "restriction_type IN ('comment_ban', 'read_ban', 'upload_ban', 'complete_ban')",
            name="ck_banned_users_restriction_type",
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    session_id: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    restriction_type: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=RestrictionType.COMMENT_BAN.value,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    banned_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    banned_until: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
