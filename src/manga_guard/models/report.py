"""User reports against comments, titles or other users."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from manga_guard.db.session import Base
from manga_guard.db.time import utcnow
from manga_guard.models.ids import new_id


class ReportStatus(str, Enum):
    PENDING = "pending"
    REVIEWED = "reviewed"
    RESOLVED = "resolved"
    DISMISSED = "dismissed"


class ReportKind(str, Enum):
    COMMENT = "comment"
    MANGA = "manga"
    USER = "user"


class ReportReason(str, Enum):
    INAPPROPRIATE_CONTENT = "inappropriate_content"
    SPAM = "spam"
    HARASSMENT = "harassment"
    COPYRIGHT = "copyright"
    FAKE_INFORMATION = "fake_information"
    OFFENSIVE_LANGUAGE = "offensive_language"
    OTHER = "other"


class Report(Base):
    """A report queued for moderators.

    Signed-in reporters are stored by user id, anonymous ones by session id.
    """

    __tablename__ = "reports"
    __table_args__ = (
        CheckConstraint(
            "reporter_id IS NOT NULL OR reporter_session IS NOT NULL",
            name="ck_reports_reporter_identified",
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    reporter_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    reporter_session: Mapped[str | None] = mapped_column(String(100), nullable=True)
    kind: Mapped[str] = mapped_column(String(16), nullable=False)
    comment_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=True,
    )
    manga_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("manga.id", ondelete="CASCADE"),
        nullable=True,
    )
    reported_user_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    reason: Mapped[str] = mapped_column(String(32), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=ReportStatus.PENDING.value,
        index=True,
    )
    reviewed_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
