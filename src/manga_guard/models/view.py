"""Unique view records used for read tracking."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column

from manga_guard.db.session import Base
from manga_guard.db.time import utcnow
from manga_guard.models.ids import new_id


def _unique_viewer_index(name: str, columns: tuple[str, ...], where: str) -> Index:
    # NULL chapter_id never collides in a plain unique index, so manga-level
    # and chapter-level views get separate partial indexes.
    clause = text(where)
    return Index(name, *columns, unique=True, sqlite_where=clause, postgresql_where=clause)


class MangaView(Base):
    """One row per viewer (user or session) and manga or chapter."""

    __tablename__ = "manga_views"
    __table_args__ = (
        _unique_viewer_index(
            "uq_manga_views_manga_user",
            ("manga_id", "user_id"),
            "chapter_id IS NULL AND user_id IS NOT NULL",
        ),
        _unique_viewer_index(
            "uq_manga_views_chapter_user",
            ("manga_id", "chapter_id", "user_id"),
            "chapter_id IS NOT NULL AND user_id IS NOT NULL",
        ),
        _unique_viewer_index(
            "uq_manga_views_manga_session",
            ("manga_id", "session_id"),
            "chapter_id IS NULL AND user_id IS NULL",
        ),
        _unique_viewer_index(
            "uq_manga_views_chapter_session",
            ("manga_id", "chapter_id", "session_id"),
            "chapter_id IS NOT NULL AND user_id IS NULL",
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    manga_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("manga.id", ondelete="CASCADE"),
        nullable=False,
    )
    chapter_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("chapters.id", ondelete="CASCADE"),
        nullable=True,
    )
    user_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    session_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
