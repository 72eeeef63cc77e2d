"""Models for chapter comments and their reactions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from manga_guard.db.session import Base
from manga_guard.db.time import utcnow
from manga_guard.models.ids import new_id


class ReactionType(str, Enum):
    """Fixed set of reactions a user may leave on a comment."""

    LIKE = "like"
    DISLIKE = "dislike"
    LOVE = "love"
    LAUGH = "laugh"
    ANGRY = "angry"
    SAD = "sad"


@dataclass(frozen=True)
class TopLevel:
    """Placement of a comment at the root of a thread."""


@dataclass(frozen=True)
class Reply:
    """Placement of a comment directly under a top-level comment."""

    parent_id: str


CommentPlacement = TopLevel | Reply


class Comment(Base):
    """A comment on a manga or one of its chapters.

    Rows are never removed; deletion flips ``is_deleted`` and records who did
    it. Replies always point at a top-level comment, so threads are at most
    two levels deep.
    """

    __tablename__ = "comments"
    __table_args__ = (
        Index("ix_comments_chapter_listing", "chapter_id", "is_deleted", "created_at"),
        Index("ix_comments_manga_listing", "manga_id", "is_deleted", "created_at"),
        Index("ix_comments_author", "user_id", "created_at"),
        CheckConstraint(
            "user_id IS NOT NULL OR session_id IS NOT NULL",
            name="ck_comments_author_identified",
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
    parent_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("comments.id"),
        nullable=True,
        index=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)

    is_pinned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_spoiler: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Set for moderate-severity or spam-like content awaiting a reviewer.
    needs_review: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    moderation_severity: Mapped[str] = mapped_column(String(16), nullable=False, default="clean")

    # created_at == updated_at means the comment was never edited.
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    edited_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    deleted_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    deleted_by_session: Mapped[str | None] = mapped_column(String(100), nullable=True)
    deleted_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    @property
    def placement(self) -> CommentPlacement:
        if self.parent_id is None:
            return TopLevel()
        return Reply(parent_id=self.parent_id)

    @property
    def is_top_level(self) -> bool:
        return self.parent_id is None

    @property
    def is_edited(self) -> bool:
        return self.updated_at != self.created_at


class CommentReaction(Base):
    """A single user's reaction to a comment."""

    __tablename__ = "comment_reactions"
    __table_args__ = (
        CheckConstraint(
            "reaction_type IN ('like', 'dislike', 'love', 'laugh', 'angry', 'sad')",
            name="ck_comment_reactions_type",
        ),
        Index("ix_comment_reactions_comment_id", "comment_id"),
    )

    # Composite primary key keeps one reaction per user per comment.
    comment_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("comments.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    reaction_type: Mapped[str] = mapped_column(String(16), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
