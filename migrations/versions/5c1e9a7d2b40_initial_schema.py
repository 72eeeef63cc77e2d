"""initial schema

Revision ID: 5c1e9a7d2b40
Revises:
Create Date: 2026-10-19 09:12:41.518203

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5c1e9a7d2b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# One view per viewer and target; NULL chapter_id needs its own partial index.
_VIEWER_INDEXES = (
    ("uq_manga_views_manga_user", ["manga_id", "user_id"], "chapter_id IS NULL AND user_id IS NOT NULL"),
    (
        "uq_manga_views_chapter_user",
        ["manga_id", "chapter_id", "user_id"],
        "chapter_id IS NOT NULL AND user_id IS NOT NULL",
    ),
    ("uq_manga_views_manga_session", ["manga_id", "session_id"], "chapter_id IS NULL AND user_id IS NULL"),
    (
        "uq_manga_views_chapter_session",
        ["manga_id", "chapter_id", "session_id"],
        "chapter_id IS NOT NULL AND user_id IS NULL",
    ),
)


def upgrade() -> None:
    """Create profiles, content, comment, ban, report and view tables."""
    op.create_table(
        "profiles",
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("display_name", sa.Text(), nullable=True),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        sa.Column("role", sa.String(length=32), nullable=False, server_default="user"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("user_id"),
    )
    op.create_table(
        "manga",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=True),
        sa.Column("views_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug"),
    )
    op.create_table(
        "chapters",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("manga_id", sa.String(length=36), nullable=False),
        sa.Column("chapter_number", sa.Numeric(8, 2), nullable=False),
        sa.Column("title", sa.Text(), nullable=True),
        sa.Column("views_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["manga_id"], ["manga.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_chapters_manga_id", "chapters", ["manga_id"])

    op.create_table(
        "comments",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("manga_id", sa.String(length=36), nullable=False),
        sa.Column("chapter_id", sa.String(length=36), nullable=True),
        sa.Column("user_id", sa.String(length=36), nullable=True),
        sa.Column("session_id", sa.String(length=100), nullable=True),
        sa.Column("parent_id", sa.String(length=36), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_pinned", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_spoiler", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("needs_review", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("moderation_severity", sa.String(length=16), nullable=False, server_default="clean"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("edited_by", sa.String(length=36), nullable=True),
        sa.Column("deleted_by", sa.String(length=36), nullable=True),
        sa.Column("deleted_by_session", sa.String(length=100), nullable=True),
        sa.Column("deleted_reason", sa.Text(), nullable=True),
        sa.CheckConstraint(
            "user_id IS NOT NULL OR session_id IS NOT NULL",
            name="ck_comments_author_identified",
        ),
        sa.ForeignKeyConstraint(["manga_id"], ["manga.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["chapter_id"], ["chapters.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["parent_id"], ["comments.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_comments_parent_id", "comments", ["parent_id"])
    op.create_index("ix_comments_chapter_listing", "comments", ["chapter_id", "is_deleted", "created_at"])
    op.create_index("ix_comments_manga_listing", "comments", ["manga_id", "is_deleted", "created_at"])
    op.create_index("ix_comments_author", "comments", ["user_id", "created_at"])

    op.create_table(
        "comment_reactions",
        sa.Column("comment_id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("reaction_type", sa.String(length=16), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "reaction_type IN ('like', 'dislike', 'love', 'laugh', 'angry', 'sad')",
            name="ck_comment_reactions_type",
        ),
        sa.ForeignKeyConstraint(["comment_id"], ["comments.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("comment_id", "user_id"),
    )
    op.create_index("ix_comment_reactions_comment_id", "comment_reactions", ["comment_id"])

    op.create_table(
        "banned_users",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=True),
        sa.Column("session_id", sa.String(length=100), nullable=True),
        sa.Column("restriction_type", sa.String(length=16), nullable=False, server_default="comment_ban"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("banned_by", sa.String(length=36), nullable=True),
        sa.Column("banned_until", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "user_id IS NOT NULL OR session_id IS NOT NULL",
            name="ck_banned_users_target",
        ),
        sa.CheckConstraint(
            "restriction_type IN ('comment_ban', 'read_ban', 'upload_ban', 'complete_ban')",
            name="ck_banned_users_restriction_type",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_banned_users_user_id", "banned_users", ["user_id"])
    op.create_index("ix_banned_users_session_id", "banned_users", ["session_id"])

    op.create_table(
        "reports",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("reporter_id", sa.String(length=36), nullable=True),
        sa.Column("reporter_session", sa.String(length=100), nullable=True),
        sa.Column("kind", sa.String(length=16), nullable=False),
        sa.Column("comment_id", sa.String(length=36), nullable=True),
        sa.Column("manga_id", sa.String(length=36), nullable=True),
        sa.Column("reported_user_id", sa.String(length=36), nullable=True),
        sa.Column("reason", sa.String(length=32), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="pending"),
        sa.Column("reviewed_by", sa.String(length=36), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "reporter_id IS NOT NULL OR reporter_session IS NOT NULL",
            name="ck_reports_reporter_identified",
        ),
        sa.ForeignKeyConstraint(["comment_id"], ["comments.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["manga_id"], ["manga.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_reports_status", "reports", ["status"])

    op.create_table(
        "manga_views",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("manga_id", sa.String(length=36), nullable=False),
        sa.Column("chapter_id", sa.String(length=36), nullable=True),
        sa.Column("user_id", sa.String(length=36), nullable=True),
        sa.Column("session_id", sa.String(length=100), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["manga_id"], ["manga.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["chapter_id"], ["chapters.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    for name, columns, where in _VIEWER_INDEXES:
        op.create_index(
            name,
            "manga_views",
            columns,
            unique=True,
            sqlite_where=sa.text(where),
            postgresql_where=sa.text(where),
        )


def downgrade() -> None:
    """Drop every table created by this revision."""
    for name, _columns, _where in reversed(_VIEWER_INDEXES):
        op.drop_index(name, table_name="manga_views")
    op.drop_table("manga_views")
    op.drop_index("ix_reports_status", table_name="reports")
    op.drop_table("reports")
    op.drop_index("ix_banned_users_session_id", table_name="banned_users")
    op.drop_index("ix_banned_users_user_id", table_name="banned_users")
    op.drop_table("banned_users")
    op.drop_index("ix_comment_reactions_comment_id", table_name="comment_reactions")
    op.drop_table("comment_reactions")
    op.drop_index("ix_comments_author", table_name="comments")
    op.drop_index("ix_comments_manga_listing", table_name="comments")
    op.drop_index("ix_comments_chapter_listing", table_name="comments")
    op.drop_index("ix_comments_parent_id", table_name="comments")
    op.drop_table("comments")
    op.drop_index("ix_chapters_manga_id", table_name="chapters")
    op.drop_table("chapters")
    op.drop_table("manga")
    op.drop_table("profiles")
