"""Queue of comments held for human review."""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from manga_guard.core.errors import ValidationFailed
from manga_guard.core.roles import Capability
from manga_guard.db.session import commit
from manga_guard.models.comment import Comment
from manga_guard.services.actors import Actor
from manga_guard.services.comments import active_comments, get_comment

logger = logging.getLogger(__name__)


def pending_reviews(db: Session, actor: Actor, limit: int = 50) -> list[Comment]:
    """Return flagged comments, oldest first."""
    actor.require(Capability.VIEW_REPORTS, message="غير مسموح بعرض قائمة المراجعة")
    return (
        active_comments(db)
        .filter(Comment.needs_review.is_(True))
        .order_by(Comment.created_at.asc())
        .limit(limit)
        .all()
    )


def resolve_review(
    db: Session,
    actor: Actor,
    comment_id: str,
    *,
    approve: bool,
    reason: str | None = None,
) -> Comment:
    """Approve a flagged comment or remove it.

    Approval clears the flag and leaves the content untouched. Rejection
    tombstones the comment with the given reason.
    """
    actor.require(Capability.RESOLVE_REPORTS, message="غير مسموح بمعالجة المراجعات")
    comment = get_comment(db, comment_id)
    if not comment.needs_review:
        raise ValidationFailed("Comment is not awaiting review")

    comment.needs_review = False
    if not approve:
        comment.is_deleted = True
        comment.deleted_by = actor.user_id
        comment.deleted_reason = reason or "rejected in review"
    commit(db)
    db.refresh(comment)
    logger.info(
        "Review of %s resolved by %s: %s",
        comment_id,
        actor.user_id,
        "approved" if approve else "removed",
    )
    return comment
