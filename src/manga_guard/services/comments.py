"""Comment lifecycle: create, edit, delete, pin, react and list.

A comment moves from active to edited (``updated_at`` advances) to deleted.
Deletion is a tombstone: the row stays, ``is_deleted`` flips and the
actor and reason are recorded. Pinning is independent of that chain and
only applies to top-level comments.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy.orm import Query, Session

from manga_guard.core.errors import NotFound, PermissionDenied, ValidationFailed
from manga_guard.core.roles import Capability
from manga_guard.core.settings import settings
from manga_guard.db.session import commit
from manga_guard.db.time import utcnow
from manga_guard.models.comment import (
    Comment,
    CommentPlacement,
    ReactionType,
    Reply,
    TopLevel,
)
from manga_guard.models.content import Chapter, Manga
from manga_guard.services import reactions
from manga_guard.services.actors import Actor
from manga_guard.services.bans import ensure_not_banned
from manga_guard.services.moderation import (
    ModerationVerdict,
    Severity,
    detect_spam,
    moderate,
    validate_comment_content,
)

logger = logging.getLogger(__name__)

_DELETE_CAPABILITIES = (Capability.DELETE_ANY_COMMENT, Capability.MODERATE_COMMENTS)
_PIN_CAPABILITIES = (Capability.PIN_COMMENTS, Capability.PUBLISH_DIRECTLY)


@dataclass
class CommentSubmission:
    """Result of a create or edit."""

    comment: Comment
    verdict: ModerationVerdict
    warnings: list[str] = field(default_factory=list)
    flagged_as_spam: bool = False


@dataclass
class CommentNode:
    """A comment prepared for display to a particular viewer."""

    comment: Comment
    reactions: dict[str, int]
    user_reaction: str | None
    can_edit: bool
    can_delete: bool
    can_pin: bool
    can_report: bool
    replies: list[CommentNode] = field(default_factory=list)

    @property
    def reply_count(self) -> int:
        return len(self.replies)


def active_comments(db: Session) -> Query[Comment]:
    """Projection that excludes tombstones."""
    return db.query(Comment).filter(Comment.is_deleted.is_(False))


def audit_comments(db: Session) -> Query[Comment]:
    """Projection that includes tombstones."""
    return db.query(Comment)


def get_comment(db: Session, comment_id: str, *, include_deleted: bool = False) -> Comment:
    """Return a comment or raise :class:`NotFound`."""
    query = audit_comments(db) if include_deleted else active_comments(db)
    comment = query.filter(Comment.id == comment_id).first()
    if comment is None:
        raise NotFound("Comment not found")
    return comment


def _resolve_target(
    db: Session,
    manga_id: str | None,
    chapter_id: str | None,
) -> tuple[str, str | None]:
    if chapter_id is not None:
        chapter = db.get(Chapter, chapter_id)
        if chapter is None:
            raise NotFound("Chapter not found")
        if manga_id is not None and manga_id != chapter.manga_id:
            raise ValidationFailed("Chapter does not belong to the given manga")
        return chapter.manga_id, chapter.id
    if manga_id is None:
        raise ValidationFailed("المحتوى ومعرف الفصل مطلوبان")
    if db.get(Manga, manga_id) is None:
        raise NotFound("Manga not found")
    return manga_id, None


def resolve_placement(
    db: Session,
    parent_id: str | None,
    manga_id: str,
    chapter_id: str | None,
) -> CommentPlacement:
    """Work out where a new comment goes in its two-level thread.

    Replying to a reply attaches the new comment to that reply's top-level
    ancestor, so no reply ever has replies of its own.
    """
    if parent_id is None:
        return TopLevel()
    parent = get_comment(db, parent_id)
    if parent.manga_id != manga_id or parent.chapter_id != chapter_id:
        raise ValidationFailed("Parent comment must belong to the same chapter")
    if parent.parent_id is not None:
        root = get_comment(db, parent.parent_id)
        return Reply(parent_id=root.id)
    return Reply(parent_id=parent.id)


def _check_content(content: str) -> tuple[ModerationVerdict, list[str]]:
    validation = validate_comment_content(
        content,
        max_length=settings.comment_max_length,
        min_length=settings.comment_min_length,
    )
    if not validation.is_valid:
        raise ValidationFailed(validation.errors[0], validation.errors)

    verdict = moderate(content)
    if verdict.severity is Severity.SEVERE:
        logger.warning("Rejected severe content; detected=%s", verdict.detected_words)
        raise ValidationFailed(
            "يحتوي التعليق على محتوى محظور",
            [f"محتوى محظور: {word}" for word in verdict.detected_words],
        )
    return verdict, validation.warnings


def _author_history(db: Session, actor: Actor) -> list[str]:
    query = audit_comments(db)
    if actor.user_id is not None:
        query = query.filter(Comment.user_id == actor.user_id)
    elif actor.session_id is not None:
        query = query.filter(Comment.session_id == actor.session_id)
    else:
        return []
    rows = (
        query.with_entities(Comment.content)
        .order_by(Comment.created_at.desc())
        .limit(settings.spam_history_size)
        .all()
    )
    return [row[0] for row in rows]


def create_comment(
    db: Session,
    actor: Actor,
    *,
    content: str,
    chapter_id: str | None = None,
    manga_id: str | None = None,
    parent_id: str | None = None,
    is_spoiler: bool = False,
) -> CommentSubmission:
    """Create a comment or reply after ban, validation and moderation checks.

    Severe content is rejected. Moderate content and spam-like content are
    stored with ``needs_review`` set. Mild terms are replaced before storage.

    Raises:
        PermissionDenied: If the request carries neither user nor session.
        BannedActor: If the user or session is under an active ban.
        ValidationFailed: On hard validation errors or severe content.
        NotFound: If the chapter, manga or parent comment does not exist.
    """
    if not actor.is_identified:
        raise PermissionDenied("Comment author could not be identified")
    ensure_not_banned(db, actor)

    content = content.strip()
    verdict, warnings = _check_content(content)
    target_manga_id, target_chapter_id = _resolve_target(db, manga_id, chapter_id)
    placement = resolve_placement(db, parent_id, target_manga_id, target_chapter_id)

    spam = detect_spam(
        content,
        _author_history(db, actor),
        threshold=settings.spam_similarity_threshold,
    )

    now = utcnow()
    comment = Comment(
        manga_id=target_manga_id,
        chapter_id=target_chapter_id,
        user_id=actor.user_id,
        session_id=None if actor.user_id else actor.session_id,
        parent_id=placement.parent_id if isinstance(placement, Reply) else None,
        content=verdict.filtered_content,
        is_spoiler=is_spoiler,
        needs_review=verdict.needs_manual_review or spam,
        moderation_severity=verdict.severity.value,
        created_at=now,
        updated_at=now,
    )
    db.add(comment)
    commit(db)
    db.refresh(comment)
    logger.info(
        "Comment %s created by user=%s session=%s severity=%s review=%s",
        comment.id,
        actor.user_id,
        comment.session_id,
        verdict.severity.value,
        comment.needs_review,
    )
    return CommentSubmission(
        comment=comment,
        verdict=verdict,
        warnings=warnings,
        flagged_as_spam=spam,
    )


def can_edit(actor: Actor, comment: Comment) -> bool:
    return actor.owns(comment.user_id, comment.session_id) or actor.can(Capability.EDIT_ANY_COMMENT)


def can_delete(actor: Actor, comment: Comment) -> bool:
    return actor.owns(comment.user_id, comment.session_id) or actor.can_any(*_DELETE_CAPABILITIES)


def can_pin(actor: Actor, comment: Comment) -> bool:
    return comment.is_top_level and actor.can_any(*_PIN_CAPABILITIES)


def can_report(actor: Actor, comment: Comment) -> bool:
    return actor.is_identified and not actor.owns(comment.user_id, comment.session_id)


def edit_comment(
    db: Session,
    actor: Actor,
    comment_id: str,
    *,
    content: str,
    is_spoiler: bool | None = None,
) -> CommentSubmission:
    """Replace a comment's content, re-running validation and moderation."""
    comment = get_comment(db, comment_id)
    if not can_edit(actor, comment):
        logger.warning("Edit of %s denied for user=%s", comment_id, actor.user_id)
        raise PermissionDenied("غير مسموح بتعديل هذا التعليق")

    content = content.strip()
    verdict, warnings = _check_content(content)

    comment.content = verdict.filtered_content
    comment.moderation_severity = verdict.severity.value
    comment.needs_review = comment.needs_review or verdict.needs_manual_review
    if is_spoiler is not None:
        comment.is_spoiler = is_spoiler
    comment.edited_by = None if actor.owns(comment.user_id, comment.session_id) else actor.user_id
    comment.updated_at = utcnow()
    commit(db)
    db.refresh(comment)
    return CommentSubmission(comment=comment, verdict=verdict, warnings=warnings)


def delete_comment(
    db: Session,
    actor: Actor,
    comment_id: str,
    *,
    reason: str | None = None,
) -> Comment:
    """Tombstone a comment.

    A reason is only stored when the actor holds a moderation capability;
    authors deleting their own comments need not justify it.
    """
    comment = get_comment(db, comment_id)
    if not can_delete(actor, comment):
        logger.warning("Delete of %s denied for user=%s", comment_id, actor.user_id)
        raise PermissionDenied("غير مسموح بحذف هذا التعليق")
    return _tombstone(db, actor, comment, reason)


def hide_comment(db: Session, actor: Actor, comment_id: str, *, reason: str | None = None) -> Comment:
    """Tombstone a comment as a moderator, regardless of ownership."""
    actor.require(*_DELETE_CAPABILITIES, message="صلاحيات الإشراف مطلوبة")
    comment = get_comment(db, comment_id)
    return _tombstone(db, actor, comment, reason or "hidden by moderator")


def _tombstone(db: Session, actor: Actor, comment: Comment, reason: str | None) -> Comment:
    comment.is_deleted = True
    comment.deleted_by = actor.user_id
    # Anonymous authors are recorded by session
    comment.deleted_by_session = actor.session_id if actor.user_id is None else None
    comment.deleted_reason = reason if actor.can_any(*_DELETE_CAPABILITIES) else None
    commit(db)
    db.refresh(comment)
    logger.info("Comment %s deleted by user=%s session=%s", comment.id, actor.user_id, comment.deleted_by_session)
    return comment


def set_pinned(db: Session, actor: Actor, comment_id: str, pinned: bool) -> Comment:
    """Pin or unpin a top-level comment."""
    actor.require(*_PIN_CAPABILITIES, message="غير مسموح بتثبيت التعليقات")
    comment = get_comment(db, comment_id)
    if not comment.is_top_level:
        raise ValidationFailed("Only top-level comments can be pinned")
    comment.is_pinned = pinned
    commit(db)
    db.refresh(comment)
    return comment


def react(db: Session, actor: Actor, comment_id: str, reaction_type: ReactionType | str) -> dict[str, int]:
    """Set the actor's single reaction on a comment and return the new tally."""
    user_id = actor.require_authenticated("يجب تسجيل الدخول للتفاعل")
    try:
        reaction = ReactionType(reaction_type)
    except ValueError as err:
        raise ValidationFailed(f"Unknown reaction type: {reaction_type}") from err
    get_comment(db, comment_id)
    reactions.set_reaction(db, comment_id, user_id, reaction)
    commit(db)
    return reactions.tally(db, comment_id)


def remove_reaction(db: Session, actor: Actor, comment_id: str) -> dict[str, int]:
    """Drop the actor's reaction on a comment and return the new tally."""
    user_id = actor.require_authenticated("يجب تسجيل الدخول للتفاعل")
    get_comment(db, comment_id)
    reactions.clear_reaction(db, comment_id, user_id)
    commit(db)
    return reactions.tally(db, comment_id)


def _scoped(query: Query[Comment], manga_id: str | None, chapter_id: str | None) -> Query[Comment]:
    if chapter_id is not None:
        return query.filter(Comment.chapter_id == chapter_id)
    if manga_id is None:
        raise ValidationFailed("manga_id or chapter_id is required")
    return query.filter(Comment.manga_id == manga_id, Comment.chapter_id.is_(None))


def list_comments(
    db: Session,
    viewer: Actor,
    *,
    manga_id: str | None = None,
    chapter_id: str | None = None,
) -> list[CommentNode]:
    """Return the visible comment tree.

    Top-level comments come pinned first, then oldest first. Replies sit under
    their parent, oldest first. Replies whose parent is deleted are hidden
    with it.
    """
    base = _scoped(active_comments(db), manga_id, chapter_id)
    top_level = (
        base.filter(Comment.parent_id.is_(None))
        .order_by(Comment.is_pinned.desc(), Comment.created_at.asc())
        .all()
    )
    replies = (
        base.filter(Comment.parent_id.is_not(None))
        .order_by(Comment.created_at.asc())
        .all()
    )

    ids = [c.id for c in top_level] + [c.id for c in replies]
    counts = reactions.tally_many(db, ids)
    mine = reactions.user_reactions(db, ids, viewer.user_id)

    def _node(comment: Comment) -> CommentNode:
        return CommentNode(
            comment=comment,
            reactions=counts[comment.id],
            user_reaction=mine.get(comment.id),
            can_edit=can_edit(viewer, comment),
            can_delete=can_delete(viewer, comment),
            can_pin=can_pin(viewer, comment),
            can_report=can_report(viewer, comment),
        )

    roots = [_node(comment) for comment in top_level]
    by_id = {node.comment.id: node for node in roots}
    for reply in replies:
        parent = by_id.get(reply.parent_id)
        if parent is not None:
            parent.replies.append(_node(reply))
    return roots


def list_audit(
    db: Session,
    actor: Actor,
    *,
    manga_id: str | None = None,
    chapter_id: str | None = None,
) -> list[Comment]:
    """Return every comment in scope, tombstones included, oldest first."""
    actor.require(Capability.MODERATE_COMMENTS, message="صلاحيات الإشراف مطلوبة")
    return _scoped(audit_comments(db), manga_id, chapter_id).order_by(Comment.created_at.asc()).all()
