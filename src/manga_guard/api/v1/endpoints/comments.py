"""Comment endpoints for the Manga Guard API."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from fastapi import APIRouter, Query, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from manga_guard.api.v1.dependencies import ActorDep, CurrentUserDep, SessionDep
from manga_guard.core.errors import MangaGuardError, ValidationFailed
from manga_guard.models.comment import Comment, ReactionType
from manga_guard.models.report import ReportKind, ReportReason
from manga_guard.schemas.comment import (
    CommentActionRequest,
    CommentCreate,
    CommentNodeResponse,
    CommentResponse,
    CommentSubmissionResponse,
    CommentUpdate,
    ReactionRequest,
    ReactionTallyResponse,
)
from manga_guard.services import comments, reactions
from manga_guard.services.actors import Actor
from manga_guard.services.reports import submit_report

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/comments", tags=["comments"])


@router.get("/", response_model=list[CommentNodeResponse])
async def list_comments(
    actor: ActorDep,
    db: SessionDep,
    manga_id: str | None = Query(None),
    chapter_id: str | None = Query(None),
) -> list[CommentNodeResponse]:
    """List the visible comment tree for a chapter or a manga page."""
    nodes = comments.list_comments(db, actor, manga_id=manga_id, chapter_id=chapter_id)
    return [CommentNodeResponse.from_node(node) for node in nodes]


@router.get("/audit", response_model=list[CommentResponse])
async def list_comments_for_audit(
    actor: CurrentUserDep,
    db: SessionDep,
    manga_id: str | None = Query(None),
    chapter_id: str | None = Query(None),
) -> list[Comment]:
    """List every comment in scope, deleted ones included."""
    return comments.list_audit(db, actor, manga_id=manga_id, chapter_id=chapter_id)


@router.post("/", response_model=CommentSubmissionResponse, status_code=status.HTTP_201_CREATED)
def create_comment(
    comment_data: CommentCreate,
    actor: ActorDep,
    db: SessionDep,
) -> CommentSubmissionResponse:
    """Post a comment or a reply."""
    submission = comments.create_comment(
        db,
        actor,
        content=comment_data.content,
        chapter_id=comment_data.chapter_id,
        manga_id=comment_data.manga_id,
        parent_id=comment_data.parent_id,
        is_spoiler=comment_data.is_spoiler,
    )
    return CommentSubmissionResponse.from_submission(submission)


@router.patch("/{comment_id}", response_model=CommentSubmissionResponse)
def update_comment(
    comment_id: str,
    comment_data: CommentUpdate,
    actor: ActorDep,
    db: SessionDep,
) -> CommentSubmissionResponse:
    submission = comments.edit_comment(
        db,
        actor,
        comment_id,
        content=comment_data.content,
        is_spoiler=comment_data.is_spoiler,
    )
    return CommentSubmissionResponse.from_submission(submission)


@router.delete("/{comment_id}", response_model=CommentResponse)
async def delete_comment(
    comment_id: str,
    actor: ActorDep,
    db: SessionDep,
    reason: str | None = Query(None, max_length=500),
) -> Comment:
    """Soft-delete a comment; the row is kept as a tombstone."""
    return comments.delete_comment(db, actor, comment_id, reason=reason)


@router.post("/{comment_id}/pin", response_model=CommentResponse)
async def pin_comment(comment_id: str, actor: CurrentUserDep, db: SessionDep) -> Comment:
    return comments.set_pinned(db, actor, comment_id, True)


@router.delete("/{comment_id}/pin", response_model=CommentResponse)
async def unpin_comment(comment_id: str, actor: CurrentUserDep, db: SessionDep) -> Comment:
    return comments.set_pinned(db, actor, comment_id, False)


@router.put("/{comment_id}/reaction", response_model=ReactionTallyResponse)
async def set_reaction(
    comment_id: str,
    reaction: ReactionRequest,
    actor: CurrentUserDep,
    db: SessionDep,
) -> ReactionTallyResponse:
    """Set the caller's reaction, replacing any previous one."""
    counts = comments.react(db, actor, comment_id, reaction.reaction_type)
    return ReactionTallyResponse(
        comment_id=comment_id,
        reactions=counts,
        user_reaction=reaction.reaction_type.value,
    )


@router.delete("/{comment_id}/reaction", response_model=ReactionTallyResponse)
async def remove_reaction(comment_id: str, actor: CurrentUserDep, db: SessionDep) -> ReactionTallyResponse:
    counts = comments.remove_reaction(db, actor, comment_id)
    return ReactionTallyResponse(comment_id=comment_id, reactions=counts)


@router.get("/{comment_id}/reactions", response_model=ReactionTallyResponse)
async def get_reactions(comment_id: str, actor: ActorDep, db: SessionDep) -> ReactionTallyResponse:
    comments.get_comment(db, comment_id)
    return ReactionTallyResponse(
        comment_id=comment_id,
        reactions=reactions.tally(db, comment_id),
        user_reaction=reactions.user_reaction(db, comment_id, actor.user_id),
    )


# JSON action endpoint

def _required(value: Any, message: str) -> Any:
    if value is None or value == "":
        raise ValidationFailed(message)
    return value


def _serialize(comment: Comment) -> dict[str, Any]:
    return CommentResponse.model_validate(comment).model_dump(mode="json")


def _action_create(db: Session, actor: Actor, body: CommentActionRequest) -> dict[str, Any]:
    _required(body.content, "المحتوى ومعرف الفصل مطلوبان")
    _required(body.chapter_id or body.manga_id, "المحتوى ومعرف الفصل مطلوبان")
    submission = comments.create_comment(
        db,
        actor,
        content=body.content,
        chapter_id=body.chapter_id,
        manga_id=body.manga_id,
        parent_id=body.parent_id,
        is_spoiler=bool(body.is_spoiler),
    )
    return {
        "comment": _serialize(submission.comment),
        "needsReview": submission.comment.needs_review,
        "warnings": submission.warnings,
    }


def _action_update(db: Session, actor: Actor, body: CommentActionRequest) -> dict[str, Any]:
    comment_id = _required(body.comment_id, "معرف التعليق والمحتوى مطلوبان")
    content = _required(body.content, "معرف التعليق والمحتوى مطلوبان")
    submission = comments.edit_comment(db, actor, comment_id, content=content, is_spoiler=body.is_spoiler)
    return {"comment": _serialize(submission.comment), "warnings": submission.warnings}


def _action_delete(db: Session, actor: Actor, body: CommentActionRequest) -> dict[str, Any]:
    comment_id = _required(body.comment_id, "معرف التعليق مطلوب")
    comments.delete_comment(db, actor, comment_id, reason=body.reason)
    return {}


def _action_like(db: Session, actor: Actor, body: CommentActionRequest) -> dict[str, Any]:
    comment_id = _required(body.comment_id, "معرف التعليق ونوع الإعجاب مطلوبان")
    is_like = _required(body.is_like, "معرف التعليق ونوع الإعجاب مطلوبان")
    reaction = ReactionType.LIKE if is_like else ReactionType.DISLIKE
    return {"reactions": comments.react(db, actor, comment_id, reaction)}


def _action_react(db: Session, actor: Actor, body: CommentActionRequest) -> dict[str, Any]:
    comment_id = _required(body.comment_id, "معرف التعليق ونوع التفاعل مطلوبان")
    reaction = _required(body.reaction_type, "معرف التعليق ونوع التفاعل مطلوبان")
    return {"reactions": comments.react(db, actor, comment_id, reaction)}


def _action_report(db: Session, actor: Actor, body: CommentActionRequest) -> dict[str, Any]:
    comment_id = _required(body.comment_id, "معرف التعليق والسبب مطلوبان")
    reason_text = _required(body.reason, "معرف التعليق والسبب مطلوبان")
    try:
        reason = ReportReason(reason_text)
        description = body.description
    except ValueError:
        # Free-text reasons are kept as the description
        reason = ReportReason.OTHER
        description = body.description or reason_text
    report = submit_report(
        db,
        actor,
        kind=ReportKind.COMMENT,
        target_id=comment_id,
        reason=reason,
        description=description,
    )
    return {"reportId": report.id}


def _action_hide(db: Session, actor: Actor, body: CommentActionRequest) -> dict[str, Any]:
    comment_id = _required(body.comment_id, "معرف التعليق مطلوب")
    comments.hide_comment(db, actor, comment_id, reason=body.reason)
    return {}


def _action_pin(db: Session, actor: Actor, body: CommentActionRequest) -> dict[str, Any]:
    comment_id = _required(body.comment_id, "معرف التعليق مطلوب")
    return {"comment": _serialize(comments.set_pinned(db, actor, comment_id, True))}


def _action_unpin(db: Session, actor: Actor, body: CommentActionRequest) -> dict[str, Any]:
    comment_id = _required(body.comment_id, "معرف التعليق مطلوب")
    return {"comment": _serialize(comments.set_pinned(db, actor, comment_id, False))}


_ACTIONS: dict[str, Callable[[Session, Actor, CommentActionRequest], dict[str, Any]]] = {
    "create": _action_create,
    "update": _action_update,
    "delete": _action_delete,
    "like": _action_like,
    "react": _action_react,
    "report": _action_report,
    "hide": _action_hide,
    "pin": _action_pin,
    "unpin": _action_unpin,
}

# Status codes the action endpoint passes through; anything else is a 500
_PASSTHROUGH_STATUS = frozenset({400, 403, 404})


@router.post("/actions")
def perform_comment_action(
    body: CommentActionRequest,
    actor: ActorDep,
    db: SessionDep,
) -> JSONResponse:
    """Single entry point taking ``{action, ...}`` bodies.

    Answers ``{"success": true, ...}`` or ``{"error": message}``.
    """
    try:
        handler = _ACTIONS.get(body.action)
        if handler is None:
            raise ValidationFailed("عملية غير مدعومة")
        payload = handler(db, actor, body)
    except MangaGuardError as err:
        status_code = err.status_code if err.status_code in _PASSTHROUGH_STATUS else 500
        logger.warning("Comment action %s failed: %s", body.action, err.message)
        return JSONResponse({"error": err.message}, status_code=status_code)
    return JSONResponse(jsonable_encoder({"success": True, **payload}))
