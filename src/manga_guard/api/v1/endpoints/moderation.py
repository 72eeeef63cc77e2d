"""Moderation endpoints: content checks and the review queue."""

from __future__ import annotations

from fastapi import APIRouter, Query

from manga_guard.api.v1.dependencies import CurrentUserDep, SessionDep
from manga_guard.core.settings import settings
from manga_guard.models.comment import Comment
from manga_guard.schemas.comment import CommentResponse
from manga_guard.schemas.moderation import (
    ModerationCheckRequest,
    ModerationCheckResponse,
    ReviewResolution,
)
from manga_guard.services import moderation, review

router = APIRouter(prefix="/moderation", tags=["moderation"])


@router.post("/check", response_model=ModerationCheckResponse)
def check_content(payload: ModerationCheckRequest) -> ModerationCheckResponse:
    """Evaluate text the way comment submission would, without storing it.

    Spam scoring only runs on text that passes validation, as on submission.
    """
    verdict = moderation.moderate(payload.content)
    validation = moderation.validate_comment_content(
        payload.content,
        max_length=settings.comment_max_length,
        min_length=settings.comment_min_length,
    )
    is_spam = validation.is_valid and moderation.detect_spam(
        payload.content,
        payload.history,
        threshold=settings.spam_similarity_threshold,
    )
    return ModerationCheckResponse(
        severity=verdict.severity.value,
        is_clean=verdict.is_clean,
        filtered_content=verdict.filtered_content,
        detected_words=verdict.detected_words,
        needs_manual_review=verdict.needs_manual_review,
        is_valid=validation.is_valid,
        errors=validation.errors,
        warnings=validation.warnings,
        is_spam=is_spam,
        quality_score=moderation.score_comment_quality(payload.content),
    )


@router.get("/queue", response_model=list[CommentResponse])
async def get_review_queue(
    actor: CurrentUserDep,
    db: SessionDep,
    limit: int = Query(50, ge=1, le=100),
) -> list[Comment]:
    """Get comments currently held for review."""
    return review.pending_reviews(db, actor, limit=limit)


@router.post("/queue/{comment_id}/resolve", response_model=CommentResponse)
async def resolve_review_item(
    comment_id: str,
    resolution: ReviewResolution,
    actor: CurrentUserDep,
    db: SessionDep,
) -> Comment:
    """Approve a held comment or remove it."""
    return review.resolve_review(
        db,
        actor,
        comment_id,
        approve=resolution.approve,
        reason=resolution.reason,
    )
