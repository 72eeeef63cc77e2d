"""Moderation-related Pydantic schemas."""

from typing import Annotated

from pydantic import BaseModel, Field

from manga_guard.schemas.comment import MAX_CONTENT_LENGTH

MAX_HISTORY_ITEMS = 20
MAX_HISTORY_ITEM_LENGTH = 2000

HistoryItem = Annotated[str, Field(max_length=MAX_HISTORY_ITEM_LENGTH)]


class ModerationCheckRequest(BaseModel):
    """Text to evaluate without storing anything."""

    content: str = Field(..., max_length=MAX_CONTENT_LENGTH)
    history: list[HistoryItem] = Field(
        default_factory=list,
        max_length=MAX_HISTORY_ITEMS,
        description="Author's previous comments",
    )


class ModerationCheckResponse(BaseModel):
    severity: str
    is_clean: bool
    filtered_content: str
    detected_words: list[str]
    needs_manual_review: bool
    is_valid: bool
    errors: list[str]
    warnings: list[str]
    is_spam: bool
    quality_score: int = Field(..., ge=0, le=100)


class ReviewResolution(BaseModel):
    """Decision on a comment held for review."""

    approve: bool
    reason: str | None = None
