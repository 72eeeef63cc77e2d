"""Comment-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from manga_guard.models.comment import ReactionType
from manga_guard.services.comments import CommentNode, CommentSubmission

# Hard ceiling on submitted text; the configured comment limit is checked
# by the service so longer text still gets a readable validation error.
MAX_CONTENT_LENGTH = 4000


class CommentCreate(BaseModel):
    """Schema for posting a comment or a reply."""

    content: str = Field(..., max_length=MAX_CONTENT_LENGTH, description="Comment text")
    chapter_id: str | None = Field(None, description="Chapter being discussed")
    manga_id: str | None = Field(None, description="Manga being discussed when no chapter is given")
    parent_id: str | None = Field(None, description="Comment being replied to")
    is_spoiler: bool = False


class CommentUpdate(BaseModel):
    """Schema for editing a comment."""

    content: str = Field(..., max_length=MAX_CONTENT_LENGTH)
    is_spoiler: bool | None = None


class ReactionRequest(BaseModel):
    reaction_type: ReactionType


class CommentResponse(BaseModel):
    """Schema for a stored comment."""

    id: str
    manga_id: str
    chapter_id: str | None
    user_id: str | None
    parent_id: str | None
    content: str
    is_pinned: bool
    is_spoiler: bool
    is_deleted: bool
    is_edited: bool
    needs_review: bool
    moderation_severity: str
    created_at: datetime
    updated_at: datetime
    edited_by: str | None = None
    deleted_by: str | None = None
    deleted_reason: str | None = None

    model_config = ConfigDict(from_attributes=True)


class CommentSubmissionResponse(BaseModel):
    """Stored comment plus the moderation outcome of the submitted text."""

    comment: CommentResponse
    severity: str
    detected_words: list[str]
    needs_manual_review: bool
    warnings: list[str]
    flagged_as_spam: bool

    @classmethod
    def from_submission(cls, submission: CommentSubmission) -> CommentSubmissionResponse:
        return cls(
            comment=CommentResponse.model_validate(submission.comment),
            severity=submission.verdict.severity.value,
            detected_words=submission.verdict.detected_words,
            needs_manual_review=submission.comment.needs_review,
            warnings=submission.warnings,
            flagged_as_spam=submission.flagged_as_spam,
        )


class CommentNodeResponse(CommentResponse):
    """A comment in the listing tree, decorated for the viewer."""

    reactions: dict[str, int]
    user_reaction: str | None
    can_edit: bool
    can_delete: bool
    can_pin: bool
    can_report: bool
    reply_count: int
    replies: list[CommentNodeResponse] = Field(default_factory=list)

    @classmethod
    def from_node(cls, node: CommentNode) -> CommentNodeResponse:
        base = CommentResponse.model_validate(node.comment).model_dump()
        return cls(
            **base,
            reactions=node.reactions,
            user_reaction=node.user_reaction,
            can_edit=node.can_edit,
            can_delete=node.can_delete,
            can_pin=node.can_pin,
            can_report=node.can_report,
            reply_count=node.reply_count,
            replies=[cls.from_node(reply) for reply in node.replies],
        )


class ReactionTallyResponse(BaseModel):
    comment_id: str
    reactions: dict[str, int]
    user_reaction: str | None = None


class CommentActionRequest(BaseModel):
    """JSON body of the action endpoint, with the front end's camelCase field names."""

    action: str
    comment_id: str | None = Field(None, alias="commentId")
    chapter_id: str | None = Field(None, alias="chapterId")
    manga_id: str | None = Field(None, alias="mangaId")
    content: str | None = Field(None, max_length=MAX_CONTENT_LENGTH)
    parent_id: str | None = Field(None, alias="parentId")
    is_spoiler: bool | None = Field(None, alias="isSpoiler")
    is_like: bool | None = Field(None, alias="isLike")
    reaction_type: ReactionType | None = Field(None, alias="reactionType")
    reason: str | None = None
    description: str | None = None

    model_config = ConfigDict(populate_by_name=True)
