"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .comment import (
    CommentActionRequest,
    CommentCreate,
    CommentNodeResponse,
    CommentResponse,
    CommentSubmissionResponse,
    CommentUpdate,
    ReactionRequest,
    ReactionTallyResponse,
)
from .moderation import ModerationCheckRequest, ModerationCheckResponse, ReviewResolution
from .report import ReportCreate, ReportResponse, ReportStatusUpdate
from .user import BanCreate, BanLift, BanResponse, ProfileResponse, RoleChange, RoleInfo
from .view import ViewTrackRequest, ViewTrackResponse

__all__ = [
    "CommentActionRequest", "CommentCreate", "CommentNodeResponse", "CommentResponse",
    "CommentSubmissionResponse", "CommentUpdate", "ReactionRequest", "ReactionTallyResponse",
    "ModerationCheckRequest", "ModerationCheckResponse", "ReviewResolution",
    "ReportCreate", "ReportResponse", "ReportStatusUpdate",
    "BanCreate", "BanLift", "BanResponse", "ProfileResponse", "RoleChange", "RoleInfo",
    "ViewTrackRequest", "ViewTrackResponse",
]
