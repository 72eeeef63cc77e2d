"""Report-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from manga_guard.models.report import ReportKind, ReportReason, ReportStatus


class ReportCreate(BaseModel):
    kind: ReportKind
    target_id: str = Field(..., description="Comment, manga or user id depending on kind")
    reason: ReportReason
    description: str | None = Field(None, max_length=1000)


class ReportStatusUpdate(BaseModel):
    status: ReportStatus


class ReportResponse(BaseModel):
    id: str
    reporter_id: str | None
    kind: str
    comment_id: str | None
    manga_id: str | None
    reported_user_id: str | None
    reason: str
    description: str | None
    status: str
    reviewed_by: str | None
    reviewed_at: datetime | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
