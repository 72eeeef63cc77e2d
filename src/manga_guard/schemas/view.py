"""View tracking schemas."""

from pydantic import BaseModel


class ViewTrackRequest(BaseModel):
    manga_id: str
    chapter_id: str | None = None


class ViewTrackResponse(BaseModel):
    success: bool = True
    new_view: bool
    views_count: int
