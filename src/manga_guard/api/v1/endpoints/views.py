"""View tracking endpoint."""

from fastapi import APIRouter

from manga_guard.api.v1.dependencies import ActorDep, SessionDep
from manga_guard.schemas.view import ViewTrackRequest, ViewTrackResponse
from manga_guard.services.views import track_view

router = APIRouter(prefix="/views", tags=["views"])


@router.post("/", response_model=ViewTrackResponse)
async def record_view(payload: ViewTrackRequest, actor: ActorDep, db: SessionDep) -> ViewTrackResponse:
    """Count a view once per viewer for a manga or chapter."""
    result = track_view(
        db,
        manga_id=payload.manga_id,
        chapter_id=payload.chapter_id,
        user_id=actor.user_id,
        session_id=actor.session_id,
    )
    return ViewTrackResponse(new_view=result.new_view, views_count=result.views_count)
