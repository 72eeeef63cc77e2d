"""Report endpoints for the Manga Guard API."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from manga_guard.api.v1.dependencies import ActorDep, CurrentUserDep, SessionDep
from manga_guard.models.report import Report, ReportStatus
from manga_guard.schemas.report import ReportCreate, ReportResponse, ReportStatusUpdate
from manga_guard.services import reports

router = APIRouter(prefix="/reports", tags=["reports"])


@router.post("/", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
async def create_report(report_data: ReportCreate, actor: ActorDep, db: SessionDep) -> Report:
    """File a report; anonymous visitors report under their session."""
    return reports.submit_report(
        db,
        actor,
        kind=report_data.kind,
        target_id=report_data.target_id,
        reason=report_data.reason,
        description=report_data.description,
    )


@router.get("/", response_model=list[ReportResponse])
async def list_reports(
    actor: CurrentUserDep,
    db: SessionDep,
    status_filter: ReportStatus | None = Query(None, alias="status"),
    limit: int = Query(50, ge=1, le=100),
) -> list[Report]:
    return reports.list_reports(db, actor, status=status_filter, limit=limit)


@router.get("/stats")
async def get_report_stats(actor: CurrentUserDep, db: SessionDep) -> dict[str, int]:
    """Return report counts per status plus a total."""
    return reports.report_stats(db, actor)


@router.patch("/{report_id}", response_model=ReportResponse)
async def update_report(
    report_id: str,
    update: ReportStatusUpdate,
    actor: CurrentUserDep,
    db: SessionDep,
) -> Report:
    return reports.update_report_status(db, actor, report_id, update.status)
