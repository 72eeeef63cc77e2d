"""Reports filed by readers and their review status."""
from __future__ import annotations

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from manga_guard.core.errors import NotFound, PermissionDenied, ValidationFailed
from manga_guard.core.roles import Capability
from manga_guard.db.session import commit
from manga_guard.db.time import utcnow
from manga_guard.models.content import Manga
from manga_guard.models.profile import Profile
from manga_guard.models.report import Report, ReportKind, ReportReason, ReportStatus
from manga_guard.services.actors import Actor
from manga_guard.services.comments import get_comment

logger = logging.getLogger(__name__)


def submit_report(
    db: Session,
    actor: Actor,
    *,
    kind: ReportKind,
    target_id: str,
    reason: ReportReason,
    description: str | None = None,
) -> Report:
    """File a report against a comment, a manga or a user.

    Anonymous visitors report under their session id.
    """
    if not actor.is_identified:
        raise PermissionDenied("تعذر تحديد هوية المبلّغ")
    reporter_id = actor.user_id
    report = Report(
        reporter_id=reporter_id,
        reporter_session=None if reporter_id else actor.session_id,
        kind=kind.value,
        reason=reason.value,
        description=description,
        status=ReportStatus.PENDING.value,
    )

    if kind is ReportKind.COMMENT:
        comment = get_comment(db, target_id)
        if actor.owns(comment.user_id, comment.session_id):
            raise ValidationFailed("لا يمكنك الإبلاغ عن تعليقك")
        report.comment_id = comment.id
        report.reported_user_id = comment.user_id
    elif kind is ReportKind.MANGA:
        if db.get(Manga, target_id) is None:
            raise NotFound("Manga not found")
        report.manga_id = target_id
    else:
        if reporter_id is not None and target_id == reporter_id:
            raise ValidationFailed("لا يمكنك الإبلاغ عن نفسك")
        if db.get(Profile, target_id) is None:
            raise NotFound("User not found")
        report.reported_user_id = target_id

    db.add(report)
    commit(db)
    db.refresh(report)
    logger.info(
        "Report %s filed by user=%s session=%s against %s %s",
        report.id,
        reporter_id,
        report.reporter_session,
        kind.value,
        target_id,
    )
    return report


def list_reports(
    db: Session,
    actor: Actor,
    *,
    status: ReportStatus | None = None,
    limit: int = 50,
) -> list[Report]:
    """Return reports, newest first, optionally filtered by status."""
    actor.require(Capability.VIEW_REPORTS, message="غير مسموح بعرض البلاغات")
    query = db.query(Report)
    if status is not None:
        query = query.filter(Report.status == status.value)
    return query.order_by(Report.created_at.desc()).limit(limit).all()


def update_report_status(db: Session, actor: Actor, report_id: str, status: ReportStatus) -> Report:
    """Move a report to a new status and stamp the reviewer."""
    actor.require(Capability.RESOLVE_REPORTS, message="غير مسموح بمعالجة البلاغات")
    report = db.get(Report, report_id)
    if report is None:
        raise NotFound("Report not found")
    report.status = status.value
    report.reviewed_by = actor.user_id
    report.reviewed_at = utcnow()
    commit(db)
    db.refresh(report)
    return report


def report_stats(db: Session, actor: Actor) -> dict[str, int]:
    """Count reports per status."""
    actor.require(Capability.VIEW_REPORTS, message="غير مسموح بعرض البلاغات")
    counts = {status.value: 0 for status in ReportStatus}
    for status, count in db.query(Report.status, func.count()).group_by(Report.status).all():
        counts[status] = count
    counts["total"] = sum(counts[status.value] for status in ReportStatus)
    return counts
