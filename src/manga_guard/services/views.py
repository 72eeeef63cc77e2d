"""Unique view tracking with atomic counters."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from manga_guard.core.errors import NotFound, ValidationFailed
from manga_guard.db.session import commit
from manga_guard.db.time import utcnow
from manga_guard.models.content import Chapter, Manga
from manga_guard.models.ids import new_id
from manga_guard.models.view import MangaView

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewResult:
    new_view: bool
    views_count: int


def track_view(
    db: Session,
    *,
    manga_id: str,
    chapter_id: str | None = None,
    user_id: str | None = None,
    session_id: str | None = None,
) -> ViewResult:
    """Record a view once per viewer and target.

    The view row is inserted with ``ON CONFLICT DO NOTHING`` against the
    per-viewer unique indexes, and the counter is bumped with
    ``views_count = views_count + 1`` only when that insert added a row.
    """
    if user_id is None and session_id is None:
        raise ValidationFailed("A user id or session id is required")

    model = Chapter if chapter_id is not None else Manga
    target_id = chapter_id if chapter_id is not None else manga_id
    target = db.get(model, target_id)
    if target is None:
        raise NotFound(f"{model.__name__} not found")
    if isinstance(target, Chapter) and target.manga_id != manga_id:
        raise ValidationFailed("Chapter does not belong to the given manga")

    values = {
        "id": new_id(),
        "manga_id": manga_id,
        "chapter_id": chapter_id,
        "user_id": user_id,
        "session_id": None if user_id else session_id,
        "created_at": utcnow(),
    }
    if not record_view(db, values):
        return ViewResult(new_view=False, views_count=target.views_count)

    db.execute(
        update(model)
        .where(model.id == target_id)
        .values(views_count=model.views_count + 1)
    )
    commit(db)
    db.refresh(target)
    logger.debug("View recorded for %s %s", model.__name__, target_id)
    return ViewResult(new_view=True, views_count=target.views_count)


def record_view(db: Session, values: dict[str, object]) -> bool:
    """Insert a view row unless the viewer already has one; return True if inserted."""
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        stmt = postgresql.insert(MangaView).values(**values)
    elif dialect == "sqlite":
        stmt = sqlite.insert(MangaView).values(**values)
    else:
        return _insert_view(db, values)
    result = db.execute(stmt.on_conflict_do_nothing())
    return result.rowcount == 1


def _insert_view(db: Session, values: dict[str, object]) -> bool:
    # Other backends: plain insert inside a savepoint.
    try:
        with db.begin_nested():
            db.add(MangaView(**values))
    except IntegrityError:
        return False
    return True
