# tests/test_views.py
"""Tests for unique view tracking."""

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from manga_guard.core.errors import NotFound, ValidationFailed
from manga_guard.db.time import utcnow
from manga_guard.models import MangaView
from manga_guard.models.ids import new_id
from manga_guard.services.views import record_view, track_view


def test_first_view_counts_once(db_session: Session, manga) -> None:
    first = track_view(db_session, manga_id=manga.id, session_id="visitor")
    again = track_view(db_session, manga_id=manga.id, session_id="visitor")

    assert first.new_view
    assert first.views_count == 1
    assert not again.new_view
    assert again.views_count == 1


def test_distinct_viewers_each_count(db_session: Session, manga) -> None:
    track_view(db_session, manga_id=manga.id, session_id="a")
    track_view(db_session, manga_id=manga.id, session_id="b")
    result = track_view(db_session, manga_id=manga.id, user_id="user-1")

    assert result.views_count == 3
    assert db_session.query(MangaView).count() == 3


def test_chapter_views_are_separate(db_session: Session, chapter) -> None:
    chapter_view = track_view(db_session, manga_id=chapter.manga_id, chapter_id=chapter.id, user_id="u")
    manga_view = track_view(db_session, manga_id=chapter.manga_id, user_id="u")

    assert chapter_view.new_view
    assert manga_view.new_view
    db_session.refresh(chapter)
    assert chapter.views_count == 1


def test_unknown_targets(db_session: Session, manga) -> None:
    with pytest.raises(NotFound):
        track_view(db_session, manga_id="missing", session_id="s")
    with pytest.raises(NotFound):
        track_view(db_session, manga_id=manga.id, chapter_id="missing", session_id="s")
    with pytest.raises(ValidationFailed):
        track_view(db_session, manga_id=manga.id)


def test_row_from_concurrent_request_is_not_counted_again(db_session: Session, manga) -> None:
    # Another request stored this viewer's row between our checks.
    db_session.add(MangaView(manga_id=manga.id, session_id="visitor"))
    db_session.flush()

    result = track_view(db_session, manga_id=manga.id, session_id="visitor")

    assert not result.new_view
    assert result.views_count == 0
    assert db_session.query(MangaView).count() == 1


def test_record_view_inserts_once(db_session: Session, chapter) -> None:
    values = {"manga_id": chapter.manga_id, "chapter_id": chapter.id, "user_id": "u", "session_id": None}

    assert record_view(db_session, {**values, "id": new_id(), "created_at": utcnow()})
    assert not record_view(db_session, {**values, "id": new_id(), "created_at": utcnow()})
    assert db_session.query(MangaView).count() == 1


@pytest.mark.parametrize(
    "viewer",
    [{"user_id": "u"}, {"session_id": "s"}],
)
def test_unique_index_covers_manga_level_views(db_session: Session, manga, viewer) -> None:
    db_session.add(MangaView(manga_id=manga.id, **viewer))
    db_session.flush()

    with pytest.raises(IntegrityError):
        with db_session.begin_nested():
            db_session.add(MangaView(manga_id=manga.id, **viewer))
