# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import timedelta
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-manga-guard")

from manga_guard.core.roles import Role
from manga_guard.core.security import create_access_token
from manga_guard.db.session import Base
from manga_guard.db.session import get_db as app_get_session
from manga_guard.db.time import utcnow
from manga_guard.main import app as fastapi_app
from manga_guard.models import Chapter, Comment, Manga, Profile
from manga_guard.services.actors import Actor

TEST_DB_URL = "sqlite://"

_USER_COUNTER = count(1)
_COMMENT_CLOCK = count(1)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    session.begin_nested()

    @event.listens_for(session, "after_transaction_end")
    def restart_savepoint(sess: Session, trans) -> None:  # pragma: no cover - SQLAlchemy internals
        if trans.nested and not getattr(trans._parent, "nested", False):
            session.begin_nested()

    try:
        yield session
    finally:
        event.remove(session, "after_transaction_end", restart_savepoint)
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_profile(db_session: Session) -> Callable[..., Profile]:
    """Return a factory persisting a profile with the given role."""

    def _make(role: Role = Role.USER, display_name: str | None = None) -> Profile:
        number = next(_USER_COUNTER)
        profile = Profile(
            user_id=f"00000000-0000-4000-8000-{number:012d}",
            display_name=display_name or f"Reader {number}",
            role=role.value,
        )
        db_session.add(profile)
        db_session.flush()
        db_session.refresh(profile)
        return profile

    return _make


@pytest.fixture()
def make_actor(make_profile: Callable[..., Profile]) -> Callable[..., Actor]:
    """Return a factory for signed-in actors backed by a stored profile."""

    def _make(role: Role = Role.USER) -> Actor:
        profile = make_profile(role)
        return Actor(user_id=profile.user_id, session_id=None, role=role)

    return _make


@pytest.fixture()
def manga(db_session: Session) -> Iterator[Manga]:
    """Create a manga title."""
    manga = Manga(title="Solo Leveling", slug="solo-leveling")
    db_session.add(manga)
    db_session.flush()
    db_session.refresh(manga)
    yield manga


@pytest.fixture()
def chapter(db_session: Session, manga: Manga) -> Iterator[Chapter]:
    """Create the first chapter of ``manga``."""
    chapter = Chapter(manga_id=manga.id, chapter_number=1, title="The Weakest Hunter")
    db_session.add(chapter)
    db_session.flush()
    db_session.refresh(chapter)
    yield chapter


@pytest.fixture()
def make_comment(db_session: Session, chapter: Chapter) -> Callable[..., Comment]:
    """Return a factory inserting comments directly, each a second after the last."""

    def _make(
        author: Actor,
        content: str = "فصل رائع جداً",
        parent: Comment | None = None,
        **fields,
    ) -> Comment:
        created = utcnow() - timedelta(hours=1) + timedelta(seconds=next(_COMMENT_CLOCK))
        comment = Comment(
            manga_id=chapter.manga_id,
            chapter_id=chapter.id,
            user_id=author.user_id,
            session_id=None if author.user_id else author.session_id,
            parent_id=parent.id if parent else None,
            content=content,
            created_at=created,
            updated_at=created,
            **fields,
        )
        db_session.add(comment)
        db_session.flush()
        db_session.refresh(comment)
        return comment

    return _make


def bearer(user_id: str) -> dict[str, str]:
    """Return authorization headers for ``user_id``."""
    token = create_access_token(user_id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def auth_headers() -> Callable[[Profile], dict[str, str]]:
    """Return a helper building authorization headers for a profile."""

    def _headers(profile: Profile) -> dict[str, str]:
        return bearer(profile.user_id)

    return _headers
