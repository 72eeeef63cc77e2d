# tests/test_bans.py
"""Tests for ban records and their enforcement."""

from datetime import timedelta

import pytest
from sqlalchemy.orm import Session

from manga_guard.core.errors import BannedActor, PermissionDenied, ValidationFailed
from manga_guard.core.roles import Role
from manga_guard.db.time import utcnow
from manga_guard.models import BannedUser, RestrictionType
from manga_guard.services import bans
from manga_guard.services.actors import Actor


def test_ban_activity_window() -> None:
    now = utcnow()
    assert bans.is_ban_active(BannedUser(user_id="u", banned_until=None), now)
    assert bans.is_ban_active(BannedUser(user_id="u", banned_until=now + timedelta(hours=1)), now)
    assert not bans.is_ban_active(BannedUser(user_id="u", banned_until=now - timedelta(seconds=1)), now)
    # A naive timestamp is read as UTC.
    naive_future = (now + timedelta(hours=1)).replace(tzinfo=None)
    assert bans.is_ban_active(BannedUser(user_id="u", banned_until=naive_future), now)


def test_elite_fighter_bans_user_until_time(db_session: Session, make_actor) -> None:
    elite = make_actor(Role.ELITE_FIGHTER)
    target = make_actor()
    until = utcnow() + timedelta(days=1)

    record = bans.ban_actor(db_session, elite, user_id=target.user_id, reason="سب", banned_until=until)

    assert record.banned_by == elite.user_id
    assert bans.find_active_ban(db_session, user_id=target.user_id) is not None
    with pytest.raises(BannedActor):
        bans.ensure_not_banned(db_session, target)


def test_session_ban(db_session: Session, make_actor) -> None:
    elite = make_actor(Role.ELITE_FIGHTER)

    bans.ban_actor(db_session, elite, session_id="abc123")

    assert bans.find_active_ban(db_session, session_id="abc123") is not None
    with pytest.raises(BannedActor):
        bans.ensure_not_banned(db_session, Actor(user_id=None, session_id="abc123"))


def test_expired_ban_does_not_block(db_session: Session, make_actor) -> None:
    target = make_actor()
    db_session.add(BannedUser(user_id=target.user_id, banned_until=utcnow() - timedelta(days=1)))
    db_session.flush()

    assert bans.find_active_ban(db_session, user_id=target.user_id) is None
    bans.ensure_not_banned(db_session, target)


def test_plain_user_cannot_ban(db_session: Session, make_actor) -> None:
    with pytest.raises(PermissionDenied):
        bans.ban_actor(db_session, make_actor(), user_id=make_actor().user_id)


@pytest.mark.parametrize("target_role", [Role.ELITE_FIGHTER, Role.ADMIN])
def test_cannot_ban_equal_or_higher_rank(db_session: Session, make_actor, target_role: Role) -> None:
    elite = make_actor(Role.ELITE_FIGHTER)
    target = make_actor(target_role)

    with pytest.raises(PermissionDenied):
        bans.ban_actor(db_session, elite, user_id=target.user_id)


def test_cannot_ban_self(db_session: Session, make_actor) -> None:
    admin = make_actor(Role.SITE_ADMIN)

    with pytest.raises(PermissionDenied):
        bans.ban_actor(db_session, admin, user_id=admin.user_id)


def test_ban_needs_target_and_future_end(db_session: Session, make_actor) -> None:
    elite = make_actor(Role.ELITE_FIGHTER)

    with pytest.raises(ValidationFailed):
        bans.ban_actor(db_session, elite)
    with pytest.raises(ValidationFailed):
        bans.ban_actor(
            db_session,
            elite,
            user_id=make_actor().user_id,
            banned_until=utcnow() - timedelta(minutes=5),
        )


def test_lift_ban(db_session: Session, make_actor) -> None:
    elite = make_actor(Role.ELITE_FIGHTER)
    target = make_actor()
    bans.ban_actor(db_session, elite, user_id=target.user_id)

    lifted = bans.lift_ban(db_session, elite, user_id=target.user_id)

    assert lifted == 1
    assert bans.find_active_ban(db_session, user_id=target.user_id) is None
    assert db_session.query(BannedUser).count() == 1
    assert bans.lift_ban(db_session, elite, user_id=target.user_id) == 0


def test_lifted_ban_is_inactive() -> None:
    record = BannedUser(user_id="u", banned_until=None, is_active=False)
    assert not bans.is_ban_active(record)


@pytest.mark.parametrize(
    ("restriction", "blocks_comments"),
    [
        (RestrictionType.COMMENT_BAN, True),
        (RestrictionType.COMPLETE_BAN, True),
        (RestrictionType.READ_BAN, False),
        (RestrictionType.UPLOAD_BAN, False),
    ],
)
def test_only_comment_and_complete_bans_block_commenting(
    db_session: Session,
    make_actor,
    restriction: RestrictionType,
    blocks_comments: bool,
) -> None:
    elite = make_actor(Role.ELITE_FIGHTER)
    target = make_actor()

    record = bans.ban_actor(db_session, elite, user_id=target.user_id, restriction_type=restriction)

    assert record.restriction_type == restriction.value
    assert bans.active_restrictions(db_session, user_id=target.user_id) == {restriction}
    if blocks_comments:
        with pytest.raises(BannedActor):
            bans.ensure_not_banned(db_session, target)
    else:
        bans.ensure_not_banned(db_session, target)


def test_lift_one_restriction_type(db_session: Session, make_actor) -> None:
    elite = make_actor(Role.ELITE_FIGHTER)
    target = make_actor()
    bans.ban_actor(db_session, elite, user_id=target.user_id, restriction_type=RestrictionType.COMMENT_BAN)
    bans.ban_actor(db_session, elite, user_id=target.user_id, restriction_type=RestrictionType.UPLOAD_BAN)

    lifted = bans.lift_ban(db_session, elite, user_id=target.user_id, restriction_type="comment_ban")

    assert lifted == 1
    assert bans.active_restrictions(db_session, user_id=target.user_id) == {RestrictionType.UPLOAD_BAN}
    bans.ensure_not_banned(db_session, target)


def test_unknown_restriction_type(db_session: Session, make_actor) -> None:
    elite = make_actor(Role.ELITE_FIGHTER)

    with pytest.raises(ValidationFailed):
        bans.ban_actor(db_session, elite, user_id=make_actor().user_id, restriction_type="shadow_ban")
