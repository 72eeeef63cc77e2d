"""Typed ban records for users and anonymous sessions."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import or_
from sqlalchemy.orm import Session

from manga_guard.core.errors import BannedActor, PermissionDenied, ValidationFailed
from manga_guard.core.roles import Capability
from manga_guard.db.session import commit
from manga_guard.db.time import as_utc, utcnow
from manga_guard.models.ban import BannedUser, RestrictionType
from manga_guard.services.actors import Actor
from manga_guard.services.user_service import resolve_role

logger = logging.getLogger(__name__)

# Restrictions that take away the right to post comments
COMMENT_RESTRICTIONS = frozenset({RestrictionType.COMMENT_BAN, RestrictionType.COMPLETE_BAN})


def is_ban_active(record: BannedUser, now: datetime | None = None) -> bool:
    """A ban is active until it is lifted or its end passes.

    ``banned_until`` of ``None`` never ends on its own.
    """
    if record.is_active is False:
        return False
    if record.banned_until is None:
        return True
    return as_utc(record.banned_until) > (now or utcnow())


def _identifier_filter(user_id: str | None, session_id: str | None):
    clauses = []
    if user_id is not None:
        clauses.append(BannedUser.user_id == user_id)
    if session_id is not None:
        clauses.append(BannedUser.session_id == session_id)
    return or_(*clauses)


def _active_records(
    db: Session,
    user_id: str | None,
    session_id: str | None,
    restrictions: Iterable[RestrictionType] | None = None,
) -> list[BannedUser]:
    if user_id is None and session_id is None:
        return []
    query = db.query(BannedUser).filter(
        _identifier_filter(user_id, session_id),
        BannedUser.is_active.is_(True),
    )
    if restrictions is not None:
        query = query.filter(BannedUser.restriction_type.in_([r.value for r in restrictions]))
    now = utcnow()
    records = query.order_by(BannedUser.created_at.desc()).all()
    return [record for record in records if is_ban_active(record, now)]


def find_active_ban(
    db: Session,
    user_id: str | None = None,
    session_id: str | None = None,
    restrictions: Iterable[RestrictionType] | None = None,
) -> BannedUser | None:
    """Return the newest active ban matching either identifier, if any.

    ``restrictions`` narrows the search to the given restriction types.
    """
    records = _active_records(db, user_id, session_id, restrictions)
    return records[0] if records else None


def active_restrictions(
    db: Session,
    user_id: str | None = None,
    session_id: str | None = None,
) -> set[RestrictionType]:
    """Return the restriction types currently in force for the identifiers."""
    return {RestrictionType(record.restriction_type) for record in _active_records(db, user_id, session_id)}


def ensure_not_banned(
    db: Session,
    actor: Actor,
    restrictions: Iterable[RestrictionType] = COMMENT_RESTRICTIONS,
) -> None:
    """Raise :class:`BannedActor` if one of ``restrictions`` applies to the actor.

    By default only comment and complete bans count, so a read or upload ban
    leaves commenting alone.
    """
    record = find_active_ban(
        db,
        user_id=actor.user_id,
        session_id=actor.session_id,
        restrictions=restrictions,
    )
    if record is not None:
        logger.warning(
            "Rejected action from restricted actor user=%s session=%s restriction=%s",
            actor.user_id,
            actor.session_id,
            record.restriction_type,
        )
        raise BannedActor()


def _parse_restriction(restriction_type: RestrictionType | str) -> RestrictionType:
    try:
        return RestrictionType(restriction_type)
    except ValueError as err:
        raise ValidationFailed(f"Unknown restriction type: {restriction_type}") from err


def ban_actor(
    db: Session,
    actor: Actor,
    *,
    user_id: str | None = None,
    session_id: str | None = None,
    restriction_type: RestrictionType | str = RestrictionType.COMMENT_BAN,
    reason: str | None = None,
    banned_until: datetime | None = None,
) -> BannedUser:
    """Record a restriction; ``banned_until=None`` makes it permanent.

    Raises:
        PermissionDenied: Without ``can_ban_users`` or when the target user
            ranks at or above the actor.
        ValidationFailed: When no target is given, the restriction type is
            unknown or the end lies in the past.
    """
    actor.require(Capability.BAN_USERS, message="غير مسموح بحظر المستخدمين")
    if user_id is None and session_id is None:
        raise ValidationFailed("A user id or session id is required")
    restriction = _parse_restriction(restriction_type)
    if user_id is not None:
        if user_id == actor.user_id:
            raise PermissionDenied("لا يمكنك حظر نفسك")
        if resolve_role(db, user_id).rank >= actor.role.rank:
            raise PermissionDenied("لا يمكن حظر مستخدم برتبة مساوية أو أعلى")
    if banned_until is not None and as_utc(banned_until) <= utcnow():
        raise ValidationFailed("banned_until must be in the future")

    record = BannedUser(
        user_id=user_id,
        session_id=session_id,
        restriction_type=restriction.value,
        is_active=True,
        reason=reason,
        banned_by=actor.user_id,
        banned_until=banned_until,
    )
    db.add(record)
    commit(db)
    db.refresh(record)
    logger.info(
        "%s issued by %s on user=%s session=%s until=%s",
        restriction.value,
        actor.user_id,
        user_id,
        session_id,
        banned_until.isoformat() if banned_until else "permanent",
    )
    return record


def lift_ban(
    db: Session,
    actor: Actor,
    *,
    user_id: str | None = None,
    session_id: str | None = None,
    restriction_type: RestrictionType | str | None = None,
) -> int:
    """Deactivate active bans for the identifier and return how many changed.

    Without ``restriction_type`` every restriction type is lifted.
    """
    actor.require(Capability.BAN_USERS, message="غير مسموح برفع الحظر")
    if user_id is None and session_id is None:
        raise ValidationFailed("A user id or session id is required")
    restrictions = None if restriction_type is None else [_parse_restriction(restriction_type)]

    records = _active_records(db, user_id, session_id, restrictions)
    for record in records:
        record.is_active = False
    commit(db)
    logger.info("Lifted %d ban(s) on user=%s session=%s", len(records), user_id, session_id)
    return len(records)
