"""Profile lookup and role assignment."""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from manga_guard.core.errors import NotFound, PermissionDenied
from manga_guard.core.roles import Capability, Role, parse_role
from manga_guard.db.session import commit
from manga_guard.models.profile import Profile
from manga_guard.services.actors import Actor

__all__ = [
    "get_profile",
    "resolve_role",
    "build_actor",
    "ensure_profile",
    "change_role",
]

logger = logging.getLogger(__name__)


def get_profile(db: Session, user_id: str) -> Profile | None:
    """Return a profile by user id."""
    return db.query(Profile).filter(Profile.user_id == user_id).first()


def resolve_role(db: Session, user_id: str | None) -> Role:
    """Return the role of ``user_id``; anonymous or unknown users are ``user``."""
    if user_id is None:
        return Role.USER
    profile = get_profile(db, user_id)
    if profile is None:
        return Role.USER
    return profile.resolved_role


def build_actor(db: Session, user_id: str | None, session_id: str | None = None) -> Actor:
    """Assemble the acting identity with its role resolved from ``profiles``."""
    return Actor(user_id=user_id, session_id=session_id, role=resolve_role(db, user_id))


def ensure_profile(db: Session, user_id: str, display_name: str | None = None) -> Profile:
    """Return the user's profile, creating a default one on first sight."""
    profile = get_profile(db, user_id)
    if profile is None:
        profile = Profile(user_id=user_id, display_name=display_name, role=Role.USER.value)
        db.add(profile)
        commit(db)
        db.refresh(profile)
    return profile


def change_role(db: Session, actor: Actor, user_id: str, new_role: Role | str) -> Profile:
    """Assign ``new_role`` to ``user_id``.

    Raises:
        PermissionDenied: If the actor cannot assign roles or tries to demote
            themself.
        NotFound: If the target has no profile.
    """
    actor.require(Capability.ASSIGN_ROLES, message="غير مسموح بتغيير الرتب")
    role = parse_role(new_role)
    if user_id == actor.user_id and role is not actor.role:
        raise PermissionDenied("لا يمكن تغيير رتبتك الخاصة")

    profile = get_profile(db, user_id)
    if profile is None:
        raise NotFound("User not found")

    previous = profile.role
    profile.role = role.value
    commit(db)
    db.refresh(profile)
    logger.info("Role of %s changed from %s to %s by %s", user_id, previous, role.value, actor.user_id)
    return profile
