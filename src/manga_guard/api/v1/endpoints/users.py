"""User, role assignment and ban endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from manga_guard.api.v1.dependencies import ActorDep, CurrentUserDep, SessionDep
from manga_guard.models.ban import BannedUser
from manga_guard.schemas.user import (
    BanCreate,
    BanLift,
    BanResponse,
    ProfileResponse,
    RestrictionsResponse,
    RoleChange,
    RoleInfo,
)
from manga_guard.services import bans, user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=ProfileResponse)
async def get_me(actor: CurrentUserDep, db: SessionDep) -> ProfileResponse:
    """Return the caller's profile, creating it on first sight."""
    profile = user_service.ensure_profile(db, actor.user_id)
    return ProfileResponse(
        user_id=profile.user_id,
        display_name=profile.display_name,
        role=RoleInfo.for_role(profile.resolved_role),
    )


@router.get("/me/restrictions", response_model=RestrictionsResponse)
async def get_my_restrictions(actor: ActorDep, db: SessionDep) -> RestrictionsResponse:
    """List the bans in force for the calling user or session."""
    active = bans.active_restrictions(db, user_id=actor.user_id, session_id=actor.session_id)
    return RestrictionsResponse(
        restrictions=sorted(active, key=lambda restriction: restriction.value),
        can_comment=active.isdisjoint(bans.COMMENT_RESTRICTIONS),
    )


@router.get("/{user_id}/role", response_model=RoleInfo)
async def get_user_role(user_id: str, db: SessionDep) -> RoleInfo:
    return RoleInfo.for_role(user_service.resolve_role(db, user_id))


@router.put("/{user_id}/role", response_model=ProfileResponse)
async def change_user_role(
    user_id: str,
    change: RoleChange,
    actor: CurrentUserDep,
    db: SessionDep,
) -> ProfileResponse:
    """Assign a new role to a user."""
    profile = user_service.change_role(db, actor, user_id, change.role)
    return ProfileResponse(
        user_id=profile.user_id,
        display_name=profile.display_name,
        role=RoleInfo.for_role(profile.resolved_role),
    )


@router.post("/bans", response_model=BanResponse, status_code=status.HTTP_201_CREATED)
async def ban_user(ban: BanCreate, actor: CurrentUserDep, db: SessionDep) -> BannedUser:
    """Ban a user or an anonymous session, permanently or until a time."""
    return bans.ban_actor(
        db,
        actor,
        user_id=ban.user_id,
        session_id=ban.session_id,
        restriction_type=ban.restriction_type,
        reason=ban.reason,
        banned_until=ban.banned_until,
    )


@router.delete("/bans")
async def lift_user_ban(target: BanLift, actor: CurrentUserDep, db: SessionDep) -> dict[str, int]:
    """Lift active bans on the given user or session, optionally of one type."""
    lifted = bans.lift_ban(
        db,
        actor,
        user_id=target.user_id,
        session_id=target.session_id,
        restriction_type=target.restriction_type,
    )
    return {"lifted": lifted}
