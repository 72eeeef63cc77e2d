"""User, role and ban schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from manga_guard.core import roles
from manga_guard.core.roles import Role
from manga_guard.models.ban import RestrictionType


class RoleInfo(BaseModel):
    """A role with its display attributes and granted capabilities."""

    role: Role
    rank: int
    display_name: str
    color_tag: str
    icon: str
    capabilities: list[str]

    @classmethod
    def for_role(cls, role: Role | str | None) -> RoleInfo:
        resolved = roles.parse_role(role)
        return cls(
            role=resolved,
            rank=resolved.rank,
            display_name=roles.display_name(resolved),
            color_tag=roles.color_tag(resolved),
            icon=roles.icon(resolved),
            capabilities=sorted(cap.value for cap in roles.capabilities_for(resolved)),
        )


class ProfileResponse(BaseModel):
    user_id: str
    display_name: str | None
    role: RoleInfo


class RoleChange(BaseModel):
    role: Role


class _BanTarget(BaseModel):
    user_id: str | None = None
    session_id: str | None = Field(None, max_length=100)

    @model_validator(mode="after")
    def _require_target(self) -> _BanTarget:
        if self.user_id is None and self.session_id is None:
            raise ValueError("user_id or session_id is required")
        return self


class BanCreate(_BanTarget):
    restriction_type: RestrictionType = RestrictionType.COMMENT_BAN
    reason: str | None = None
    banned_until: datetime | None = Field(None, description="Omit for a permanent ban")


class BanLift(_BanTarget):
    restriction_type: RestrictionType | None = Field(None, description="Omit to lift every restriction type")


class BanResponse(BaseModel):
    id: str
    user_id: str | None
    session_id: str | None
    restriction_type: RestrictionType
    is_active: bool
    reason: str | None
    banned_by: str | None
    banned_until: datetime | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RestrictionsResponse(BaseModel):
    """Restriction types in force for the caller."""

    restrictions: list[RestrictionType]
    can_comment: bool
