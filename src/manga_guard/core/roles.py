"""Role hierarchy and the static capability grant matrix.

Every permission check in the service goes through :func:`has_permission`.
Roles are ranked; each capability is granted from a minimum role upward,
except ``can_assign_roles`` which only ``site_admin`` holds.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    """Closed set of user roles, declared from lowest to highest rank."""

    USER = "user"
    BEGINNER_FIGHTER = "beginner_fighter"
    ELITE_FIGHTER = "elite_fighter"
    TRIBE_LEADER = "tribe_leader"
    ADMIN = "admin"
    SITE_ADMIN = "site_admin"

    @property
    def rank(self) -> int:
        """Position of the role in the hierarchy (``user`` is 0)."""
        return _ROLE_ORDER.index(self)


_ROLE_ORDER: tuple[Role, ...] = tuple(Role)


class Capability(str, Enum):
    """Named permissions resolved per role."""

    SUBMIT_CONTENT = "can_submit_content"
    MODERATE_COMMENTS = "can_moderate_comments"
    BAN_USERS = "can_ban_users"
    DELETE_ANY_COMMENT = "can_delete_any_comment"
    DELETE_COMMENTS = "can_delete_comments"
    VIEW_REPORTS = "can_view_reports"
    PUBLISH_DIRECTLY = "can_publish_directly"
    PIN_COMMENTS = "can_pin_comments"
    EDIT_ANY_COMMENT = "can_edit_any_comment"
    RESOLVE_REPORTS = "can_resolve_reports"
    MANAGE_USERS = "can_manage_users"
    ASSIGN_ROLES = "can_assign_roles"


# Lowest role holding each monotonic capability.
_MINIMUM_ROLE: dict[Capability, Role] = {
    Capability.SUBMIT_CONTENT: Role.BEGINNER_FIGHTER,
    Capability.MODERATE_COMMENTS: Role.ELITE_FIGHTER,
    Capability.BAN_USERS: Role.ELITE_FIGHTER,
    Capability.DELETE_ANY_COMMENT: Role.ELITE_FIGHTER,
    Capability.DELETE_COMMENTS: Role.ELITE_FIGHTER,
    Capability.VIEW_REPORTS: Role.ELITE_FIGHTER,
    Capability.PUBLISH_DIRECTLY: Role.TRIBE_LEADER,
    Capability.PIN_COMMENTS: Role.TRIBE_LEADER,
    Capability.EDIT_ANY_COMMENT: Role.TRIBE_LEADER,
    Capability.RESOLVE_REPORTS: Role.TRIBE_LEADER,
    Capability.MANAGE_USERS: Role.ADMIN,
}

# Capabilities granted to exactly the listed roles, independent of rank.
_SCOPED_GRANTS: dict[Capability, frozenset[Role]] = {
    Capability.ASSIGN_ROLES: frozenset({Role.SITE_ADMIN}),
}


def _build_matrix() -> dict[Role, frozenset[Capability]]:
    matrix: dict[Role, frozenset[Capability]] = {}
    for role in Role:
        granted = {cap for cap, minimum in _MINIMUM_ROLE.items() if role.rank >= minimum.rank}
        granted.update(cap for cap, roles in _SCOPED_GRANTS.items() if role in roles)
        matrix[role] = frozenset(granted)
    return matrix


GRANT_MATRIX: dict[Role, frozenset[Capability]] = _build_matrix()


@dataclass(frozen=True)
class RolePresentation:
    """Display attributes consumed by the reader front end."""

    display_name: str
    color_tag: str
    icon: str


_PRESENTATION: dict[Role, RolePresentation] = {
    Role.USER: RolePresentation("مستخدم عادي", "bg-gray-500", "👤"),
    Role.BEGINNER_FIGHTER: RolePresentation("مقاتل مبتدئ", "bg-green-500", "⚔️"),
    Role.ELITE_FIGHTER: RolePresentation("مقاتل نخبة", "bg-blue-500", "🏆"),
    Role.TRIBE_LEADER: RolePresentation("قائد قبيلة", "bg-purple-500", "👑"),
    Role.ADMIN: RolePresentation("مدير", "bg-orange-500", "🛡️"),
    Role.SITE_ADMIN: RolePresentation("مدير الموقع", "bg-red-500", "⚡"),
}


def parse_role(value: Role | str | None) -> Role:
    """Coerce a stored role value, falling back to ``Role.USER`` when unknown."""
    if isinstance(value, Role):
        return value
    try:
        return Role(value)
    except ValueError:
        return Role.USER


def parse_capability(value: Capability | str) -> Capability | None:
    """Return the matching capability or ``None`` for unknown names."""
    if isinstance(value, Capability):
        return value
    try:
        return Capability(value)
    except ValueError:
        return None


def has_permission(role: Role | str | None, capability: Capability | str) -> bool:
    """Return True when ``role`` holds ``capability``.

    Unknown roles are treated as ``user`` and unknown capabilities are never
    granted.
    """
    resolved = parse_capability(capability)
    if resolved is None:
        return False
    return resolved in GRANT_MATRIX[parse_role(role)]


def has_any_permission(role: Role | str | None, *capabilities: Capability | str) -> bool:
    """Return True when ``role`` holds at least one of ``capabilities``."""
    return any(has_permission(role, capability) for capability in capabilities)


def capabilities_for(role: Role | str | None) -> frozenset[Capability]:
    """Return every capability granted to ``role``."""
    return GRANT_MATRIX[parse_role(role)]


def display_name(role: Role | str | None) -> str:
    return _PRESENTATION[parse_role(role)].display_name


def color_tag(role: Role | str | None) -> str:
    return _PRESENTATION[parse_role(role)].color_tag


def icon(role: Role | str | None) -> str:
    return _PRESENTATION[parse_role(role)].icon
