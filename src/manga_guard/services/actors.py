"""The identity a request acts as."""

from __future__ import annotations

from dataclasses import dataclass

from manga_guard.core.errors import PermissionDenied
from manga_guard.core.roles import Capability, Role, has_any_permission, has_permission


@dataclass(frozen=True)
class Actor:
    """A signed-in user or an anonymous visitor identified by session id."""

    user_id: str | None
    session_id: str | None = None
    role: Role = Role.USER

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def is_identified(self) -> bool:
        """True for signed-in users and for visitors with a session id."""
        return self.user_id is not None or self.session_id is not None

    def can(self, capability: Capability | str) -> bool:
        # Anonymous visitors hold no capabilities at all.
        return self.is_authenticated and has_permission(self.role, capability)

    def can_any(self, *capabilities: Capability | str) -> bool:
        return self.is_authenticated and has_any_permission(self.role, *capabilities)

    def owns(self, user_id: str | None, session_id: str | None = None) -> bool:
        """Return True when a row authored by ``user_id``/``session_id`` is ours."""
        if self.user_id is not None:
            return user_id == self.user_id
        return session_id is not None and session_id == self.session_id

    def require(self, *capabilities: Capability | str, message: str | None = None) -> None:
        """Raise :class:`PermissionDenied` unless one of ``capabilities`` is held."""
        if not self.can_any(*capabilities):
            names = ", ".join(str(getattr(cap, "value", cap)) for cap in capabilities)
            raise PermissionDenied(message or f"Missing capability: {names}")

    def require_authenticated(self, message: str = "يجب تسجيل الدخول") -> str:
        if self.user_id is None:
            raise PermissionDenied(message)
        return self.user_id


ANONYMOUS = Actor(user_id=None)
