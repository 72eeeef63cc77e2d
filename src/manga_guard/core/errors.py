"""Domain exceptions raised by the service layer.

Each exception carries the HTTP status code the API layer answers with.
"""

from __future__ import annotations

from collections.abc import Sequence


class MangaGuardError(RuntimeError):
    """Base class for all domain failures."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class PermissionDenied(MangaGuardError):
    """Actor lacks the required capability or does not own the resource."""

    status_code = 403


class BannedActor(MangaGuardError):
    """An active ban record matches the acting user or session."""

    status_code = 403

    def __init__(self, message: str = "المستخدم محظور من التعليق") -> None:
        super().__init__(message)


class ValidationFailed(MangaGuardError):
    """Submitted content or arguments violate a hard rule."""

    status_code = 400

    def __init__(self, message: str, errors: Sequence[str] | None = None) -> None:
        super().__init__(message)
        self.errors = list(errors) if errors else [message]


class NotFound(MangaGuardError):
    """Referenced comment, chapter, manga, report or user does not exist."""

    status_code = 404


class UpstreamFailure(MangaGuardError):
    """The persistence or identity collaborator failed."""

    status_code = 502
