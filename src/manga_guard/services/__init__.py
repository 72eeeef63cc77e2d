"""Business logic services for the Manga Guard service."""

from .actors import ANONYMOUS, Actor
from .moderation import ContentModerator, ModerationVerdict, Severity

__all__ = [
    "ANONYMOUS",
    "Actor",
    "ContentModerator",
    "ModerationVerdict",
    "Severity",
]
