"""SQLAlchemy models for the Manga Guard service."""

from .ban import BannedUser, RestrictionType
from .comment import Comment, CommentReaction
from .content import Chapter, Manga
from .profile import Profile
from .report import Report
from .view import MangaView

__all__ = [
    "BannedUser", "RestrictionType",
    "Comment", "CommentReaction",
    "Chapter", "Manga",
    "MangaView",
    "Profile",
    "Report",
]
