"""API endpoint modules for version 1."""

from .comments import router as comments_router
from .moderation import router as moderation_router
from .reports import router as reports_router
from .roles import router as roles_router
from .users import router as users_router
from .views import router as views_router

__all__ = [
    "comments_router",
    "moderation_router",
    "reports_router",
    "roles_router",
    "users_router",
    "views_router",
]
