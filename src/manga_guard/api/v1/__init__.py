"""Version 1 API endpoints."""

from .endpoints import (
    comments_router,
    moderation_router,
    reports_router,
    roles_router,
    users_router,
    views_router,
)

__all__ = [
    "comments_router",
    "moderation_router",
    "reports_router",
    "roles_router",
    "users_router",
    "views_router",
]
