"""Role catalogue endpoint."""

from fastapi import APIRouter

from manga_guard.core.roles import Role
from manga_guard.schemas.user import RoleInfo

router = APIRouter(prefix="/roles", tags=["roles"])


@router.get("/", response_model=list[RoleInfo])
async def list_roles() -> list[RoleInfo]:
    """Return every role, lowest rank first, with display data and capabilities."""
    return [RoleInfo.for_role(role) for role in Role]
