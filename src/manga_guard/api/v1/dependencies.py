"""Shared API dependencies for authentication and common functionality."""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from manga_guard.core.security import decode_access_token, derive_session_id
from manga_guard.db.session import get_db
from manga_guard.services.actors import Actor
from manga_guard.services.user_service import build_actor

logger = logging.getLogger(__name__)

# Anonymous visitors may call most endpoints, so a missing header is not an error
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> str | None:
    """Return the user id carried by the bearer token, if any.

    Args:
        credentials: HTTP Bearer token credentials, absent for anonymous calls

    Returns:
        The ``sub`` claim, or None when no token was sent

    Raises:
        HTTPException: If a token was sent but does not validate
    """
    if credentials is None:
        return None
    try:
        subject = decode_access_token(credentials.credentials)
    except JWTError as err:
        logger.warning("Rejected bearer token: %s", err)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        ) from err
    if subject is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )
    return subject


def get_session_id(request: Request) -> str:
    """Derive the anonymous session id from the client address and user agent."""
    client_ip = request.headers.get("x-forwarded-for")
    if not client_ip and request.client is not None:
        client_ip = request.client.host
    return derive_session_id(client_ip, request.headers.get("user-agent"))


def get_actor(
    db: SessionDep,
    user_id: Annotated[str | None, Depends(get_current_user_id)],
    session_id: Annotated[str, Depends(get_session_id)],
) -> Actor:
    """Build the acting identity with its role looked up in ``profiles``."""
    return build_actor(db, user_id, session_id)


ActorDep = Annotated[Actor, Depends(get_actor)]


def require_user(actor: ActorDep) -> Actor:
    """Reject anonymous callers with 401."""
    if not actor.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return actor


# Type alias for signed-in user dependency
CurrentUserDep = Annotated[Actor, Depends(require_user)]
