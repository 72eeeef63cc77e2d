"""Token verification and anonymous session identifiers."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta

from blake3 import blake3
from jose import jwt

from manga_guard.core.settings import settings


def create_access_token(subject: str, extra_claims: dict[str, str] | None = None) -> str:
    """Create a JWT shaped like the identity provider's access tokens.

    Used by tooling and tests; production tokens are minted upstream.
    """
    to_encode: dict[str, object] = {"sub": subject}
    if extra_claims:
        to_encode.update(extra_claims)
    expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode["exp"] = expire
    if settings.jwt_audience:
        to_encode["aud"] = settings.jwt_audience
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_access_token(token: str) -> str | None:
    """Return the ``sub`` claim of a valid token.

    Raises:
        jose.JWTError: If the signature, expiry or audience check fails.
    """
    options = {"verify_aud": settings.jwt_audience is not None}
    payload = jwt.decode(
        token,
        settings.secret_key,
        algorithms=[settings.jwt_algorithm],
        audience=settings.jwt_audience,
        options=options,
    )
    subject = payload.get("sub")
    return str(subject) if subject else None


def derive_session_id(client_ip: str | None, user_agent: str | None) -> str:
    """Return the anonymous session id for a visitor.

    The id is the BLAKE3 digest of ``"{ip}-{user_agent}"`` truncated to
    ``SESSION_ID_MAX_LENGTH`` characters.
    """
    raw = f"{client_ip or 'unknown'}-{user_agent or 'unknown'}"
    digest = blake3(raw.encode("utf-8")).hexdigest()
    return digest[: settings.session_id_max_length]
