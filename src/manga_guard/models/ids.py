"""Primary key helpers."""

import uuid


def new_id() -> str:
    """Return a new UUID4 string in the identity provider's format."""
    return str(uuid.uuid4())
