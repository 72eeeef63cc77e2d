"""Comment moderation and role permission service for the manga reader."""

__version__ = "0.1.0"
