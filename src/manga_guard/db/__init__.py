"""Database configuration and utilities."""

from .session import SessionLocal, commit, get_db

__all__ = ["commit", "get_db", "SessionLocal"]
