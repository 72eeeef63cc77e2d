"""Per-comment reaction counts and the one-reaction-per-user upsert."""
from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from manga_guard.db.time import utcnow
from manga_guard.models.comment import CommentReaction, ReactionType


def empty_tally() -> dict[str, int]:
    return {reaction.value: 0 for reaction in ReactionType}


def tally(db: Session, comment_id: str) -> dict[str, int]:
    """Return the count of each reaction type, recomputed from rows."""
    counts = empty_tally()
    rows = (
        db.query(CommentReaction.reaction_type, func.count())
        .filter(CommentReaction.comment_id == comment_id)
        .group_by(CommentReaction.reaction_type)
        .all()
    )
    for reaction_type, count in rows:
        if reaction_type in counts:
            counts[reaction_type] = count
    return counts


def tally_many(db: Session, comment_ids: Iterable[str]) -> dict[str, dict[str, int]]:
    """Return tallies for several comments with a single query."""
    ids = list(comment_ids)
    result = {comment_id: empty_tally() for comment_id in ids}
    if not ids:
        return result
    rows = (
        db.query(CommentReaction.comment_id, CommentReaction.reaction_type, func.count())
        .filter(CommentReaction.comment_id.in_(ids))
        .group_by(CommentReaction.comment_id, CommentReaction.reaction_type)
        .all()
    )
    for comment_id, reaction_type, count in rows:
        if reaction_type in result[comment_id]:
            result[comment_id][reaction_type] = count
    return result


def user_reaction(db: Session, comment_id: str, user_id: str | None) -> str | None:
    """Return the reaction ``user_id`` left on the comment, if any."""
    if user_id is None:
        return None
    row = (
        db.query(CommentReaction.reaction_type)
        .filter(
            CommentReaction.comment_id == comment_id,
            CommentReaction.user_id == user_id,
        )
        .first()
    )
    return row[0] if row else None


def user_reactions(db: Session, comment_ids: Iterable[str], user_id: str | None) -> dict[str, str]:
    """Map comment id to the viewer's reaction for the given comments."""
    ids = list(comment_ids)
    if user_id is None or not ids:
        return {}
    rows = (
        db.query(CommentReaction.comment_id, CommentReaction.reaction_type)
        .filter(
            CommentReaction.comment_id.in_(ids),
            CommentReaction.user_id == user_id,
        )
        .all()
    )
    return dict(rows)


def set_reaction(db: Session, comment_id: str, user_id: str, reaction_type: ReactionType) -> None:
    """Insert or replace the user's reaction in one statement.

    There is never a moment where a concurrent reader sees the user's old
    reaction removed but the new one missing.
    """
    values = {
        "comment_id": comment_id,
        "user_id": user_id,
        "reaction_type": reaction_type.value,
        "created_at": utcnow(),
    }
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        stmt = postgresql.insert(CommentReaction).values(**values)
    elif dialect == "sqlite":
        stmt = sqlite.insert(CommentReaction).values(**values)
    else:
        _merge_reaction(db, values)
        return
    stmt = stmt.on_conflict_do_update(
        index_elements=[CommentReaction.comment_id, CommentReaction.user_id],
        set_={"reaction_type": stmt.excluded.reaction_type, "created_at": stmt.excluded.created_at},
    )
    db.execute(stmt)


def _merge_reaction(db: Session, values: dict[str, object]) -> None:
    # Other backends: ORM merge keyed on the composite primary key.
    db.merge(CommentReaction(**values))
    db.flush()


def clear_reaction(db: Session, comment_id: str, user_id: str) -> bool:
    """Remove the user's reaction; return True if one existed."""
    deleted = (
        db.query(CommentReaction)
        .filter(
            CommentReaction.comment_id == comment_id,
            CommentReaction.user_id == user_id,
        )
        .delete(synchronize_session=False)
    )
    return bool(deleted)
