# tests/test_reactions.py
"""Tests for reactions and their tallies."""

import pytest
from sqlalchemy.orm import Session

from manga_guard.core.errors import NotFound, PermissionDenied, ValidationFailed
from manga_guard.models import CommentReaction
from manga_guard.models.comment import ReactionType
from manga_guard.services import comments, reactions
from manga_guard.services.actors import Actor


def test_like_then_love_replaces_reaction(db_session: Session, make_actor, make_comment) -> None:
    comment = make_comment(make_actor())
    reader = make_actor()

    comments.react(db_session, reader, comment.id, ReactionType.LIKE)
    counts = comments.react(db_session, reader, comment.id, "love")

    assert counts["love"] == 1
    assert counts["like"] == 0
    assert reactions.user_reaction(db_session, comment.id, reader.user_id) == "love"
    assert db_session.query(CommentReaction).count() == 1


def test_tally_sums_to_distinct_users(db_session: Session, make_actor, make_comment) -> None:
    comment = make_comment(make_actor())
    readers = [make_actor() for _ in range(4)]
    choices = [ReactionType.LIKE, ReactionType.LIKE, ReactionType.SAD, ReactionType.LAUGH]

    for reader, choice in zip(readers, choices):
        comments.react(db_session, reader, comment.id, choice)
    comments.react(db_session, readers[0], comment.id, ReactionType.ANGRY)

    counts = reactions.tally(db_session, comment.id)
    assert set(counts) == {reaction.value for reaction in ReactionType}
    assert sum(counts.values()) == 4
    assert counts == {"like": 1, "dislike": 0, "love": 0, "laugh": 1, "angry": 1, "sad": 1}


def test_remove_reaction(db_session: Session, make_actor, make_comment) -> None:
    comment = make_comment(make_actor())
    reader = make_actor()
    comments.react(db_session, reader, comment.id, ReactionType.DISLIKE)

    counts = comments.remove_reaction(db_session, reader, comment.id)

    assert sum(counts.values()) == 0
    assert not reactions.clear_reaction(db_session, comment.id, reader.user_id)


def test_anonymous_visitor_cannot_react(db_session: Session, make_actor, make_comment) -> None:
    comment = make_comment(make_actor())
    visitor = Actor(user_id=None, session_id="visitor")

    with pytest.raises(PermissionDenied):
        comments.react(db_session, visitor, comment.id, ReactionType.LIKE)


def test_unknown_reaction_type(db_session: Session, make_actor, make_comment) -> None:
    comment = make_comment(make_actor())

    with pytest.raises(ValidationFailed):
        comments.react(db_session, make_actor(), comment.id, "wow")


def test_reacting_to_missing_comment(db_session: Session, make_actor) -> None:
    with pytest.raises(NotFound):
        comments.react(db_session, make_actor(), "missing", ReactionType.LIKE)


def test_tally_many_and_user_reactions(db_session: Session, make_actor, make_comment) -> None:
    author = make_actor()
    reader = make_actor()
    first = make_comment(author)
    second = make_comment(author)
    comments.react(db_session, reader, first.id, ReactionType.LOVE)

    many = reactions.tally_many(db_session, [first.id, second.id])
    mine = reactions.user_reactions(db_session, [first.id, second.id], reader.user_id)

    assert many[first.id]["love"] == 1
    assert many[second.id] == reactions.empty_tally()
    assert mine == {first.id: "love"}
    assert reactions.user_reactions(db_session, [first.id], None) == {}
