"""Tests for the JSON comment action endpoint."""

from fastapi import status

from manga_guard.core.roles import Role
from manga_guard.models import Comment, Report
from manga_guard.services.actors import Actor

ACTIONS_URL = "/api/v1/comments/actions"


def test_create_action(client, make_profile, auth_headers, chapter) -> None:
    r = client.post(
        ACTIONS_URL,
        json={"action": "create", "chapterId": chapter.id, "content": "فصل ممتاز", "isSpoiler": True},
        headers=auth_headers(make_profile()),
    )
    assert r.status_code == status.HTTP_200_OK
    body = r.json()
    assert body["success"] is True
    assert body["comment"]["is_spoiler"] is True
    assert body["needsReview"] is False


def test_create_action_requires_content(client, make_profile, auth_headers, chapter) -> None:
    r = client.post(
        ACTIONS_URL,
        json={"action": "create", "chapterId": chapter.id},
        headers=auth_headers(make_profile()),
    )
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert r.json() == {"error": "المحتوى ومعرف الفصل مطلوبان"}


def test_unsupported_action(client) -> None:
    r = client.post(ACTIONS_URL, json={"action": "explode"})
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert r.json() == {"error": "عملية غير مدعومة"}


def test_update_action_denied_for_other_user(client, make_profile, auth_headers, make_comment) -> None:
    comment = make_comment(Actor(user_id=make_profile().user_id))

    r = client.post(
        ACTIONS_URL,
        json={"action": "update", "commentId": comment.id, "content": "محاولة تعديل"},
        headers=auth_headers(make_profile()),
    )
    assert r.status_code == status.HTTP_403_FORBIDDEN
    assert r.json() == {"error": "غير مسموح بتعديل هذا التعليق"}


def test_delete_action_by_elite_fighter(client, db_session, make_profile, auth_headers, make_comment) -> None:
    comment = make_comment(Actor(user_id=make_profile().user_id))

    r = client.post(
        ACTIONS_URL,
        json={"action": "delete", "commentId": comment.id, "reason": "مخالفة"},
        headers=auth_headers(make_profile(Role.ELITE_FIGHTER)),
    )
    assert r.status_code == status.HTTP_200_OK
    assert r.json() == {"success": True}
    stored = db_session.get(Comment, comment.id)
    assert stored.is_deleted
    assert stored.deleted_reason == "مخالفة"


def test_like_action(client, make_profile, auth_headers, make_comment) -> None:
    comment = make_comment(Actor(user_id=make_profile().user_id))
    headers = auth_headers(make_profile())

    r = client.post(ACTIONS_URL, json={"action": "like", "commentId": comment.id, "isLike": False}, headers=headers)
    assert r.json()["reactions"]["dislike"] == 1

    r = client.post(ACTIONS_URL, json={"action": "like", "commentId": comment.id, "isLike": True}, headers=headers)
    assert r.json()["reactions"]["dislike"] == 0
    assert r.json()["reactions"]["like"] == 1


def test_like_action_requires_login(client, make_profile, make_comment) -> None:
    comment = make_comment(Actor(user_id=make_profile().user_id))

    r = client.post(ACTIONS_URL, json={"action": "like", "commentId": comment.id, "isLike": True})
    assert r.status_code == status.HTTP_403_FORBIDDEN


def test_react_action(client, make_profile, auth_headers, make_comment) -> None:
    comment = make_comment(Actor(user_id=make_profile().user_id))

    r = client.post(
        ACTIONS_URL,
        json={"action": "react", "commentId": comment.id, "reactionType": "laugh"},
        headers=auth_headers(make_profile()),
    )
    assert r.json()["reactions"]["laugh"] == 1


def test_report_action_keeps_free_text(client, db_session, make_profile, auth_headers, make_comment) -> None:
    comment = make_comment(Actor(user_id=make_profile().user_id))

    r = client.post(
        ACTIONS_URL,
        json={"action": "report", "commentId": comment.id, "reason": "يحرق أحداث الفصل"},
        headers=auth_headers(make_profile()),
    )
    assert r.status_code == status.HTTP_200_OK
    report = db_session.get(Report, r.json()["reportId"])
    assert report.reason == "other"
    assert report.description == "يحرق أحداث الفصل"


def test_report_action_from_anonymous_visitor(client, db_session, make_profile, make_comment) -> None:
    comment = make_comment(Actor(user_id=make_profile().user_id))

    r = client.post(
        ACTIONS_URL,
        json={"action": "report", "commentId": comment.id, "reason": "spam"},
        headers={"user-agent": "reader-browser"},
    )
    assert r.status_code == status.HTTP_200_OK
    report = db_session.get(Report, r.json()["reportId"])
    assert report.reporter_id is None
    assert report.reporter_session is not None
    assert report.reason == "spam"


def test_hide_action_requires_moderator(client, make_profile, auth_headers, make_comment) -> None:
    comment = make_comment(Actor(user_id=make_profile().user_id))

    r = client.post(ACTIONS_URL, json={"action": "hide", "commentId": comment.id}, headers=auth_headers(make_profile()))
    assert r.status_code == status.HTTP_403_FORBIDDEN

    r = client.post(
        ACTIONS_URL,
        json={"action": "hide", "commentId": comment.id},
        headers=auth_headers(make_profile(Role.ADMIN)),
    )
    assert r.json() == {"success": True}


def test_pin_and_unpin_actions(client, make_profile, auth_headers, make_comment) -> None:
    comment = make_comment(Actor(user_id=make_profile().user_id))
    headers = auth_headers(make_profile(Role.TRIBE_LEADER))

    r = client.post(ACTIONS_URL, json={"action": "pin", "commentId": comment.id}, headers=headers)
    assert r.json()["comment"]["is_pinned"] is True
    r = client.post(ACTIONS_URL, json={"action": "unpin", "commentId": comment.id}, headers=headers)
    assert r.json()["comment"]["is_pinned"] is False


def test_missing_comment_is_404(client, make_profile, auth_headers) -> None:
    r = client.post(
        ACTIONS_URL,
        json={"action": "delete", "commentId": "missing"},
        headers=auth_headers(make_profile()),
    )
    assert r.status_code == status.HTTP_404_NOT_FOUND
    assert "error" in r.json()
