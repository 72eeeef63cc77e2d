"""Tests for moderation check and review queue endpoints."""

from fastapi import status

from manga_guard.core.roles import Role
from manga_guard.services.actors import Actor


def test_check_reports_verdict_and_quality(client) -> None:
    r = client.post("/api/v1/moderation/check", json={"content": "الفصل غبي"})
    assert r.status_code == status.HTTP_200_OK
    body = r.json()
    assert body["severity"] == "mild"
    assert body["filtered_content"] == "الفصل ***"
    assert body["detected_words"] == ["غبي"]
    assert body["is_valid"] is True
    assert body["is_spam"] is False
    assert 0 <= body["quality_score"] <= 100


def test_check_flags_spam_against_history(client) -> None:
    r = client.post(
        "/api/v1/moderation/check",
        json={"content": "تابعوني على قناتي", "history": ["تابعوني على قناتي!"]},
    )
    assert r.json()["is_spam"] is True


def test_check_reports_validation_errors(client) -> None:
    r = client.post("/api/v1/moderation/check", json={"content": "777"})
    body = r.json()
    assert body["is_valid"] is False
    assert body["errors"]


def test_check_skips_spam_scoring_for_invalid_text(client) -> None:
    content = "ا" * 3000
    r = client.post(
        "/api/v1/moderation/check",
        json={"content": content, "history": [content[:2000]] * 20},
    )
    assert r.status_code == status.HTTP_200_OK
    body = r.json()
    assert body["is_valid"] is False
    assert body["is_spam"] is False


def test_check_rejects_oversized_input(client) -> None:
    too_long = client.post("/api/v1/moderation/check", json={"content": "ا" * 4001})
    too_many = client.post("/api/v1/moderation/check", json={"content": "نص", "history": ["نص"] * 21})
    long_item = client.post("/api/v1/moderation/check", json={"content": "نص", "history": ["ن" * 2001]})

    assert too_long.status_code == 422
    assert too_many.status_code == 422
    assert long_item.status_code == 422


def test_review_queue_flow(client, make_profile, auth_headers, make_comment) -> None:
    author = Actor(user_id=make_profile().user_id)
    flagged = make_comment(author, content="نهاية لعين", needs_review=True)
    make_comment(author)

    r = client.get("/api/v1/moderation/queue", headers=auth_headers(make_profile()))
    assert r.status_code == status.HTTP_403_FORBIDDEN

    r = client.get("/api/v1/moderation/queue", headers=auth_headers(make_profile(Role.ELITE_FIGHTER)))
    assert r.status_code == status.HTTP_200_OK
    assert [item["id"] for item in r.json()] == [flagged.id]

    leader = make_profile(Role.TRIBE_LEADER)
    r = client.post(
        f"/api/v1/moderation/queue/{flagged.id}/resolve",
        json={"approve": False, "reason": "لغة مسيئة"},
        headers=auth_headers(leader),
    )
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["is_deleted"] is True
    assert r.json()["deleted_reason"] == "لغة مسيئة"
