"""Tests for report endpoints."""

from fastapi import status

from manga_guard.core.roles import Role


def test_report_lifecycle(client, make_profile, auth_headers, manga) -> None:
    reporter = make_profile()
    r = client.post(
        "/api/v1/reports/",
        json={"kind": "manga", "target_id": manga.id, "reason": "copyright", "description": "منسوخة"},
        headers=auth_headers(reporter),
    )
    assert r.status_code == status.HTTP_201_CREATED
    report_id = r.json()["id"]
    assert r.json()["status"] == "pending"

    elite = make_profile(Role.ELITE_FIGHTER)
    r = client.get("/api/v1/reports/", params={"status": "pending"}, headers=auth_headers(elite))
    assert [item["id"] for item in r.json()] == [report_id]

    r = client.patch(f"/api/v1/reports/{report_id}", json={"status": "resolved"}, headers=auth_headers(elite))
    assert r.status_code == status.HTTP_403_FORBIDDEN

    leader = make_profile(Role.TRIBE_LEADER)
    r = client.patch(f"/api/v1/reports/{report_id}", json={"status": "resolved"}, headers=auth_headers(leader))
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["reviewed_by"] == leader.user_id

    r = client.get("/api/v1/reports/stats", headers=auth_headers(leader))
    assert r.json()["resolved"] == 1
    assert r.json()["total"] == 1


def test_anonymous_visitor_reports_under_session(client, manga) -> None:
    r = client.post(
        "/api/v1/reports/",
        json={"kind": "manga", "target_id": manga.id, "reason": "spam"},
        headers={"user-agent": "reader-browser"},
    )
    assert r.status_code == status.HTTP_201_CREATED
    assert r.json()["reporter_id"] is None


def test_report_listing_requires_login(client) -> None:
    r = client.get("/api/v1/reports/")
    assert r.status_code == status.HTTP_401_UNAUTHORIZED


def test_report_rejects_unknown_reason(client, make_profile, auth_headers, manga) -> None:
    r = client.post(
        "/api/v1/reports/",
        json={"kind": "manga", "target_id": manga.id, "reason": "boring"},
        headers=auth_headers(make_profile()),
    )
    assert r.status_code == 422
