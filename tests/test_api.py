from datetime import timedelta

from sqlalchemy import select

from tests.conftest import add_office, add_shift, auth_headers, tomorrow_at
from workforce.models import Achievement
from workforce.services import tokens


async def test_office_scan_round_trip(client, users):
    headers = auth_headers(users["staff"])
    body = {"scanned_content": tokens.issue_office_token()}

    first = await client.post("/attendance/scan", json=body, headers=headers)
    second = await client.post("/attendance/scan", json=body, headers=headers)

    assert first.status_code == 200
    assert first.json()["event_type"] == "CHECK_IN"
    assert first.json()["message"].startswith("Welcome, Ayse")
    assert second.json()["event_type"] == "CHECK_OUT"
    assert second.json()["message"] == "Goodbye, Ayse"


async def test_anonymous_office_scan_is_unauthorized(client, users):
    response = await client.post("/attendance/scan", json={"scanned_content": tokens.issue_office_token()})
    assert response.status_code == 401


async def test_invalid_bearer_is_treated_as_anonymous(client, users):
    response = await client.post(
        "/attendance/scan",
        json={"scanned_content": tokens.issue_office_token()},
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert response.status_code == 401


async def test_staff_scanning_badge_is_forbidden(client, users):
    response = await client.post(
        "/attendance/scan",
        json={"scanned_content": f"USER:{users['other'].id}"},
        headers=auth_headers(users["staff"]),
    )
    assert response.status_code == 403
    assert response.json()["detail"] == "Only admins can scan employee badges"


async def test_geofence_violation_reports_distance(client, db, users):
    await add_office(db, lat=0.0, lng=0.0, radius=50)

    response = await client.post(
        "/attendance/scan",
        json={"scanned_content": tokens.issue_office_token(), "location": {"lat": 0.009, "lng": 0.0}},
        headers=auth_headers(users["staff"]),
    )

    assert response.status_code == 400
    assert "1001m" in response.json()["detail"]


async def test_missing_location_asks_for_permission(client, db, users):
    await add_office(db, radius=50)
    response = await client.post(
        "/attendance/scan",
        json={"scanned_content": tokens.issue_office_token()},
        headers=auth_headers(users["staff"]),
    )
    assert response.status_code == 400
    assert "location permission" in response.json()["detail"]


async def test_garbage_scan_is_invalid(client, users):
    response = await client.post(
        "/attendance/scan", json={"scanned_content": "hello"}, headers=auth_headers(users["staff"])
    )
    assert response.status_code == 400
    assert "Invalid or expired QR" in response.json()["detail"]


async def test_badge_qr_scanned_by_admin(client, users):
    badge = await client.get("/qr/me", headers=auth_headers(users["staff"]))
    assert badge.status_code == 200

    response = await client.post(
        "/attendance/scan",
        json={"scanned_content": badge.json()["token"]},
        headers=auth_headers(users["admin"]),
    )

    assert response.status_code == 200
    assert response.json()["user_id"] == users["staff"].id


async def test_office_qr_is_admin_only(client, users):
    response = await client.post("/qr/office", headers=auth_headers(users["staff"]))
    assert response.status_code == 403


async def test_office_qr_with_location(client, users):
    response = await client.post(
        "/qr/office",
        json={"location": {"lat": 41.0, "lng": 29.0}},
        headers=auth_headers(users["admin"]),
    )

    assert response.status_code == 200
    data = response.json()
    assert data["refresh_interval_seconds"] == 30
    payload = tokens.verify(data["token"])
    assert payload.location.lat == 41.0


async def test_status_and_history(client, users):
    headers = auth_headers(users["staff"])
    status = await client.get("/attendance/status", headers=headers)
    assert status.json() == {"state": "CHECKED_OUT", "last_record": None}

    await client.post("/attendance/scan", json={"scanned_content": tokens.issue_office_token()}, headers=headers)

    status = await client.get("/attendance/status", headers=headers)
    assert status.json()["state"] == "CHECKED_IN"
    history = await client.get("/attendance/history", headers=headers)
    assert [r["type"] for r in history.json()["records"]] == ["CHECK_IN"]


async def test_check_in_awards_badge_in_background(client, session_factory, users):
    headers = auth_headers(users["staff"])
    for _ in range(5):
        for _ in range(2):
            await client.post(
                "/attendance/scan", json={"scanned_content": tokens.issue_office_token()}, headers=headers
            )

    async with session_factory() as session:
        titles = (await session.execute(select(Achievement.title))).scalars().all()
    assert titles == ["Early Bird"]


async def test_swap_flow(client, db, users):
    shift = await add_shift(db, users["staff"], tomorrow_at(9))

    created = await client.post(
        "/shifts/swaps", json={"shift_id": shift.id, "reason": "Exam"}, headers=auth_headers(users["staff"])
    )
    assert created.status_code == 200
    request_id = created.json()["id"]

    market = await client.get("/shifts/marketplace", headers=auth_headers(users["other"]))
    assert [r["id"] for r in market.json()] == [request_id]
    own = await client.get("/shifts/marketplace", headers=auth_headers(users["staff"]))
    assert own.json() == []

    self_claim = await client.post(f"/shifts/swaps/{request_id}/claim", headers=auth_headers(users["staff"]))
    assert self_claim.status_code == 400

    claim = await client.post(f"/shifts/swaps/{request_id}/claim", headers=auth_headers(users["other"]))
    assert claim.json()["status"] == "PENDING_APPROVAL"

    late_claim = await client.post(f"/shifts/swaps/{request_id}/claim", headers=auth_headers(users["executive"]))
    assert late_claim.status_code == 409

    pending = await client.get("/shifts/swaps/pending", headers=auth_headers(users["executive"]))
    assert [r["id"] for r in pending.json()] == [request_id]

    forbidden = await client.post(f"/shifts/swaps/{request_id}/approve", headers=auth_headers(users["executive"]))
    assert forbidden.status_code == 403

    approved = await client.post(f"/shifts/swaps/{request_id}/approve", headers=auth_headers(users["admin"]))
    assert approved.status_code == 200
    assert approved.json()["status"] == "APPROVED"
    assert approved.json()["shift"]["user_id"] == users["other"].id

    mine = await client.get("/shifts/swaps/mine", headers=auth_headers(users["other"]))
    assert [r["status"] for r in mine.json()] == ["APPROVED"]


async def test_unknown_swap_request(client, users):
    response = await client.post("/shifts/swaps/9999/claim", headers=auth_headers(users["other"]))
    assert response.status_code == 404


async def test_reject_via_api(client, db, users):
    shift = await add_shift(db, users["staff"], tomorrow_at(9) + timedelta(days=1))
    created = await client.post("/shifts/swaps", json={"shift_id": shift.id}, headers=auth_headers(users["staff"]))
    request_id = created.json()["id"]
    await client.post(f"/shifts/swaps/{request_id}/claim", headers=auth_headers(users["other"]))

    rejected = await client.post(f"/shifts/swaps/{request_id}/reject", headers=auth_headers(users["admin"]))

    assert rejected.json()["status"] == "REJECTED"
    assert rejected.json()["shift"]["user_id"] == users["staff"].id


async def test_company_settings(client, users):
    headers = auth_headers(users["admin"])

    missing = await client.get("/admin/settings", headers=headers)
    assert missing.status_code == 404

    saved = await client.put(
        "/admin/settings",
        json={"office_lat": 41.0, "office_lng": 29.0, "geofence_radius": 150},
        headers=headers,
    )
    assert saved.status_code == 200

    updated = await client.put(
        "/admin/settings",
        json={"office_lat": 41.5, "office_lng": 29.0, "geofence_radius": 0},
        headers=headers,
    )
    assert updated.json()["id"] == saved.json()["id"]

    current = await client.get("/admin/settings", headers=headers)
    assert current.json()["office_lat"] == 41.5
    assert current.json()["geofence_radius"] == 0

    staff = await client.put(
        "/admin/settings",
        json={"office_lat": 0, "office_lng": 0, "geofence_radius": 10},
        headers=auth_headers(users["staff"]),
    )
    assert staff.status_code == 403
