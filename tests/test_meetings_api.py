import json


def _create(client, payload):
    response = client.post("/api/meetings", json=payload)
    assert response.status_code == 200, response.text
    return response.json()["data"]


def test_create_meeting_returns_stored_document(client, meeting_payload):
    response = client.post("/api/meetings", json=meeting_payload)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    data = body["data"]
    assert len(data["_id"]) == 24
    assert data["title"] == "Sprint Planning"
    assert data["status"] == "scheduled"
    assert data["polls"] == []
    assert data["scheduleState"] == "upcoming"
    assert data["createdAt"]


def test_create_meeting_ignores_client_supplied_id(client, meeting_payload):
    data = _create(client, {**meeting_payload, "_id": "forged", "createdAt": "1999-01-01"})
    assert data["_id"] != "forged"
    assert data["createdAt"] != "1999-01-01"


def test_create_meeting_requires_user_id(client, meeting_payload):
    del meeting_payload["userId"]
    response = client.post("/api/meetings", json=meeting_payload)
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Missing fields"}


def test_create_meeting_requires_title(client, meeting_payload):
    meeting_payload["title"] = ""
    response = client.post("/api/meetings", json=meeting_payload)
    assert response.status_code == 400
    assert response.json()["error"] == "Missing fields"


def test_create_meeting_requires_time_window(client, meeting_payload):
    del meeting_payload["endTime"]
    response = client.post("/api/meetings", json=meeting_payload)
    assert response.status_code == 400
    assert "endTime" in response.json()["error"]


def test_create_meeting_rejects_non_object_body(client):
    response = client.post("/api/meetings", json=["not", "a", "meeting"])
    assert response.status_code == 400
    assert response.json()["success"] is False


def test_list_meetings_requires_user_id(client):
    response = client.get("/api/meetings")
    assert response.status_code == 400
    assert response.json()["error"] == "No User ID"


def test_list_meetings_filters_by_user_newest_first(client, repository, meeting_payload):
    repository.create_meeting({**meeting_payload, "title": "Old", "createdAt": "2024-01-01T00:00:00+00:00"})
    repository.create_meeting({**meeting_payload, "title": "New", "createdAt": "2024-03-01T00:00:00+00:00"})
    repository.create_meeting({**meeting_payload, "userId": "user-2", "title": "Someone else"})

    response = client.get("/api/meetings", params={"userId": "user-1"})

    assert response.status_code == 200
    titles = [meeting["title"] for meeting in response.json()["data"]]
    assert titles == ["New", "Old"]


def test_get_meeting_by_id(client, meeting_payload):
    created = _create(client, meeting_payload)
    response = client.get(f"/api/meetings/{created['_id']}")
    assert response.status_code == 200
    assert response.json()["data"]["title"] == "Sprint Planning"


def test_get_unknown_meeting_returns_404(client):
    response = client.get("/api/meetings/doesnotexist")
    assert response.status_code == 404
    assert response.json()["success"] is False


def test_update_meeting_applies_partial_changes(client, meeting_payload):
    created = _create(client, meeting_payload)

    response = client.put(
        "/api/meetings",
        json={"id": created["_id"], "title": "Sprint Review", "pptUrl": "https://example.com/deck.pdf"},
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["title"] == "Sprint Review"
    assert data["pptUrl"] == "https://example.com/deck.pdf"
    assert data["attendees"] == meeting_payload["attendees"]


def test_update_meeting_cannot_change_owner(client, meeting_payload):
    created = _create(client, meeting_payload)
    response = client.put("/api/meetings", json={"id": created["_id"], "userId": "intruder"})
    assert response.status_code == 200
    assert response.json()["data"]["userId"] == "user-1"


def test_update_meeting_requires_id(client):
    response = client.put("/api/meetings", json={"title": "No id"})
    assert response.status_code == 400


def test_update_unknown_meeting_returns_404(client):
    response = client.put("/api/meetings", json={"id": "missing", "title": "x"})
    assert response.status_code == 404


def test_delete_meeting_removes_it_from_list(client, storage, meeting_payload):
    keep = _create(client, {**meeting_payload, "title": "Keep"})
    drop = _create(client, {**meeting_payload, "title": "Drop"})
    storage.write_bytes(f"recordings/{drop['_id']}/call.webm", b"audio")

    response = client.delete("/api/meetings", params={"id": drop["_id"]})

    assert response.status_code == 200
    assert response.json()["data"] == {"_id": drop["_id"]}
    listed = client.get("/api/meetings", params={"userId": "user-1"}).json()["data"]
    assert [meeting["_id"] for meeting in listed] == [keep["_id"]]
    assert storage.objects == {}


def test_delete_unknown_meeting_returns_404(client):
    response = client.delete("/api/meetings", params={"id": "missing"})
    assert response.status_code == 404


def test_add_poll_appends_in_order(client, meeting_payload):
    created = _create(client, meeting_payload)
    url = f"/api/meetings/{created['_id']}/polls"

    client.post(url, json={"question": "Ship on Friday?", "options": ["Yes", "No", " "]})
    response = client.post(url, json={"question": "Retro format?", "options": ["Start/Stop", "Sailboat"]})

    polls = response.json()["data"]["polls"]
    assert [poll["question"] for poll in polls] == ["Ship on Friday?", "Retro format?"]
    assert polls[0]["options"] == ["Yes", "No"]
    assert polls[0]["createdAt"]


def test_add_poll_needs_two_options(client, meeting_payload):
    created = _create(client, meeting_payload)
    response = client.post(f"/api/meetings/{created['_id']}/polls", json={"question": "Q?", "options": ["Only", ""]})
    assert response.status_code == 400
    assert "two options" in response.json()["error"]


def test_upload_presentation_sets_ppt_url(client, storage, meeting_payload):
    created = _create(client, meeting_payload)

    response = client.post(
        f"/api/meetings/{created['_id']}/presentation",
        files={"file": ("deck.pdf", b"%PDF-1.4 slides", "application/pdf")},
    )

    assert response.status_code == 200
    assert response.json()["data"]["pptUrl"] == f"memory://presentations/{created['_id']}/deck.pdf"
    assert storage.objects[f"presentations/{created['_id']}/deck.pdf"] == b"%PDF-1.4 slides"


def test_schedule_in_calendar_stores_links(client, calendar_transport, meeting_payload):
    created = _create(client, meeting_payload)

    response = client.post(
        f"/api/meetings/{created['_id']}/calendar",
        headers={"Authorization": "Bearer google-token"},
        json={"timeZone": "Europe/Berlin"},
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["meetingLink"] == "https://calendar.google.com/event?eid=evt-123"
    assert data["calendarEventId"] == "evt-123"
    assert data["conferenceLink"] == "https://meet.google.com/abc-defg-hij"
    sent = json.loads(calendar_transport.requests[0].content)
    assert sent["start"] == {"dateTime": "2030-05-01T10:00:00", "timeZone": "Europe/Berlin"}


def test_schedule_in_calendar_requires_token(client, calendar_transport, meeting_payload):
    created = _create(client, meeting_payload)
    response = client.post(f"/api/meetings/{created['_id']}/calendar")
    assert response.status_code == 401
    assert calendar_transport.requests == []


def test_schedule_in_calendar_relays_google_error(client, calendar_transport, meeting_payload):
    calendar_transport.status_code = 401
    calendar_transport.body = {"error": {"code": 401, "message": "Invalid Credentials"}}
    created = _create(client, meeting_payload)

    response = client.post(
        f"/api/meetings/{created['_id']}/calendar", headers={"Authorization": "Bearer expired"}
    )

    assert response.status_code == 502
    assert response.json()["error"] == "Schedule failed: Invalid Credentials"


def test_share_posts_assets_to_webhook(client, webhook_transport, meeting_payload):
    created = _create(client, meeting_payload)
    client.put("/api/meetings", json={"id": created["_id"], "summary": "<p>Done</p>", "transcription": "words"})

    response = client.post(f"/api/meetings/{created['_id']}/share", json={"notes": False})

    assert response.status_code == 200
    sent = json.loads(webhook_transport.requests[0].content)
    assert sent["meetingId"] == created["_id"]
    assert sent["attendees"] == meeting_payload["attendees"]
    assert "summary" not in sent
    assert "pptUrl" in sent


def test_cors_preflight_allows_extension(client):
    response = client.options(
        "/api/meetings",
        headers={
            "Origin": "chrome-extension://bohacieageemelkifbaofkmobdfabidp",
            "Access-Control-Request-Method": "DELETE",
        },
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"


def test_health_check(client):
    assert client.get("/health").json() == {"status": "ok"}
