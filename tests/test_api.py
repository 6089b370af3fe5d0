"""
Tests for the HTTP endpoints
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from event_creator.core.config import settings
from event_creator.core.db import Base, get_db
from event_creator.services.repositories import EventRepo
from event_creator.utils.security import rate_limiter
from main import app

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_api.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture
def client(monkeypatch):
    """Test client on a fresh database with no generation delay"""
    Base.metadata.create_all(bind=engine)
    app.dependency_overrides[get_db] = override_get_db
    monkeypatch.setattr(settings, "GENERATION_DELAY_SECONDS", 0)
    rate_limiter.clear()
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        Base.metadata.drop_all(bind=engine)

@pytest.fixture
def event_id(client):
    response = client.post("/events", json={
        "title": "Team Dinner",
        "date": "2030-05-01",
        "time": "19:30",
        "location": "Downtown Restaurant",
        "capacity": 20,
    })
    return response.json()["data"]["id"]

def add_guest(client, event_id, name, email):
    response = client.post(f"/events/{event_id}/guests", json={"name": name, "email": email})
    assert response.status_code == 201
    return response.json()["data"]

def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}

def test_generate_event(client):
    response = client.post("/events/generate", json={"prompt": "Networking meetup tomorrow online"})

    assert response.status_code == 201
    body = response.json()
    assert body["success"]
    assert body["data"]["title"] == "Community Meetup"
    assert body["data"]["category"] == "networking"
    assert body["data"]["location"] == "Virtual Event (Online)"
    assert body["data"]["status"] == "draft"

def test_generate_requires_prompt(client):
    response = client.post("/events/generate", json={"prompt": "   "})

    assert response.status_code == 422
    assert response.json()["message"] == "Please describe your event idea"

def test_manual_form_requires_fields(client):
    response = client.post("/events", json={
        "title": "", "date": "2030-05-01", "time": "19:30", "location": "Home"
    })

    assert response.status_code == 422

def test_event_detail(client, event_id):
    add_guest(client, event_id, "Ada", "ada@example.com")

    body = client.get(f"/events/{event_id}").json()

    assert body["data"]["title"] == "Team Dinner"
    assert [g["name"] for g in body["data"]["guests"]] == ["Ada"]
    assert body["data"]["statistics"]["pending_guests"] == 1

def test_unknown_event(client):
    response = client.get("/events/evt_missing")

    assert response.status_code == 404
    assert response.json()["detail"] == "Event not found"

def test_add_guest_requires_email(client, event_id):
    response = client.post(f"/events/{event_id}/guests", json={"name": "Ada"})

    assert response.status_code == 422
    assert response.json()["message"] == "Please provide name and email"
    assert client.get(f"/events/{event_id}/guests").json()["data"] == []

def test_update_event(client, event_id):
    response = client.patch(f"/events/{event_id}", json={"changes": [
        {"field": "title", "value": "Team Lunch"},
        {"field": "time", "value": "12:00"},
    ]})

    assert response.status_code == 200
    assert response.json()["data"]["title"] == "Team Lunch"

    response = client.patch(f"/events/{event_id}", json={"changes": [{"field": "title", "value": " "}]})
    assert response.status_code == 200
    assert response.json()["data"]["title"] == "Untitled Event"

def test_toggle_publish(client, event_id):
    response = client.post(f"/events/{event_id}/publish")
    assert response.json()["message"] == "Event published successfully!"

    response = client.post(f"/events/{event_id}/publish")
    assert response.json()["message"] == "Event unpublished"
    assert response.json()["data"]["status"] == "draft"

def test_delete_event(client, event_id):
    response = client.delete(f"/events/{event_id}")

    assert response.json()["data"] == {"deleted_event_id": event_id}
    assert client.get(f"/events/{event_id}").status_code == 404

def test_import_preview_and_import(client, event_id):
    content = b"Full Name,E-mail Address,Tel\nAda,ada@x.com,1\n,b@x.com,2\nCy,,3\n"

    preview = client.post(
        f"/events/{event_id}/guests/import/preview",
        files={"file": ("guests.csv", content, "text/csv")}
    ).json()["data"]
    assert preview["mapping"] == {"name": "Full Name", "email": "E-mail Address", "phone": "Tel"}
    assert preview["total_rows"] == 3

    response = client.post(
        f"/events/{event_id}/guests/import",
        files={"file": ("guests.csv", content, "text/csv")},
        data={"name_column": "Full Name"}
    )
    assert response.status_code == 200
    result = response.json()["data"]
    assert result["imported"] == 2
    assert result["failed"] == 1
    assert result["skipped_lines"] == [3]

    guests = client.get(f"/events/{event_id}/guests").json()["data"]
    assert [g["name"] for g in guests] == ["Ada", "Cy"]
    assert guests[0]["phone"] == "1"
    assert guests[1]["email"] == ""

def test_import_rejects_empty_file(client, event_id):
    response = client.post(
        f"/events/{event_id}/guests/import",
        files={"file": ("guests.csv", b"\n\n", "text/csv")}
    )

    assert response.status_code == 400
    assert response.json()["message"] == "CSV file is empty"

def test_import_rejects_unknown_column(client, event_id):
    response = client.post(
        f"/events/{event_id}/guests/import",
        files={"file": ("guests.csv", b"Name,Email\nAda,a@x.com\n", "text/csv")},
        data={"email_column": "Mail"}
    )

    assert response.status_code == 422

def test_import_guest_list_creates_event(client):
    response = client.post(
        "/events/import-guest-list",
        files={"file": ("list.csv", b"Name,Email\nAda,ada@x.com\nBob,bob@x.com\n", "text/csv")}
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["guest_count"] == 2
    assert data["event"]["title"] == "Imported Event"

def test_rsvp_flow(client, event_id):
    guest = add_guest(client, event_id, "Ada", "ada@example.com")

    view = client.get("/rsvp", params={"rsvp": event_id, "guest": guest["id"]}).json()["data"]
    assert view["valid"]
    assert view["event"]["title"] == "Team Dinner"

    response = client.post("/rsvp", json={
        "event_id": event_id, "guest_id": guest["id"], "status": "confirmed", "plus_one": True
    })
    assert response.json()["message"] == "Thanks for confirming!"
    assert response.json()["data"]["responded_at"] is not None

    stats = client.get(f"/events/{event_id}/statistics").json()["data"]
    assert stats["confirmed_guests"] == 1
    assert stats["plus_ones"] == 1
    assert stats["capacity_percentage"] == 10

def test_invalid_invitation_link(client, event_id):
    response = client.get("/rsvp", params={"rsvp": event_id, "guest": "guest_missing"})

    assert response.status_code == 200
    assert response.json()["data"]["valid"] is False
    assert response.json()["data"]["message"] == "This invitation link is not valid."

    response = client.post("/rsvp", json={
        "event_id": event_id, "guest_id": "guest_missing", "status": "declined"
    })
    assert response.status_code == 404

def test_rsvp_rate_limit(client, monkeypatch):
    monkeypatch.setattr(settings, "RATE_LIMIT_PER_MINUTE", 2)

    statuses = [client.get("/rsvp").status_code for _ in range(3)]

    assert statuses == [200, 200, 429]

def test_invitation_links_and_qr(client, event_id):
    guest = add_guest(client, event_id, "Ada", "ada@example.com")

    links = client.get(f"/events/{event_id}/guests/{guest['id']}/invitation").json()["data"]
    assert links["whatsapp_url"] is None
    assert f"rsvp={event_id}" in links["invitation_url"]

    response = client.get(f"/events/{event_id}/guests/{guest['id']}/qr.png")
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.content.startswith(b"\x89PNG")

def test_csv_template(client):
    response = client.get("/template/guest-import-template.csv")

    assert response.status_code == 200
    assert response.text == (
        "Name,Email,Phone\n"
        "John Doe,john@example.com,+1234567890\n"
        "Jane Smith,jane@example.com,+0987654321\n"
    )

def test_dashboard_and_export(client, event_id):
    add_guest(client, event_id, "Ada", "ada@example.com")

    dashboard = client.get("/dashboard").json()["data"]
    assert dashboard["total_events"] == 1
    assert dashboard["draft_events"] == 1
    assert dashboard["upcoming_events"][0]["guest_count"] == 1
    assert dashboard["pending_guests"] == 1
    assert dashboard["declined_guests"] == 0
    assert dashboard["confirmation_rate"] == 0

    export = client.get("/guests/export.csv")
    assert export.text.splitlines()[1].startswith("Ada,ada@example.com,,pending,Team Dinner,2030-05-01")

def test_event_templates(client):
    templates = client.get("/templates/events").json()["data"]

    assert [t["id"] for t in templates] == ["birthday", "business", "networking", "entertainment", "social"]
    assert templates[0]["category"] == "celebration"
    assert templates[0]["default_capacity"] == 30

def test_manual_form_with_template(client):
    response = client.post("/events", json={
        "title": "Quarterly Review",
        "date": "2030-05-01",
        "time": "10:00",
        "location": "HQ",
        "template": "business",
    })

    data = response.json()["data"]
    assert data["category"] == "business"
    assert data["capacity"] == 20

def test_bulk_guest_status(client, event_id):
    ada = add_guest(client, event_id, "Ada", "ada@example.com")
    bob = add_guest(client, event_id, "Bob", "bob@example.com")
    add_guest(client, event_id, "Cy", "cy@example.com")

    response = client.patch(f"/events/{event_id}/guests/status", json={
        "guest_ids": [ada["id"], bob["id"], "guest_missing"], "status": "confirmed"
    })

    assert response.status_code == 200
    assert response.json()["message"] == "Updated 2 guests"
    assert all(g["responded_at"] for g in response.json()["data"])

    dashboard = client.get("/dashboard").json()["data"]
    assert dashboard["confirmed_guests"] == 2
    assert dashboard["pending_guests"] == 1
    assert dashboard["confirmation_rate"] == 67

def test_bulk_guest_status_rejects_pending(client, event_id):
    response = client.patch(f"/events/{event_id}/guests/status", json={
        "guest_ids": [], "status": "pending"
    })

    assert response.status_code == 422

def test_bulk_guest_status_unknown_event(client):
    response = client.patch("/events/evt_missing/guests/status", json={
        "guest_ids": ["guest_1"], "status": "declined"
    })

    assert response.status_code == 404

def test_store_failure_returns_generic_error(client, monkeypatch):
    def failing_list_all(db, created_by=None):
        raise SQLAlchemyError("disk I/O error")
    monkeypatch.setattr(EventRepo, "list_all", staticmethod(failing_list_all))

    response = client.get("/events")

    assert response.status_code == 500
    assert response.json()["success"] is False
    assert response.json()["message"] == "Request failed. Please try again."
    assert response.json()["error_code"] == "store_error"

def test_excel_template(client):
    response = client.get("/template/guest-import-template.xlsx")

    assert response.status_code == 200
    assert "spreadsheetml" in response.headers["content-type"]
    assert response.content.startswith(b"PK")

def test_search_events_and_guests(client, event_id):
    add_guest(client, event_id, "Ada Lovelace", "ada@example.com")
    add_guest(client, event_id, "Bob", "bob@example.com")

    events = client.get("/events/search", params={"q": "dinner"}).json()["data"]
    assert [e["title"] for e in events] == ["Team Dinner"]
    assert client.get("/events/search", params={"q": "gala"}).json()["data"] == []

    guests = client.get("/guests/search", params={"q": "lovelace"}).json()["data"]
    assert [g["name"] for g in guests] == ["Ada Lovelace"]

def test_import_guest_list_rejects_bad_creator_email(client):
    response = client.post(
        "/events/import-guest-list",
        files={"file": ("list.csv", b"Name\nAda\n", "text/csv")},
        data={"created_by": "not-an-email"}
    )

    assert response.status_code == 422
