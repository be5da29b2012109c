"""Behaviour shared by every CRUD resource"""
import pytest
from fastapi import HTTPException

from concierge.api import locations
from concierge.api.resources import delete_one, fetch_all, fetch_one, insert_one, update_one

# One valid create body per resource
PAYLOADS = {
    "locations": {"lat": 16.0398, "lng": 108.2505, "name": "Ocean Villas", "type": "VILLA"},
    "room-types": {"name": "Ocean Pool Villa", "description": "Two bedrooms, private pool", "location_id": None},
    "rooms": {"number": "101", "type_id": 1, "status": "Available"},
    "menu-items": {"name": "Pho Bo", "price": 12.5, "category": "Dining", "description": "Beef noodle soup", "language": "English"},
    "promotions": {
        "title": "Sunset Spa",
        "description": "20% off massages after 5pm",
        "discount": "20%",
        "valid_until": "2026-12-31",
        "image_color": "#F5B041",
        "image_url": None,
        "language": "English",
    },
    "knowledge-items": {"question": "What time is check-out?", "answer": "Check-out is at 12:00."},
    "resort-events": {"title": "Lantern Night", "date": "2026-03-05", "time": "19:30:00", "location": "Beach", "description": None},
    "ride-requests": {
        "guest_name": "Nguyen",
        "room_number": "101",
        "pickup": "Villa 101",
        "destination": "Beach Pool",
        "status": "SEARCHING",
        "timestamp": 1772683200000,
        "driver_id": None,
        "eta": None,
    },
    "service-requests": {
        "type": "HOUSEKEEPING",
        "status": "PENDING",
        "details": "Extra towels please",
        "room_number": "101",
        "timestamp": 1772683200000,
    },
    "chat-messages": {"role": "user", "text": "Can I book a table for two?", "user_id": None, "room_number": "101", "service_type": "DINING"},
    "notifications": {"recipient_id": "101", "title": "Ride assigned", "message": "Your buggy is on its way", "type": "INFO", "is_read": False},
    "hotel-reviews": {
        "room_number": "101",
        "guest_name": "Nguyen",
        "category_ratings": [{"category": "Cleanliness", "rating": 5}, {"category": "Service", "rating": 4}],
        "average_rating": 4.5,
        "comment": "Lovely stay",
        "timestamp": 1772683200000,
    },
    "users": {
        "last_name": "Nguyen",
        "room_number": "101",
        "villa_type": "Ocean Pool Villa",
        "role": "GUEST",
        "email": "nguyen@gmail.com",
        "language": "English",
        "notes": None,
        "check_in": "2026-03-02T07:00:00",
        "check_out": "2026-03-05T05:00:00",
    },
}


@pytest.mark.parametrize("path", sorted(PAYLOADS))
def test_create_then_get_returns_created_fields(client, path):
    payload = PAYLOADS[path]

    created = client.post(f"/api/v1/{path}/", json=payload)
    assert created.status_code == 201, created.text
    body = created.json()
    for key, value in payload.items():
        assert body[key] == value, key

    fetched = client.get(f"/api/v1/{path}/{body['id']}")
    assert fetched.status_code == 200
    assert fetched.json() == body


@pytest.mark.parametrize("path", sorted(PAYLOADS))
def test_delete_then_get_is_404(client, path):
    created = client.post(f"/api/v1/{path}/", json=PAYLOADS[path]).json()

    assert client.delete(f"/api/v1/{path}/{created['id']}").status_code == 204

    missing = client.get(f"/api/v1/{path}/{created['id']}")
    assert missing.status_code == 404
    assert "not found" in missing.json()["error"].lower()

    again = client.delete(f"/api/v1/{path}/{created['id']}")
    assert again.status_code == 404


@pytest.mark.parametrize("path", sorted(PAYLOADS))
def test_list_includes_created(client, path):
    created = client.post(f"/api/v1/{path}/", json=PAYLOADS[path]).json()

    listed = client.get(f"/api/v1/{path}/")
    assert listed.status_code == 200
    assert [item["id"] for item in listed.json()] == [created["id"]]


def test_chat_messages_have_no_update(client):
    created = client.post("/api/v1/chat-messages/", json=PAYLOADS["chat-messages"]).json()

    response = client.put(f"/api/v1/chat-messages/{created['id']}", json={"text": "edited"})
    assert response.status_code == 405


def test_missing_required_field_is_400(client):
    response = client.post("/api/v1/locations/", json={"lat": 16.0, "lng": 108.2})
    assert response.status_code == 400
    assert "name" in response.json()["error"]


def test_duplicate_room_number_is_400(client):
    client.post("/api/v1/rooms/", json=PAYLOADS["rooms"])

    response = client.post("/api/v1/rooms/", json=PAYLOADS["rooms"])
    assert response.status_code == 400
    assert response.json() == {"error": "This item already exists. Please use a different value."}


def test_insert_and_fetch_one():
    created = insert_one(locations.resource, locations.LocationCreate(lat=16.04, lng=108.25, name="V-Spa", type="FACILITY"))

    assert isinstance(created, locations.Location)
    assert fetch_one(locations.resource, created.id) == created


def test_update_only_changes_supplied_fields():
    created = insert_one(locations.resource, locations.LocationCreate(lat=16.04, lng=108.25, name="V-Spa", type="FACILITY"))

    updated = update_one(locations.resource, created.id, locations.LocationUpdate(name="V-Spa & Wellness"))

    assert updated.name == "V-Spa & Wellness"
    assert updated.lat == created.lat
    assert updated.lng == created.lng
    assert updated.type == "FACILITY"


def test_update_with_empty_body_returns_row_unchanged():
    created = insert_one(locations.resource, locations.LocationCreate(lat=16.04, lng=108.25, name="V-Spa"))

    assert update_one(locations.resource, created.id, locations.LocationUpdate()) == created


def test_update_missing_is_404():
    with pytest.raises(HTTPException) as exc_info:
        update_one(locations.resource, 999, locations.LocationUpdate(name="Nowhere"))
    assert exc_info.value.status_code == 404
    assert exc_info.value.detail == "Location not found"


def test_delete_missing_is_404():
    with pytest.raises(HTTPException) as exc_info:
        delete_one(locations.resource, 999)
    assert exc_info.value.status_code == 404


def test_fetch_all_orders_by_name():
    for name in ("Lagoon Villas", "Beach Pool", "Cafe Indochine"):
        insert_one(locations.resource, locations.LocationCreate(lat=16.04, lng=108.25, name=name))

    assert [item.name for item in fetch_all(locations.resource)] == ["Beach Pool", "Cafe Indochine", "Lagoon Villas"]
