"""Tests for guest and staff accounts"""
from datetime import datetime, timedelta, timezone

import pytest
import sqlalchemy
from fastapi import HTTPException

from concierge import database as db
from concierge import tables
from concierge.api import users
from concierge.api.resources import fetch_one, insert_one, update_one
from concierge.api.users import (
    CHECK_IN_CODE_ALPHABET,
    LocationUpdate,
    UserCreate,
    UserUpdate,
    create_check_in_code,
    get_user_by_room,
    mark_driver_offline,
    update_user_location,
)
from concierge.security import verify_password


def stored_password_hash(user_id):
    with db.engine.begin() as conn:
        return conn.execute(
            sqlalchemy.select(tables.users.c.password_hash).where(tables.users.c.id == user_id)
        ).scalar_one()


def set_reminded(user_id):
    with db.engine.begin() as conn:
        conn.execute(sqlalchemy.update(tables.users).where(tables.users.c.id == user_id).values(checkout_reminded=True))


def test_password_is_hashed_and_never_returned(client):
    response = client.post("/api/v1/users/", json={
        "last_name": "Reception", "room_number": "reception", "role": "RECEPTION", "password": "front-desk",
    })

    assert response.status_code == 201
    body = response.json()
    assert "password" not in body
    assert "password_hash" not in body

    password_hash = stored_password_hash(body["id"])
    assert password_hash != "front-desk"
    assert verify_password("front-desk", password_hash)


def test_password_update_rehashes():
    user = insert_one(users.resource, UserCreate(last_name="Driver", room_number="driver1", role="DRIVER", password="first"))

    update_one(users.resource, user.id, UserUpdate(password="second"))

    assert verify_password("second", stored_password_hash(user.id))


def test_stay_times_are_stored_as_naive_utc():
    check_out = datetime(2026, 3, 5, 12, 0, tzinfo=timezone(timedelta(hours=7)))
    user = insert_one(users.resource, UserCreate(last_name="Nguyen", room_number="101", check_out=check_out))

    assert user.check_out == datetime(2026, 3, 5, 5, 0)


def test_changing_check_out_resets_reminded_flag():
    user = insert_one(users.resource, UserCreate(last_name="Nguyen", room_number="101", check_out=datetime(2026, 3, 5, 5, 0)))
    set_reminded(user.id)

    # Unrelated edits keep the flag
    assert update_one(users.resource, user.id, UserUpdate(notes="Allergic to peanuts")).checkout_reminded is True

    updated = update_one(users.resource, user.id, UserUpdate(check_out=datetime(2026, 3, 5, 9, 0)))
    assert updated.checkout_reminded is False


def test_get_by_room():
    user = insert_one(users.resource, UserCreate(last_name="Nguyen", room_number="101"))

    assert get_user_by_room("101").id == user.id
    with pytest.raises(HTTPException) as exc_info:
        get_user_by_room("999")
    assert exc_info.value.detail == "User not found"


def test_duplicate_room_number_is_400(client):
    client.post("/api/v1/users/", json={"last_name": "Nguyen", "room_number": "101"})

    response = client.post("/api/v1/users/", json={"last_name": "Tran", "room_number": "101"})
    assert response.status_code == 400
    assert response.json() == {"error": "This room number is already registered."}


def test_invalid_email_is_400(client):
    response = client.post("/api/v1/users/", json={"last_name": "Nguyen", "room_number": "101", "email": "not-an-email"})
    assert response.status_code == 400
    assert "email" in response.json()["error"]


def test_update_location():
    driver = insert_one(users.resource, UserCreate(last_name="Driver", room_number="driver1", role="DRIVER"))

    updated = update_user_location(driver.id, LocationUpdate(lat=16.0398, lng=108.2505))

    assert updated.current_lat == 16.0398
    assert updated.current_lng == 108.2505
    assert updated.location_updated_at is not None


def test_update_location_out_of_range(client):
    driver = insert_one(users.resource, UserCreate(last_name="Driver", room_number="driver1", role="DRIVER"))

    response = client.put(f"/api/v1/users/{driver.id}/location", json={"lat": 91, "lng": 108.25})
    assert response.status_code == 400


def test_update_location_missing_user():
    with pytest.raises(HTTPException) as exc_info:
        update_user_location(999, LocationUpdate(lat=16.0, lng=108.0))
    assert exc_info.value.status_code == 404


def test_check_in_code_for_guest():
    guest = insert_one(users.resource, UserCreate(last_name="Nguyen", room_number="101"))

    result = create_check_in_code(guest.id)

    assert result.success is True
    assert len(result.check_in_code) == 8
    assert set(result.check_in_code) <= set(CHECK_IN_CODE_ALPHABET)
    assert fetch_one(users.resource, guest.id).check_in_code == result.check_in_code


def test_check_in_code_only_for_guests():
    staff = insert_one(users.resource, UserCreate(last_name="Staff", room_number="staff1", role="STAFF"))

    with pytest.raises(HTTPException) as exc_info:
        create_check_in_code(staff.id)
    assert exc_info.value.status_code == 400


def test_check_in_code_missing_user():
    with pytest.raises(HTTPException) as exc_info:
        create_check_in_code(999)
    assert exc_info.value.status_code == 404


def test_unchanged_check_out_keeps_reminded_flag():
    check_out = datetime(2026, 3, 5, 5, 0)
    user = insert_one(users.resource, UserCreate(last_name="Nguyen", room_number="101", check_out=check_out))
    set_reminded(user.id)

    updated = update_one(users.resource, user.id, UserUpdate(notes="Late lunch", check_out=check_out))
    assert updated.checkout_reminded is True

    # Same instant sent with the guest's local offset
    local = datetime(2026, 3, 5, 12, 0, tzinfo=timezone(timedelta(hours=7)))
    assert update_one(users.resource, user.id, UserUpdate(check_out=local)).checkout_reminded is True


def test_first_check_out_on_reminded_row_resets_flag():
    user = insert_one(users.resource, UserCreate(last_name="Nguyen", room_number="101"))
    set_reminded(user.id)

    updated = update_one(users.resource, user.id, UserUpdate(check_out=datetime(2026, 3, 5, 5, 0)))
    assert updated.checkout_reminded is False


def test_update_refreshes_updated_at(client):
    user = insert_one(users.resource, UserCreate(last_name="Nguyen", room_number="101"))
    stale = datetime(2020, 1, 1, 0, 0)
    with db.engine.begin() as conn:
        conn.execute(sqlalchemy.update(tables.users).where(tables.users.c.id == user.id).values(updated_at=stale))

    response = client.put(f"/api/v1/users/{user.id}", json={"notes": "Anniversary cake"})

    assert response.status_code == 200
    assert datetime.fromisoformat(response.json()["updated_at"]) > stale


def test_mark_driver_offline_backdates_activity(client):
    driver = insert_one(users.resource, UserCreate(last_name="Driver", room_number="driver1", role="DRIVER"))

    response = client.post(f"/api/v1/users/{driver.id}/offline")

    assert response.status_code == 200
    last_seen = datetime.fromisoformat(response.json()["updated_at"])
    assert last_seen <= datetime.utcnow() - timedelta(minutes=2)


def test_mark_driver_offline_missing_user():
    with pytest.raises(HTTPException) as exc_info:
        mark_driver_offline(999)
    assert exc_info.value.status_code == 404
    assert exc_info.value.detail == "User not found"
