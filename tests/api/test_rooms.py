"""Tests for room inventory endpoints"""
import pytest
from fastapi import HTTPException

from concierge.api.rooms import BulkRoomCreate, RoomCreate, bulk_create_rooms, get_room_by_number, get_rooms_by_type


def test_bulk_create_returns_rooms_in_request_order():
    rooms = bulk_create_rooms(BulkRoomCreate(rooms=[
        RoomCreate(number="203", type_id=2),
        RoomCreate(number="201", type_id=2, status="Maintenance"),
        RoomCreate(number="101", type_id=1),
    ]))

    assert [room.number for room in rooms] == ["203", "201", "101"]
    assert rooms[1].status == "Maintenance"
    assert rooms[0].status == "Available"


def test_bulk_create_is_all_or_nothing():
    bulk_create_rooms(BulkRoomCreate(rooms=[RoomCreate(number="101", type_id=1)]))

    with pytest.raises(HTTPException) as exc_info:
        bulk_create_rooms(BulkRoomCreate(rooms=[
            RoomCreate(number="102", type_id=1),
            RoomCreate(number="101", type_id=1),
        ]))
    assert exc_info.value.status_code == 400

    with pytest.raises(HTTPException):
        get_room_by_number("102")


def test_bulk_create_requires_rooms(client):
    response = client.post("/api/v1/rooms/bulk", json={"rooms": []})
    assert response.status_code == 400


def test_get_by_number_and_type():
    bulk_create_rooms(BulkRoomCreate(rooms=[
        RoomCreate(number="102", type_id=1),
        RoomCreate(number="101", type_id=1),
        RoomCreate(number="201", type_id=2),
    ]))

    assert get_room_by_number("201").type_id == 2
    assert [room.number for room in get_rooms_by_type(1)] == ["101", "102"]
    assert get_rooms_by_type(3) == []


def test_get_unknown_number_is_404(client):
    response = client.get("/api/v1/rooms/number/999")
    assert response.status_code == 404
    assert response.json() == {"error": "Room not found"}


def test_invalid_status_is_400(client):
    response = client.post("/api/v1/rooms/", json={"number": "101", "type_id": 1, "status": "Flooded"})
    assert response.status_code == 400
    assert "status" in response.json()["error"]
