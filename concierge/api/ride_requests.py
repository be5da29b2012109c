"""Buggy ride requests between guests, reception and drivers"""
from datetime import datetime
from typing import Any, Literal

import sqlalchemy
from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from concierge import database as db
from concierge import tables
from concierge.api.resources import ALL_OPERATIONS, Resource, crud_router, fetch_all, to_model
from concierge.errors import STORE_REJECTIONS, bad_request_from

RideStatus = Literal["IDLE", "SEARCHING", "ASSIGNED", "ARRIVING", "ON_TRIP", "COMPLETED"]

ACCEPTED_STATUSES = ("ASSIGNED", "ARRIVING")


class RideRequestCreate(BaseModel):
    guest_name: str = Field(min_length=1)
    room_number: str = Field(min_length=1)
    pickup: str = Field(min_length=1)
    destination: str = Field(min_length=1)
    status: RideStatus = "SEARCHING"
    timestamp: int
    driver_id: int | None = None
    eta: int | None = None


class RideRequestUpdate(BaseModel):
    guest_name: str | None = None
    room_number: str | None = None
    pickup: str | None = None
    destination: str | None = None
    status: RideStatus | None = None
    timestamp: int | None = None
    driver_id: int | None = None
    eta: int | None = None
    rating: int | None = Field(default=None, ge=1, le=5)
    feedback: str | None = None


class RideRequest(BaseModel):
    id: int
    guest_name: str
    room_number: str
    pickup: str
    destination: str
    status: str
    timestamp: int
    driver_id: int | None = None
    eta: int | None = None
    rating: int | None = None
    feedback: str | None = None
    assigned_timestamp: datetime | None = None
    pick_timestamp: datetime | None = None
    drop_timestamp: datetime | None = None
    created_at: datetime
    updated_at: datetime


def stamp_status_change(values: dict[str, Any]) -> dict[str, Any]:
    """
    Record when a ride was accepted, picked up and dropped off.

    The CASE expressions compare against the row's current status inside the
    same UPDATE, so a repeated status write keeps the original timestamp.
    """
    new_status = values.get("status")
    if new_status is None:
        values.pop("status", None)
        return values

    table = tables.ride_requests
    now = sqlalchemy.func.now()
    if new_status in ACCEPTED_STATUSES:
        values["assigned_timestamp"] = sqlalchemy.case(
            (table.c.status.not_in(ACCEPTED_STATUSES), now), else_=table.c.assigned_timestamp
        )
    elif new_status == "ON_TRIP":
        values["pick_timestamp"] = sqlalchemy.case(
            (table.c.status != "ON_TRIP", now), else_=table.c.pick_timestamp
        )
    elif new_status == "COMPLETED":
        values["drop_timestamp"] = sqlalchemy.case(
            (table.c.status != "COMPLETED", now), else_=table.c.drop_timestamp
        )
    return values


resource = Resource(
    name="ride_request",
    path="ride-requests",
    table=tables.ride_requests,
    read_schema=RideRequest,
    create_schema=RideRequestCreate,
    update_schema=RideRequestUpdate,
    order_by=(tables.ride_requests.c.timestamp.desc(),),
    not_found="Ride request not found",
    error_context="ride",
    operations=ALL_OPERATIONS - {"create"},
    prepare_update=stamp_status_change,
)

router = APIRouter(prefix=resource.prefix, tags=["ride-requests"])


@router.get("/room/{room_number}", response_model=list[RideRequest])
def get_rides_by_room(room_number: str):
    return fetch_all(resource, tables.ride_requests.c.room_number == room_number)


@router.get("/room/{room_number}/active", response_model=RideRequest)
def get_active_ride(room_number: str):
    """Most recent ride for the room that has not completed yet"""
    rides = fetch_all(
        resource,
        tables.ride_requests.c.room_number == room_number,
        tables.ride_requests.c.status != "COMPLETED",
        limit=1,
    )
    if not rides:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No active ride found")
    return rides[0]


@router.get("/status/{ride_status}", response_model=list[RideRequest])
def get_rides_by_status(ride_status: RideStatus):
    return fetch_all(resource, tables.ride_requests.c.status == ride_status)


@router.post("/", response_model=RideRequest, status_code=status.HTTP_201_CREATED)
def create_ride(body: RideRequestCreate):
    """
    Request a buggy.

    A room may only have one ride in flight; a second request while one is
    still open is rejected with 409.
    """
    table = tables.ride_requests
    try:
        with db.engine.begin() as connection:
            active = connection.execute(
                sqlalchemy.text(
                    """
                    SELECT id
                    FROM ride_requests
                    WHERE room_number = :room_number AND status != 'COMPLETED'
                    LIMIT 1
                    """
                ),
                {"room_number": body.room_number}
            ).fetchone()

            if active:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="You already have an active ride request. Please wait for it to complete."
                )

            row = connection.execute(
                sqlalchemy.insert(table).values(**body.model_dump()).returning(*table.c)
            ).mappings().one()
    except STORE_REJECTIONS as e:
        raise bad_request_from(e, "ride", "create")

    return to_model(resource, row)


crud_router(resource, router)
