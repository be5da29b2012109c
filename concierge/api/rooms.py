"""Room inventory endpoints"""
from datetime import datetime
from typing import Literal

import sqlalchemy
from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from concierge import database as db
from concierge import tables
from concierge.api.resources import Resource, crud_router, fetch_all, fetch_first, to_model
from concierge.errors import STORE_REJECTIONS, bad_request_from

RoomStatus = Literal["Available", "Occupied", "Maintenance"]


class RoomCreate(BaseModel):
    number: str = Field(min_length=1)
    type_id: int
    status: RoomStatus = "Available"


class RoomUpdate(BaseModel):
    number: str | None = Field(default=None, min_length=1)
    type_id: int | None = None
    status: RoomStatus | None = None


class Room(BaseModel):
    id: int
    number: str
    type_id: int
    status: str
    created_at: datetime
    updated_at: datetime


class BulkRoomCreate(BaseModel):
    rooms: list[RoomCreate] = Field(min_length=1)


resource = Resource(
    name="room",
    path="rooms",
    table=tables.rooms,
    read_schema=Room,
    create_schema=RoomCreate,
    update_schema=RoomUpdate,
    order_by=(tables.rooms.c.number,),
    not_found="Room not found",
    error_context="room",
)

router = APIRouter(prefix=resource.prefix, tags=["rooms"])


@router.get("/number/{number}", response_model=Room)
def get_room_by_number(number: str):
    """Look up a room by its door number"""
    return fetch_first(resource, tables.rooms.c.number == number)


@router.get("/type/{type_id}", response_model=list[Room])
def get_rooms_by_type(type_id: int):
    return fetch_all(resource, tables.rooms.c.type_id == type_id)


@router.post("/bulk", response_model=list[Room], status_code=status.HTTP_201_CREATED)
def bulk_create_rooms(body: BulkRoomCreate):
    """
    Create many rooms at once (e.g. a whole villa block).

    All rows go in one transaction: a duplicate number anywhere fails the batch.
    """
    table = tables.rooms
    try:
        with db.engine.begin() as connection:
            rows = connection.execute(
                sqlalchemy.insert(table).returning(*table.c, sort_by_parameter_order=True),
                [room.model_dump() for room in body.rooms],
            ).mappings().all()
    except STORE_REJECTIONS as e:
        raise bad_request_from(e, "room", "create")

    return [to_model(resource, row) for row in rows]


crud_router(resource, router)
