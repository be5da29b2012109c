from datetime import datetime

from pydantic import BaseModel, Field

from concierge import tables
from concierge.api.resources import Resource, crud_router


class RoomTypeCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str | None = None
    location_id: int | None = None


class RoomTypeUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    location_id: int | None = None


class RoomType(BaseModel):
    id: int
    name: str
    description: str | None = None
    location_id: int | None = None
    created_at: datetime
    updated_at: datetime


resource = Resource(
    name="room_type",
    path="room-types",
    table=tables.room_types,
    read_schema=RoomType,
    create_schema=RoomTypeCreate,
    update_schema=RoomTypeUpdate,
    order_by=(tables.room_types.c.name,),
    not_found="Room type not found",
    error_context="room",
)

router = crud_router(resource)
