"""Resort map locations (villas, facilities, restaurants)"""
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from concierge import tables
from concierge.api.resources import Resource, crud_router

LocationType = Literal["VILLA", "FACILITY", "RESTAURANT"]


class LocationCreate(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)
    name: str = Field(min_length=1)
    type: LocationType | None = None


class LocationUpdate(BaseModel):
    lat: float | None = Field(default=None, ge=-90, le=90)
    lng: float | None = Field(default=None, ge=-180, le=180)
    name: str | None = Field(default=None, min_length=1)
    type: LocationType | None = None


class Location(BaseModel):
    id: int
    lat: float
    lng: float
    name: str
    type: str | None = None
    created_at: datetime
    updated_at: datetime


resource = Resource(
    name="location",
    path="locations",
    table=tables.locations,
    read_schema=Location,
    create_schema=LocationCreate,
    update_schema=LocationUpdate,
    order_by=(tables.locations.c.name,),
    not_found="Location not found",
    error_context="location",
)

router = crud_router(resource)
