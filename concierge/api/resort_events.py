import datetime as dt

from pydantic import BaseModel, Field

from concierge import tables
from concierge.api.resources import Resource, crud_router


class ResortEventCreate(BaseModel):
    title: str = Field(min_length=1)
    date: dt.date
    time: dt.time
    location: str = Field(min_length=1)
    description: str | None = None


class ResortEventUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    date: dt.date | None = None
    time: dt.time | None = None
    location: str | None = Field(default=None, min_length=1)
    description: str | None = None


class ResortEvent(BaseModel):
    id: int
    title: str
    date: dt.date
    time: dt.time
    location: str
    description: str | None = None
    created_at: dt.datetime
    updated_at: dt.datetime


resource = Resource(
    name="resort_event",
    path="resort-events",
    table=tables.resort_events,
    read_schema=ResortEvent,
    create_schema=ResortEventCreate,
    update_schema=ResortEventUpdate,
    order_by=(tables.resort_events.c.date.desc(), tables.resort_events.c.time.desc()),
    not_found="Event not found",
    error_context="event",
)

router = crud_router(resource)
