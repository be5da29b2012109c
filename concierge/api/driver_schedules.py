"""Buggy driver shifts and days off, one entry per driver per day.

A day with no entry means the driver works as usual.
"""
import datetime as dt

import sqlalchemy
from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel
from sqlalchemy.dialects import postgresql, sqlite

from concierge import database as db
from concierge import tables
from concierge.api.resources import Resource, crud_router, fetch_all, fetch_first, to_model
from concierge.errors import STORE_REJECTIONS, bad_request_from


class DriverScheduleUpsert(BaseModel):
    date: dt.date
    shift_start: dt.time | None = None
    shift_end: dt.time | None = None
    is_day_off: bool = False
    notes: str | None = None


class DriverSchedule(BaseModel):
    id: int
    driver_id: int
    date: dt.date
    shift_start: dt.time | None = None
    shift_end: dt.time | None = None
    is_day_off: bool
    notes: str | None = None
    created_at: dt.datetime
    updated_at: dt.datetime


class Availability(BaseModel):
    isAvailable: bool


resource = Resource(
    name="driver_schedule",
    path="driver-schedules",
    table=tables.driver_schedules,
    read_schema=DriverSchedule,
    create_schema=DriverScheduleUpsert,
    order_by=(tables.driver_schedules.c.date.asc(),),
    not_found="Schedule not found",
    error_context="schedule",
    operations=frozenset({"get"}),
)

router = APIRouter(prefix=resource.prefix, tags=["driver-schedules"])

schedules = tables.driver_schedules


def is_available(schedule: DriverSchedule | None, at: dt.time | None = None) -> bool:
    """
    Whether a driver can be dispatched given that day's schedule.

    No entry means available. A day off never is. Without a time, any
    working day counts; with one, it must fall inside the shift when the
    shift has both ends set.
    """
    if schedule is None:
        return True
    if schedule.is_day_off:
        return False
    if at is None or schedule.shift_start is None or schedule.shift_end is None:
        return True
    return schedule.shift_start <= at <= schedule.shift_end


@router.get("/range", response_model=list[DriverSchedule])
def get_all_schedules_in_range(
    start_date: dt.date = Query(alias="startDate"),
    end_date: dt.date = Query(alias="endDate"),
):
    """Every driver's schedule between two dates, inclusive"""
    return fetch_all(
        resource,
        schedules.c.date >= start_date,
        schedules.c.date <= end_date,
        order_by=(schedules.c.driver_id.asc(), schedules.c.date.asc()),
    )


@router.get("/driver/{driver_id}", response_model=list[DriverSchedule])
def get_driver_schedules(driver_id: int):
    return fetch_all(resource, schedules.c.driver_id == driver_id)


@router.get("/driver/{driver_id}/date", response_model=DriverSchedule)
def get_driver_schedule_for_date(driver_id: int, day: dt.date = Query(alias="date")):
    return fetch_first(resource, schedules.c.driver_id == driver_id, schedules.c.date == day)


@router.get("/driver/{driver_id}/range", response_model=list[DriverSchedule])
def get_driver_schedules_in_range(
    driver_id: int,
    start_date: dt.date = Query(alias="startDate"),
    end_date: dt.date = Query(alias="endDate"),
):
    return fetch_all(
        resource,
        schedules.c.driver_id == driver_id,
        schedules.c.date >= start_date,
        schedules.c.date <= end_date,
    )


@router.get("/driver/{driver_id}/availability", response_model=Availability)
def check_driver_availability(
    driver_id: int,
    day: dt.date = Query(alias="date"),
    at: dt.time | None = Query(default=None, alias="time"),
):
    found = fetch_all(resource, schedules.c.driver_id == driver_id, schedules.c.date == day, limit=1)
    return Availability(isAvailable=is_available(found[0] if found else None, at))


@router.post("/driver/{driver_id}", response_model=DriverSchedule)
@router.put("/driver/{driver_id}", response_model=DriverSchedule)
def upsert_driver_schedule(driver_id: int, body: DriverScheduleUpsert):
    """Set the driver's schedule for ``body.date``, replacing any existing entry"""
    values = body.model_dump()
    values["driver_id"] = driver_id

    dialect_insert = postgresql.insert if db.engine.dialect.name == "postgresql" else sqlite.insert
    stmt = dialect_insert(schedules).values(**values)
    stmt = stmt.on_conflict_do_update(
        index_elements=[schedules.c.driver_id, schedules.c.date],
        set_={
            "shift_start": stmt.excluded.shift_start,
            "shift_end": stmt.excluded.shift_end,
            "is_day_off": stmt.excluded.is_day_off,
            "notes": stmt.excluded.notes,
            "updated_at": sqlalchemy.func.now(),
        },
    ).returning(*schedules.c)

    try:
        with db.engine.begin() as connection:
            row = connection.execute(stmt).mappings().one()
    except STORE_REJECTIONS as e:
        raise bad_request_from(e, resource.error_context, "create")

    return to_model(resource, row)


@router.delete("/driver/{driver_id}")
def delete_driver_schedule(driver_id: int, day: dt.date = Query(alias="date")):
    with db.engine.begin() as connection:
        result = connection.execute(
            sqlalchemy.delete(schedules).where(schedules.c.driver_id == driver_id, schedules.c.date == day)
        )

    if result.rowcount == 0:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=resource.not_found)
    return {"message": "Schedule deleted successfully"}


crud_router(resource, router)
