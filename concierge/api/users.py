"""Guests and staff accounts.

A GUEST row doubles as the stay record: ``check_in``/``check_out`` bound the
stay and ``checkout_reminded`` tracks whether the checkout reminder went out.
"""
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Literal

import sqlalchemy
from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, EmailStr, Field, field_validator

from concierge import database as db
from concierge import tables
from concierge.api.resources import Resource, crud_router, fetch_first, fetch_one, to_model
from concierge.security import hash_password

Role = Literal["GUEST", "ADMIN", "DRIVER", "STAFF", "SUPERVISOR", "RECEPTION"]

# No 0/O or 1/I - codes are read aloud at the front desk
CHECK_IN_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
CHECK_IN_CODE_LENGTH = 8
CHECK_IN_CODE_ATTEMPTS = 10

# Dispatch screens treat drivers idle for longer than this as offline
OFFLINE_AFTER = timedelta(minutes=3)


def to_naive_utc(value: datetime | None) -> datetime | None:
    """Stay times are stored as naive UTC; clients send ISO strings with offsets."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class StayTimesMixin(BaseModel):
    @field_validator("check_in", "check_out", check_fields=False)
    @classmethod
    def normalise_stay_times(cls, value):
        return to_naive_utc(value)


class UserCreate(StayTimesMixin):
    last_name: str = Field(min_length=1)
    room_number: str = Field(min_length=1)
    villa_type: str | None = None
    role: Role = "GUEST"
    password: str | None = Field(default=None, min_length=4)
    email: EmailStr | None = None
    language: str | None = None
    notes: str | None = None
    check_in: datetime | None = None
    check_out: datetime | None = None


class UserUpdate(StayTimesMixin):
    last_name: str | None = Field(default=None, min_length=1)
    room_number: str | None = Field(default=None, min_length=1)
    villa_type: str | None = None
    role: Role | None = None
    password: str | None = Field(default=None, min_length=4)
    email: EmailStr | None = None
    language: str | None = None
    notes: str | None = None
    check_in: datetime | None = None
    check_out: datetime | None = None


class User(BaseModel):
    id: int
    last_name: str
    room_number: str
    villa_type: str | None = None
    role: str
    email: str | None = None
    language: str | None = None
    notes: str | None = None
    check_in: datetime | None = None
    check_out: datetime | None = None
    check_in_code: str | None = None
    checkout_reminded: bool = False
    current_lat: float | None = None
    current_lng: float | None = None
    location_updated_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class LocationUpdate(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class CheckInCodeResponse(BaseModel):
    success: bool
    check_in_code: str
    user: User


def hash_password_field(values: dict[str, Any]) -> dict[str, Any]:
    password = values.pop("password", None)
    if password:
        values["password_hash"] = hash_password(password)
    return values


def prepare_user_update(values: dict[str, Any]) -> dict[str, Any]:
    values = hash_password_field(values)
    # A different checkout time is a new checkout event: it may be reminded
    # again. Clients resend the unchanged value on every edit, which keeps the flag.
    if "check_out" in values:
        table = tables.users
        values["checkout_reminded"] = sqlalchemy.case(
            (table.c.check_out.is_not_distinct_from(values["check_out"]), table.c.checkout_reminded),
            else_=False,
        )
    return values


resource = Resource(
    name="user",
    path="users",
    table=tables.users,
    read_schema=User,
    create_schema=UserCreate,
    update_schema=UserUpdate,
    order_by=(tables.users.c.created_at.desc(), tables.users.c.id.desc()),
    not_found="User not found",
    error_context="user",
    prepare_create=hash_password_field,
    prepare_update=prepare_user_update,
)

router = APIRouter(prefix=resource.prefix, tags=["users"])


@router.get("/room/{room_number}", response_model=User)
def get_user_by_room(room_number: str):
    return fetch_first(resource, tables.users.c.room_number == room_number)


@router.put("/{user_id}/location", response_model=User)
def update_user_location(user_id: int, body: LocationUpdate):
    """Drivers report their GPS position so reception can dispatch the nearest buggy"""
    table = tables.users
    with db.engine.begin() as connection:
        row = connection.execute(
            sqlalchemy.update(table)
            .where(table.c.id == user_id)
            .values(current_lat=body.lat, current_lng=body.lng, location_updated_at=datetime.utcnow())
            .returning(*table.c)
        ).mappings().one_or_none()

    if not row:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=resource.not_found)
    return to_model(resource, row)


@router.post("/{user_id}/offline", response_model=User)
def mark_driver_offline(user_id: int):
    """Backdate the driver's last activity so reception stops dispatching to them"""
    table = tables.users
    with db.engine.begin() as connection:
        row = connection.execute(
            sqlalchemy.update(table)
            .where(table.c.id == user_id)
            .values(updated_at=datetime.utcnow() - OFFLINE_AFTER)
            .returning(*table.c)
        ).mappings().one_or_none()

    if not row:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=resource.not_found)
    return to_model(resource, row)


def generate_check_in_code() -> str:
    return "".join(secrets.choice(CHECK_IN_CODE_ALPHABET) for _ in range(CHECK_IN_CODE_LENGTH))


@router.post("/{user_id}/check-in-code", response_model=CheckInCodeResponse)
def create_check_in_code(user_id: int):
    """
    Issue a fresh check-in code for a guest (admin/supervisor flow).

    The code replaces any previous one and must not collide with another guest's.
    """
    user = fetch_one(resource, user_id)
    if user.role != "GUEST":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Check-in code can only be generated for guests"
        )

    table = tables.users
    with db.engine.begin() as connection:
        code = generate_check_in_code()
        for _ in range(CHECK_IN_CODE_ATTEMPTS):
            taken = connection.execute(
                sqlalchemy.text("SELECT id FROM users WHERE check_in_code = :code"),
                {"code": code}
            ).fetchone()
            if not taken:
                break
            code = generate_check_in_code()

        row = connection.execute(
            sqlalchemy.update(table)
            .where(table.c.id == user_id)
            .values(check_in_code=code)
            .returning(*table.c)
        ).mappings().one()

    return CheckInCodeResponse(success=True, check_in_code=code, user=to_model(resource, row))


crud_router(resource, router)
