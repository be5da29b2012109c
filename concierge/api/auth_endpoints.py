"""Guest and staff login"""
import logging
from datetime import datetime

import sqlalchemy
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from concierge import database as db
from concierge import tables
from concierge.api import auth
from concierge.api.resources import fetch_one
from concierge.api.users import User
from concierge.api.users import resource as users_resource
from concierge.security import create_access_token, verify_password

log = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/auth",
    tags=["auth"]
)


class GuestLoginRequest(BaseModel):
    last_name: str = Field(min_length=1)
    room_number: str = Field(min_length=1)


class GuestCodeLoginRequest(BaseModel):
    check_in_code: str = Field(min_length=1)


class StaffLoginRequest(BaseModel):
    room_number: str = Field(min_length=1)  # staff usernames live in room_number
    password: str = Field(min_length=1)


class LoginResponse(BaseModel):
    success: bool
    user: User
    access_token: str
    token_type: str = "bearer"


def _fetch_user(column: str, value: str):
    with db.engine.begin() as connection:
        return connection.execute(
            sqlalchemy.select(tables.users).where(tables.users.c[column] == value)
        ).mappings().one_or_none()


def _check_stay_window(user) -> None:
    """Guests may only sign in between check-in and check-out (when both are set)."""
    if not (user["check_in"] and user["check_out"]):
        return

    now = datetime.utcnow()
    if now < user["check_in"]:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Check-in time starts at {user['check_in'].isoformat()}Z."
        )
    if now > user["check_out"]:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Your stay has expired. Please contact reception."
        )


def _login_response(user) -> LoginResponse:
    token = create_access_token(user["id"], user["role"])
    log.info(f"[Auth] {user['role']} login for room {user['room_number']}")
    return LoginResponse(success=True, user=User.model_validate(dict(user)), access_token=token)


@router.post("/guest", response_model=LoginResponse)
def login_guest(body: GuestLoginRequest):
    """Legacy guest login: room number + last name"""
    user = _fetch_user("room_number", body.room_number)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")

    if user["role"] != "GUEST":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid login method for this account"
        )

    if user["last_name"].lower() != body.last_name.lower():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid last name")

    _check_stay_window(user)
    return _login_response(user)


@router.post("/guest/code", response_model=LoginResponse)
def login_guest_by_code(body: GuestCodeLoginRequest):
    """Guest login with the check-in code handed out at reception"""
    user = _fetch_user("check_in_code", body.check_in_code.strip().upper())
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invalid check-in code")

    if user["role"] != "GUEST":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid login method for this account"
        )

    _check_stay_window(user)
    return _login_response(user)


@router.post("/staff", response_model=LoginResponse)
def login_staff(body: StaffLoginRequest):
    user = _fetch_user("room_number", body.room_number)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    if user["role"] == "GUEST":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid login method for guest account"
        )

    if not user["password_hash"]:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Password not set for this account. Please contact administrator."
        )

    if not verify_password(body.password, user["password_hash"]):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid password")

    return _login_response(user)


@router.get("/me", response_model=User)
def get_me(user_id: int = Depends(auth.get_current_user_id)):
    return fetch_one(users_resource, user_id)
