"""Turn database and driver errors into messages fit for the front desk UI."""
import logging
import re
from typing import Callable

from fastapi import HTTPException, status
from sqlalchemy.exc import DataError, IntegrityError

log = logging.getLogger(__name__)

# PostgreSQL SQLSTATE codes
# https://www.postgresql.org/docs/current/errcodes-appendix.html
PG_ERROR_CODES: dict[str, str] = {
    "23505": "This item already exists. Please use a different value.",
    "23502": "Please fill in all required fields.",
    "23503": "This action cannot be completed because the item is linked to other data.",
    "23514": "The provided value does not meet the required format.",
    "22P02": "Please enter a valid value for this field.",
    "22003": "The number you entered is too large or too small.",
    "42P01": "System configuration error. Please contact support.",
    "42703": "System configuration error. Please contact support.",
    "08006": "Unable to connect to the server. Please try again later.",
    "08001": "Unable to connect to the server. Please try again later.",
    "57014": "The request took too long. Please try again.",
}


def format_field_name(field_name: str) -> str:
    """room_number / roomNumber -> 'Room number'"""
    spaced = re.sub(r"([a-z])([A-Z])", r"\1 \2", field_name.replace("_", " ")).lower()
    return spaced[:1].upper() + spaced[1:]


# Checked in order; first match wins. Both PostgreSQL and SQLite wordings are covered.
ERROR_PATTERNS: list[tuple[re.Pattern, str | Callable[[re.Match], str]]] = [
    (re.compile(r'unique constraint "\w+_room_number_key"|UNIQUE constraint failed: \w+\.room_number', re.I),
     "This room number is already registered."),
    (re.compile(r'unique constraint "\w+_email_key"|UNIQUE constraint failed: \w+\.email', re.I),
     "This email address is already in use."),
    (re.compile(r"duplicate key value violates unique constraint|UNIQUE constraint failed", re.I),
     "This item already exists. Please use a different value."),
    (re.compile(r'null value in column "(\w+)".*not-null constraint', re.I | re.S),
     lambda m: f"Please provide a value for {format_field_name(m.group(1))}."),
    (re.compile(r"NOT NULL constraint failed: \w+\.(\w+)", re.I),
     lambda m: f"Please provide a value for {format_field_name(m.group(1))}."),
    (re.compile(r"violates not-null constraint", re.I),
     "Please fill in all required fields."),
    (re.compile(r'insert or update on table "\w+" violates foreign key constraint', re.I),
     "The selected reference does not exist."),
    (re.compile(r'update or delete on table "\w+" violates foreign key constraint', re.I),
     "This item cannot be deleted because it is being used elsewhere."),
    (re.compile(r"FOREIGN KEY constraint failed", re.I),
     "The selected reference does not exist."),
    (re.compile(r'violates check constraint "(\w+)_(\w+)_check"', re.I),
     lambda m: f"Invalid value for {format_field_name(m.group(2))}."),
    (re.compile(r"invalid input syntax for type (\w+)", re.I),
     lambda m: f"Please enter a valid {m.group(1).lower()}."),
    (re.compile(r"connection refused|ECONNREFUSED", re.I),
     "Unable to connect to the server. Please try again later."),
    (re.compile(r"timeout|ETIMEDOUT", re.I),
     "The request took too long. Please try again."),
]

CONTEXT_MESSAGES: dict[str, dict[str, str]] = {
    "user": {
        "create": "Unable to create user. Please check the information and try again.",
        "update": "Unable to update user information. Please try again.",
        "delete": "Unable to delete user. They may have active bookings or requests.",
    },
    "ride": {
        "create": "Unable to create ride request. Please try again.",
        "update": "Unable to update ride request. Please try again.",
        "delete": "Unable to cancel ride request. Please try again.",
    },
    "service": {
        "create": "Unable to create service request. Please try again.",
        "update": "Unable to update service request. Please try again.",
        "delete": "Unable to cancel service request. Please try again.",
    },
    "room": {
        "create": "Unable to add room. Please check the room number.",
        "update": "Unable to update room information. Please try again.",
        "delete": "Unable to delete room. It may have active guests.",
    },
    "notification": {
        "create": "Unable to send notification. Please try again.",
    },
    "location": {
        "create": "Unable to add location. Please check the coordinates.",
        "update": "Unable to update location. Please try again.",
        "delete": "Unable to delete location. It may be in use.",
    },
    "menu": {
        "create": "Unable to add menu item. Please try again.",
        "update": "Unable to update menu item. Please try again.",
        "delete": "Unable to delete menu item. Please try again.",
    },
    "promotion": {
        "create": "Unable to create promotion. Please try again.",
        "update": "Unable to update promotion. Please try again.",
        "delete": "Unable to delete promotion. Please try again.",
    },
    "event": {
        "create": "Unable to create event. Please try again.",
        "update": "Unable to update event. Please try again.",
        "delete": "Unable to delete event. Please try again.",
    },
    "schedule": {
        "create": "Unable to save driver schedule. Please check the driver and try again.",
    },
}

OPERATION_FALLBACKS = {
    "create": "Unable to create this item. Please check your input and try again.",
    "update": "Unable to update this item. Please try again.",
    "delete": "Unable to delete this item. Please try again.",
}


def _error_code(error: Exception) -> str | None:
    original = getattr(error, "orig", None) or error
    # psycopg2 exposes pgcode, psycopg3 exposes sqlstate
    return getattr(original, "pgcode", None) or getattr(original, "sqlstate", None)


def _error_text(error: Exception) -> str:
    original = getattr(error, "orig", None)
    return str(original if original is not None else error)


def get_user_friendly_error(error: Exception, context: str | None = None, operation: str | None = None) -> str:
    """
    Map a database/system error to a message safe to show to guests and staff.

    Lookup order: SQLSTATE code, message patterns, context/operation message,
    operation fallback, generic fallback.
    """
    code = _error_code(error)
    if code and code in PG_ERROR_CODES:
        # Unique violations on well-known columns get a more specific message below
        if code != "23505":
            return PG_ERROR_CODES[code]

    text = _error_text(error)
    for pattern, message in ERROR_PATTERNS:
        match = pattern.search(text)
        if match:
            return message(match) if callable(message) else message

    if code and code in PG_ERROR_CODES:
        return PG_ERROR_CODES[code]

    if context and operation and operation in CONTEXT_MESSAGES.get(context, {}):
        return CONTEXT_MESSAGES[context][operation]

    if operation in OPERATION_FALLBACKS:
        return OPERATION_FALLBACKS[operation]

    return "Something went wrong. Please try again later."


def bad_request_from(error: Exception, context: str | None = None, operation: str | None = None) -> HTTPException:
    """Build the 400 raised by write endpoints when the store rejects a statement."""
    friendly = get_user_friendly_error(error, context, operation)
    log.warning(f"[Errors] {context or 'item'} {operation or 'write'} rejected: {_error_text(error)} -> {friendly}")
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=friendly)


STORE_REJECTIONS = (IntegrityError, DataError)
