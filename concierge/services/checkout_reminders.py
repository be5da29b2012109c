"""Checkout reminder sweep.

One sweep finds every guest whose check-out falls inside the look-ahead
window and who has not been reminded yet, and for each one creates an
in-app notification and sets ``users.checkout_reminded``. Both writes share
one transaction per guest, so a failed delivery leaves the flag unset and the
guest is picked up again by the next sweep.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Callable

import sqlalchemy

from .. import database as db
from ..config import get_settings
from .notifications import (
    create_notification,
    format_local_time,
    format_time_remaining,
    send_checkout_reminder_email,
)

settings = get_settings()
log = logging.getLogger(__name__)

REMINDER_TITLE = "Check-out Reminder"
REMINDER_TYPE = "WARNING"

DUE_STAYS_QUERY = (
    sqlalchemy.text("""
        SELECT id, last_name, room_number, email, check_out
        FROM users
        WHERE role = 'GUEST'
          AND check_out IS NOT NULL
          AND check_out >= :window_start
          AND check_out <= :window_end
          AND checkout_reminded = :reminded
        ORDER BY check_out
    """)
    .bindparams(
        sqlalchemy.bindparam("window_start", type_=sqlalchemy.DateTime()),
        sqlalchemy.bindparam("window_end", type_=sqlalchemy.DateTime()),
        sqlalchemy.bindparam("reminded", type_=sqlalchemy.Boolean()),
    )
    .columns(
        id=sqlalchemy.Integer(),
        last_name=sqlalchemy.String(),
        room_number=sqlalchemy.String(),
        email=sqlalchemy.String(),
        check_out=sqlalchemy.DateTime(),
    )
)

CLAIM_STAY = sqlalchemy.text("""
    UPDATE users
    SET checkout_reminded = :reminded
    WHERE id = :user_id AND checkout_reminded = :not_reminded
""").bindparams(
    sqlalchemy.bindparam("reminded", type_=sqlalchemy.Boolean()),
    sqlalchemy.bindparam("not_reminded", type_=sqlalchemy.Boolean()),
)


def reminder_message(stay: Any, now: datetime) -> tuple[str, str]:
    """Returns (message, time_remaining_text) for a stay."""
    minutes_left = int((stay.check_out - now).total_seconds() // 60)
    time_remaining = format_time_remaining(minutes_left)
    message = f"Your check-out is in {time_remaining}. Check-out time: {format_local_time(stay.check_out)}"
    return message, time_remaining


def deliver_in_app(conn: sqlalchemy.Connection, stay: Any, message: str) -> None:
    """Default delivery: a WARNING notification addressed to the guest's room."""
    create_notification(conn, stay.room_number, REMINDER_TITLE, message, REMINDER_TYPE)


def find_due_stays(window_start: datetime, window_end: datetime) -> list[Any]:
    with db.engine.begin() as conn:
        return conn.execute(
            DUE_STAYS_QUERY,
            {"window_start": window_start, "window_end": window_end, "reminded": False}
        ).fetchall()


async def send_checkout_reminders(
    now: datetime | None = None,
    window: timedelta | None = None,
    deliver: Callable[[sqlalchemy.Connection, Any, str], None] | None = None,
) -> int:
    """Run one sweep. Returns the number of reminders sent; never raises.

    Args:
        now: Sweep time as naive UTC (defaults to the wall clock)
        window: Look-ahead window (defaults to CHECKOUT_REMINDER_WINDOW_MINUTES)
        deliver: Called as deliver(conn, stay, message) inside the stay's
            transaction; raising marks the stay as failed for this sweep
    """
    now = now or datetime.utcnow()
    window = window if window is not None else timedelta(minutes=settings.CHECKOUT_REMINDER_WINDOW_MINUTES)
    deliver = deliver or deliver_in_app

    log.info(f"[CheckoutReminder] Checking for guests checking out before {now + window}")

    try:
        stays = find_due_stays(now, now + window)
    except Exception as e:
        log.error(f"[CheckoutReminder] Could not query due check-outs: {e}", exc_info=True)
        return 0

    if not stays:
        log.info("[CheckoutReminder] No reminders needed at this time")
        return 0

    sent = 0
    for stay in stays:
        try:
            message, time_remaining = reminder_message(stay, now)
            with db.engine.begin() as conn:
                claimed = conn.execute(
                    CLAIM_STAY,
                    {"user_id": stay.id, "reminded": True, "not_reminded": False}
                ).rowcount
                if not claimed:
                    # Another sweep got here first
                    log.info(f"[CheckoutReminder] Room {stay.room_number} already reminded, skipping")
                    continue
                deliver(conn, stay, message)
        except Exception as e:
            log.error(
                f"[CheckoutReminder] Failed to remind room {stay.room_number}, will retry next sweep: {e}",
                exc_info=True,
            )
            continue

        sent += 1
        log.info(f"[CheckoutReminder] Reminder sent to room {stay.room_number} ({time_remaining} before check-out)")

        if stay.email and stay.email.strip():
            try:
                await send_checkout_reminder_email(
                    stay.email, stay.last_name, stay.room_number, stay.check_out, time_remaining
                )
            except Exception as e:
                log.error(f"[CheckoutReminder] Failed to email room {stay.room_number}: {e}", exc_info=True)

    log.info(f"[CheckoutReminder] Sent {sent} checkout reminder(s)")
    return sent
