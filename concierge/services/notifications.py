from __future__ import annotations

import logging
from datetime import datetime

import pytz
import sqlalchemy

from ..config import get_settings
from ..messaging.resend_backend import create_checkout_reminder_email_html, html_to_text

settings = get_settings()
log = logging.getLogger(__name__)


def create_notification(
    conn: sqlalchemy.Connection,
    recipient_id: str,
    title: str,
    message: str,
    notification_type: str = "INFO",
) -> int:
    """Insert an in-app notification inside the caller's transaction.

    Args:
        conn: Open connection; the row commits or rolls back with the caller
        recipient_id: Guest room number or staff id the client polls with
        title: Short headline shown in the notification bell
        message: Body text
        notification_type: INFO, SUCCESS, WARNING or ERROR

    Returns:
        The new notification id
    """
    row = conn.execute(
        sqlalchemy.text("""
            INSERT INTO notifications (recipient_id, title, message, type, is_read)
            VALUES (:recipient_id, :title, :message, :type, :is_read)
            RETURNING id
        """),
        {
            "recipient_id": recipient_id,
            "title": title,
            "message": message,
            "type": notification_type,
            "is_read": False,
        }
    ).fetchone()
    return row[0]


def format_local_time(dt: datetime, tz_name: str | None = None) -> str:
    """Render a naive UTC datetime in the resort's timezone."""
    try:
        tz = pytz.timezone(tz_name or settings.TIMEZONE)
    except pytz.UnknownTimeZoneError:
        tz = pytz.UTC
    local = pytz.UTC.localize(dt).astimezone(tz)
    return local.strftime("%a %d %b %Y, %H:%M %Z")


def format_time_remaining(minutes: int) -> str:
    """75 -> '1 hour and 15 minutes', 30 -> '30 minutes', 120 -> '2 hours'"""
    minutes = max(0, minutes)
    hours, rest = divmod(minutes, 60)
    if hours == 0:
        return f"{rest} minute{'s' if rest != 1 else ''}"
    text = f"{hours} hour{'s' if hours > 1 else ''}"
    if rest:
        text += f" and {rest} minute{'s' if rest != 1 else ''}"
    return text


async def send_email(
    email: str,
    subject: str,
    body: str,
    html_body: str | None = None,
    from_email: str | None = None,
) -> bool:
    """Deliver an email through EMAIL_BACKEND; True when it was handed off.

    ``console`` only logs the message, ``resend`` sends it for real.
    """
    backend = settings.EMAIL_BACKEND
    if backend == "console":
        log.info(f"[Email:console] to={email} subject={subject!r}\n{body}")
        return True

    if backend != "resend":
        log.warning(f"[Email] Unknown EMAIL_BACKEND {backend!r}, message to {email} dropped")
        return False

    from ..messaging.resend_backend import send_resend_email

    delivered = await send_resend_email(
        to_email=email,
        subject=subject,
        text_body=body,
        html_body=html_body,
        from_email=from_email,
    )
    if not delivered:
        log.error(f"[Email] Could not deliver {subject!r} to {email}")
    return delivered


async def send_checkout_reminder_email(
    email: str,
    guest_name: str,
    room_number: str,
    check_out: datetime,
    time_remaining: str,
) -> bool:
    """Email version of the in-app checkout reminder."""
    checkout_time = format_local_time(check_out)
    html_body = create_checkout_reminder_email_html(
        guest_name=guest_name,
        room_number=room_number,
        checkout_time=checkout_time,
        time_remaining=time_remaining,
    )
    return await send_email(
        email=email,
        subject=f"Check-out Reminder - {settings.HOTEL_NAME}",
        body=html_to_text(html_body),
        html_body=html_body,
    )
