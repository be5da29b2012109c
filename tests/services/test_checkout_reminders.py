"""Tests for the checkout reminder sweep"""
from datetime import datetime, timedelta
from unittest.mock import AsyncMock, patch

import pytest
import sqlalchemy
from sqlalchemy.exc import OperationalError

from concierge import database as db
from concierge import tables
from concierge.services import checkout_reminders
from concierge.services.checkout_reminders import deliver_in_app, send_checkout_reminders

NOW = datetime(2026, 3, 5, 4, 0)  # naive UTC
WINDOW = timedelta(minutes=60)


def add_guest(room_number, check_out, last_name="Nguyen", email=None, reminded=False, role="GUEST"):
    with db.engine.begin() as conn:
        return conn.execute(
            sqlalchemy.insert(tables.users).values(
                last_name=last_name,
                room_number=room_number,
                role=role,
                email=email,
                check_in=check_out - timedelta(days=3),
                check_out=check_out,
                checkout_reminded=reminded,
            ).returning(tables.users.c.id)
        ).scalar_one()


def notifications_for(room_number):
    with db.engine.begin() as conn:
        return conn.execute(
            sqlalchemy.select(tables.notifications).where(tables.notifications.c.recipient_id == room_number)
        ).mappings().all()


def is_reminded(user_id):
    with db.engine.begin() as conn:
        return conn.execute(
            sqlalchemy.select(tables.users.c.checkout_reminded).where(tables.users.c.id == user_id)
        ).scalar_one()


@pytest.fixture(autouse=True)
def no_email():
    with patch.object(checkout_reminders, "send_checkout_reminder_email", new_callable=AsyncMock) as mock_email:
        yield mock_email


@pytest.mark.asyncio
async def test_stay_inside_window_gets_one_reminder():
    user_id = add_guest("101", NOW + timedelta(minutes=45))

    sent = await send_checkout_reminders(now=NOW, window=WINDOW)

    assert sent == 1
    assert is_reminded(user_id) is True
    rows = notifications_for("101")
    assert len(rows) == 1
    assert rows[0]["title"] == "Check-out Reminder"
    assert rows[0]["type"] == "WARNING"
    assert rows[0]["is_read"] is False
    assert "45 minutes" in rows[0]["message"]


@pytest.mark.asyncio
async def test_second_sweep_sends_nothing_new():
    add_guest("101", NOW + timedelta(minutes=45))

    assert await send_checkout_reminders(now=NOW, window=WINDOW) == 1
    assert await send_checkout_reminders(now=NOW + timedelta(minutes=5), window=WINDOW) == 0

    assert len(notifications_for("101")) == 1


@pytest.mark.asyncio
async def test_stays_outside_window_are_ignored():
    later = add_guest("101", NOW + timedelta(hours=3))
    past = add_guest("102", NOW - timedelta(minutes=10))

    sent = await send_checkout_reminders(now=NOW, window=WINDOW)

    assert sent == 0
    assert notifications_for("101") == []
    assert notifications_for("102") == []
    assert is_reminded(later) is False
    assert is_reminded(past) is False


@pytest.mark.asyncio
async def test_already_reminded_and_staff_are_skipped():
    add_guest("101", NOW + timedelta(minutes=30), reminded=True)
    add_guest("reception", NOW + timedelta(minutes=30), role="RECEPTION")

    assert await send_checkout_reminders(now=NOW, window=WINDOW) == 0
    assert notifications_for("101") == []
    assert notifications_for("reception") == []


@pytest.mark.asyncio
async def test_window_bounds_are_inclusive():
    add_guest("101", NOW + WINDOW)

    assert await send_checkout_reminders(now=NOW, window=WINDOW) == 1


@pytest.mark.asyncio
async def test_failed_delivery_does_not_stop_other_stays():
    ok_first = add_guest("101", NOW + timedelta(minutes=10))
    broken = add_guest("102", NOW + timedelta(minutes=20))
    ok_last = add_guest("103", NOW + timedelta(minutes=30))

    def flaky_deliver(conn, stay, message):
        if stay.room_number == "102":
            raise RuntimeError("notification service unavailable")
        deliver_in_app(conn, stay, message)

    sent = await send_checkout_reminders(now=NOW, window=WINDOW, deliver=flaky_deliver)

    assert sent == 2
    assert is_reminded(ok_first) is True
    assert is_reminded(ok_last) is True
    # Rolled back: still eligible for the next sweep
    assert is_reminded(broken) is False
    assert notifications_for("102") == []

    retry = await send_checkout_reminders(now=NOW + timedelta(minutes=5), window=WINDOW)

    assert retry == 1
    assert is_reminded(broken) is True
    assert len(notifications_for("102")) == 1
    assert len(notifications_for("101")) == 1


@pytest.mark.asyncio
async def test_email_sent_when_guest_has_address(no_email):
    add_guest("101", NOW + timedelta(minutes=45), email="nguyen@gmail.com")
    add_guest("102", NOW + timedelta(minutes=45), last_name="Tran")

    assert await send_checkout_reminders(now=NOW, window=WINDOW) == 2

    no_email.assert_awaited_once()
    args = no_email.await_args[0]
    assert args[0] == "nguyen@gmail.com"
    assert args[1] == "Nguyen"
    assert args[2] == "101"
    assert args[4] == "45 minutes"


@pytest.mark.asyncio
async def test_email_failure_keeps_reminder(no_email):
    user_id = add_guest("101", NOW + timedelta(minutes=45), email="nguyen@gmail.com")
    no_email.side_effect = Exception("Resend down")

    assert await send_checkout_reminders(now=NOW, window=WINDOW) == 1
    assert is_reminded(user_id) is True
    assert len(notifications_for("101")) == 1


@pytest.mark.asyncio
async def test_query_failure_returns_zero():
    with patch.object(checkout_reminders, "find_due_stays") as mock_find:
        mock_find.side_effect = OperationalError("SELECT", {}, Exception("database is locked"))

        assert await send_checkout_reminders(now=NOW, window=WINDOW) == 0


@pytest.mark.asyncio
async def test_new_checkout_time_is_reminded_again():
    from concierge.api import users
    from concierge.api.resources import update_one

    user_id = add_guest("101", NOW + timedelta(minutes=45))
    assert await send_checkout_reminders(now=NOW, window=WINDOW) == 1

    # Late check-out granted
    update_one(users.resource, user_id, users.UserUpdate(check_out=NOW + timedelta(hours=3)))
    assert is_reminded(user_id) is False

    later = NOW + timedelta(hours=2, minutes=30)
    assert await send_checkout_reminders(now=later, window=WINDOW) == 1
    assert len(notifications_for("101")) == 2


@pytest.mark.asyncio
async def test_resending_same_checkout_keeps_reminder_sent():
    from concierge.api import users
    from concierge.api.resources import update_one

    check_out = NOW + timedelta(minutes=45)
    user_id = add_guest("101", check_out)
    assert await send_checkout_reminders(now=NOW, window=WINDOW) == 1

    # Admin edits notes; the client sends the stored check_out along with them
    updated = update_one(users.resource, user_id, users.UserUpdate(notes="extra towels", check_out=check_out))
    assert updated.checkout_reminded is True

    assert await send_checkout_reminders(now=NOW + timedelta(minutes=5), window=WINDOW) == 0
    assert len(notifications_for("101")) == 1


@pytest.mark.asyncio
async def test_message_formatting_error_skips_only_that_stay():
    add_guest("101", NOW + timedelta(minutes=10))
    broken = add_guest("102", NOW + timedelta(minutes=20))
    add_guest("103", NOW + timedelta(minutes=30))
    real_message = checkout_reminders.reminder_message

    def flaky_message(stay, now):
        if stay.room_number == "102":
            raise ValueError("bad timezone")
        return real_message(stay, now)

    with patch.object(checkout_reminders, "reminder_message", side_effect=flaky_message):
        sent = await send_checkout_reminders(now=NOW, window=WINDOW)

    assert sent == 2
    assert is_reminded(broken) is False
    assert notifications_for("102") == []
    assert len(notifications_for("103")) == 1
