"""Relational schema for the concierge database.

Declared as SQLAlchemy Core tables so the API, the reminder sweep, Alembic and
the test suite all share one definition.
"""
import sqlalchemy as sa

metadata = sa.MetaData()


def _timestamps(updated: bool = True) -> list[sa.Column]:
    columns = [sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now())]
    if updated:
        columns.append(
            sa.Column(
                "updated_at",
                sa.DateTime(),
                nullable=False,
                server_default=sa.func.now(),
                onupdate=sa.func.now(),
            )
        )
    return columns


locations = sa.Table(
    "locations",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    sa.Column("lat", sa.Float(), nullable=False),
    sa.Column("lng", sa.Float(), nullable=False),
    sa.Column("name", sa.String(255), nullable=False),
    sa.Column("type", sa.String(32), nullable=True),  # VILLA, FACILITY, RESTAURANT
    *_timestamps(),
)

room_types = sa.Table(
    "room_types",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    sa.Column("name", sa.String(255), nullable=False),
    sa.Column("description", sa.Text(), nullable=True),
    sa.Column("location_id", sa.Integer(), sa.ForeignKey("locations.id", ondelete="SET NULL"), nullable=True),
    *_timestamps(),
)

rooms = sa.Table(
    "rooms",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    sa.Column("number", sa.String(32), nullable=False, unique=True),
    sa.Column("type_id", sa.Integer(), sa.ForeignKey("room_types.id", ondelete="CASCADE"), nullable=False),
    sa.Column("status", sa.String(32), nullable=False, server_default="Available"),
    *_timestamps(),
)

menu_items = sa.Table(
    "menu_items",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    sa.Column("name", sa.String(255), nullable=False),
    sa.Column("price", sa.Float(), nullable=False),
    sa.Column("category", sa.String(64), nullable=False),
    sa.Column("description", sa.Text(), nullable=True),
    sa.Column("language", sa.String(32), nullable=True),
    *_timestamps(),
)

promotions = sa.Table(
    "promotions",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    sa.Column("title", sa.String(255), nullable=False),
    sa.Column("description", sa.Text(), nullable=True),
    sa.Column("discount", sa.String(64), nullable=True),
    sa.Column("valid_until", sa.String(64), nullable=True),
    sa.Column("image_color", sa.String(64), nullable=True),
    sa.Column("image_url", sa.Text(), nullable=True),
    sa.Column("language", sa.String(32), nullable=True),
    *_timestamps(),
)

knowledge_items = sa.Table(
    "knowledge_items",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    sa.Column("question", sa.Text(), nullable=False),
    sa.Column("answer", sa.Text(), nullable=False),
    *_timestamps(),
)

resort_events = sa.Table(
    "resort_events",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    sa.Column("title", sa.String(255), nullable=False),
    sa.Column("date", sa.Date(), nullable=False),
    sa.Column("time", sa.Time(), nullable=False),
    sa.Column("location", sa.String(255), nullable=False),
    sa.Column("description", sa.Text(), nullable=True),
    *_timestamps(),
)

ride_requests = sa.Table(
    "ride_requests",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    sa.Column("guest_name", sa.String(255), nullable=False),
    sa.Column("room_number", sa.String(32), nullable=False, index=True),
    sa.Column("pickup", sa.String(255), nullable=False),
    sa.Column("destination", sa.String(255), nullable=False),
    sa.Column("status", sa.String(16), nullable=False, server_default="SEARCHING"),
    sa.Column("timestamp", sa.BigInteger(), nullable=False),  # epoch milliseconds from the client
    sa.Column("driver_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
    sa.Column("eta", sa.Integer(), nullable=True),
    sa.Column("rating", sa.Integer(), nullable=True),
    sa.Column("feedback", sa.Text(), nullable=True),
    sa.Column("assigned_timestamp", sa.DateTime(), nullable=True),
    sa.Column("pick_timestamp", sa.DateTime(), nullable=True),
    sa.Column("drop_timestamp", sa.DateTime(), nullable=True),
    *_timestamps(),
)

service_requests = sa.Table(
    "service_requests",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    sa.Column("type", sa.String(32), nullable=False),
    sa.Column("status", sa.String(16), nullable=False, server_default="PENDING"),
    sa.Column("details", sa.Text(), nullable=False),
    sa.Column("room_number", sa.String(32), nullable=False, index=True),
    sa.Column("timestamp", sa.BigInteger(), nullable=False),
    sa.Column("rating", sa.Integer(), nullable=True),
    sa.Column("feedback", sa.Text(), nullable=True),
    *_timestamps(),
)

chat_messages = sa.Table(
    "chat_messages",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    sa.Column("role", sa.String(16), nullable=False),  # 'user' or 'model'
    sa.Column("text", sa.Text(), nullable=False),
    sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=True),
    sa.Column("room_number", sa.String(32), nullable=True, index=True),
    sa.Column("service_type", sa.String(32), nullable=True),
    *_timestamps(updated=False),
)

notifications = sa.Table(
    "notifications",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    sa.Column("recipient_id", sa.String(64), nullable=False, index=True),  # room number or staff id
    sa.Column("title", sa.String(255), nullable=False),
    sa.Column("message", sa.Text(), nullable=False),
    sa.Column("type", sa.String(16), nullable=False, server_default="INFO"),
    sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
    *_timestamps(updated=False),
)

hotel_reviews = sa.Table(
    "hotel_reviews",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    sa.Column("room_number", sa.String(32), nullable=False, unique=True),
    sa.Column("guest_name", sa.String(255), nullable=False),
    sa.Column("category_ratings", sa.JSON(), nullable=False),
    sa.Column("average_rating", sa.Float(), nullable=False),
    sa.Column("comment", sa.Text(), nullable=True),
    sa.Column("timestamp", sa.BigInteger(), nullable=False),
    *_timestamps(),
)

users = sa.Table(
    "users",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    sa.Column("last_name", sa.String(255), nullable=False),
    sa.Column("room_number", sa.String(32), nullable=False, unique=True),
    sa.Column("villa_type", sa.String(64), nullable=True),
    sa.Column("role", sa.String(16), nullable=False, server_default="GUEST"),
    sa.Column("password_hash", sa.String(255), nullable=True),
    sa.Column("email", sa.String(255), nullable=True),
    sa.Column("language", sa.String(32), nullable=True),
    sa.Column("notes", sa.Text(), nullable=True),
    sa.Column("check_in", sa.DateTime(), nullable=True),
    sa.Column("check_out", sa.DateTime(), nullable=True),
    sa.Column("check_in_code", sa.String(16), nullable=True, unique=True),
    # Set once the checkout reminder went out; cleared whenever check_out changes
    sa.Column("checkout_reminded", sa.Boolean(), nullable=False, server_default=sa.false()),
    sa.Column("current_lat", sa.Float(), nullable=True),
    sa.Column("current_lng", sa.Float(), nullable=True),
    sa.Column("location_updated_at", sa.DateTime(), nullable=True),
    *_timestamps(),
)

sa.Index("ix_users_checkout_due", users.c.checkout_reminded, users.c.check_out)

driver_schedules = sa.Table(
    "driver_schedules",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    sa.Column("driver_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    sa.Column("date", sa.Date(), nullable=False),
    sa.Column("shift_start", sa.Time(), nullable=True),
    sa.Column("shift_end", sa.Time(), nullable=True),
    sa.Column("is_day_off", sa.Boolean(), nullable=False, server_default=sa.false()),
    sa.Column("notes", sa.Text(), nullable=True),
    *_timestamps(),
    # One entry per driver per day
    sa.UniqueConstraint("driver_id", "date", name="uq_driver_schedules_driver_date"),
)
