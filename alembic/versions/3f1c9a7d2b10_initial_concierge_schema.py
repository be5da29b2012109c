"""Initial concierge schema

Revision ID: 3f1c9a7d2b10
Revises:
Create Date: 2026-10-12 09:14:27.518402

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7d2b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(updated: bool = True) -> list:
    columns = [sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now())]
    if updated:
        columns.append(sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()))
    return columns


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "locations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("lat", sa.Float(), nullable=False),
        sa.Column("lng", sa.Float(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("type", sa.String(32), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "room_types",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("location_id", sa.Integer(), sa.ForeignKey("locations.id", ondelete="SET NULL"), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "rooms",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("number", sa.String(32), nullable=False, unique=True),
        sa.Column("type_id", sa.Integer(), sa.ForeignKey("room_types.id", ondelete="CASCADE"), nullable=False),
        sa.Column("status", sa.String(32), nullable=False, server_default="Available"),
        *_timestamps(),
    )

    op.create_table(
        "menu_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("category", sa.String(64), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("language", sa.String(32), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "promotions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("discount", sa.String(64), nullable=True),
        sa.Column("valid_until", sa.String(64), nullable=True),
        sa.Column("image_color", sa.String(64), nullable=True),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("language", sa.String(32), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "knowledge_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("answer", sa.Text(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "resort_events",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("time", sa.Time(), nullable=False),
        sa.Column("location", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
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
        sa.Column("checkout_reminded", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("current_lat", sa.Float(), nullable=True),
        sa.Column("current_lng", sa.Float(), nullable=True),
        sa.Column("location_updated_at", sa.DateTime(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_checkout_due", "users", ["checkout_reminded", "check_out"])

    op.create_table(
        "ride_requests",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("guest_name", sa.String(255), nullable=False),
        sa.Column("room_number", sa.String(32), nullable=False),
        sa.Column("pickup", sa.String(255), nullable=False),
        sa.Column("destination", sa.String(255), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="SEARCHING"),
        sa.Column("timestamp", sa.BigInteger(), nullable=False),
        sa.Column("driver_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("eta", sa.Integer(), nullable=True),
        sa.Column("rating", sa.Integer(), nullable=True),
        sa.Column("feedback", sa.Text(), nullable=True),
        sa.Column("assigned_timestamp", sa.DateTime(), nullable=True),
        sa.Column("pick_timestamp", sa.DateTime(), nullable=True),
        sa.Column("drop_timestamp", sa.DateTime(), nullable=True),
        *_timestamps(),
    )
    op.create_index(op.f("ix_ride_requests_room_number"), "ride_requests", ["room_number"])

    op.create_table(
        "service_requests",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="PENDING"),
        sa.Column("details", sa.Text(), nullable=False),
        sa.Column("room_number", sa.String(32), nullable=False),
        sa.Column("timestamp", sa.BigInteger(), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=True),
        sa.Column("feedback", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index(op.f("ix_service_requests_room_number"), "service_requests", ["room_number"])

    op.create_table(
        "chat_messages",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("role", sa.String(16), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=True),
        sa.Column("room_number", sa.String(32), nullable=True),
        sa.Column("service_type", sa.String(32), nullable=True),
        *_timestamps(updated=False),
    )
    op.create_index(op.f("ix_chat_messages_room_number"), "chat_messages", ["room_number"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("recipient_id", sa.String(64), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("type", sa.String(16), nullable=False, server_default="INFO"),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(updated=False),
    )
    op.create_index(op.f("ix_notifications_recipient_id"), "notifications", ["recipient_id"])

    op.create_table(
        "hotel_reviews",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("room_number", sa.String(32), nullable=False, unique=True),
        sa.Column("guest_name", sa.String(255), nullable=False),
        sa.Column("category_ratings", sa.JSON(), nullable=False),
        sa.Column("average_rating", sa.Float(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column("timestamp", sa.BigInteger(), nullable=False),
        *_timestamps(),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("hotel_reviews")
    op.drop_index(op.f("ix_notifications_recipient_id"), table_name="notifications")
    op.drop_table("notifications")
    op.drop_index(op.f("ix_chat_messages_room_number"), table_name="chat_messages")
    op.drop_table("chat_messages")
    op.drop_index(op.f("ix_service_requests_room_number"), table_name="service_requests")
    op.drop_table("service_requests")
    op.drop_index(op.f("ix_ride_requests_room_number"), table_name="ride_requests")
    op.drop_table("ride_requests")
    op.drop_index("ix_users_checkout_due", table_name="users")
    op.drop_table("users")
    op.drop_table("resort_events")
    op.drop_table("knowledge_items")
    op.drop_table("promotions")
    op.drop_table("menu_items")
    op.drop_table("rooms")
    op.drop_table("room_types")
    op.drop_table("locations")
