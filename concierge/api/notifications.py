"""In-app notifications polled by guest and staff clients"""
from datetime import datetime
from typing import Literal

import sqlalchemy
from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from concierge import database as db
from concierge import tables
from concierge.api.resources import Resource, crud_router, fetch_all, to_model

NotificationType = Literal["INFO", "SUCCESS", "WARNING", "ERROR"]


class NotificationCreate(BaseModel):
    recipient_id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    message: str = Field(min_length=1)
    type: NotificationType = "INFO"
    is_read: bool = False


class NotificationUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    message: str | None = Field(default=None, min_length=1)
    type: NotificationType | None = None
    is_read: bool | None = None


class Notification(BaseModel):
    id: int
    recipient_id: str
    title: str
    message: str
    type: str
    is_read: bool
    created_at: datetime


class MarkAllReadResponse(BaseModel):
    success: bool
    count: int


resource = Resource(
    name="notification",
    path="notifications",
    table=tables.notifications,
    read_schema=Notification,
    create_schema=NotificationCreate,
    update_schema=NotificationUpdate,
    order_by=(tables.notifications.c.created_at.desc(), tables.notifications.c.id.desc()),
    not_found="Notification not found",
    error_context="notification",
)

router = APIRouter(prefix=resource.prefix, tags=["notifications"])


@router.get("/recipient/{recipient_id}", response_model=list[Notification])
def get_notifications_for_recipient(recipient_id: str):
    return fetch_all(resource, tables.notifications.c.recipient_id == recipient_id)


@router.get("/recipient/{recipient_id}/unread", response_model=list[Notification])
def get_unread_notifications(recipient_id: str):
    return fetch_all(
        resource,
        tables.notifications.c.recipient_id == recipient_id,
        tables.notifications.c.is_read.is_(False),
    )


@router.put("/recipient/{recipient_id}/read-all", response_model=MarkAllReadResponse)
def mark_all_read(recipient_id: str):
    """Mark every unread notification for the recipient as read"""
    with db.engine.begin() as connection:
        result = connection.execute(
            sqlalchemy.text(
                """
                UPDATE notifications
                SET is_read = :read
                WHERE recipient_id = :recipient_id AND is_read = :unread
                """
            ),
            {"recipient_id": recipient_id, "read": True, "unread": False}
        )

    return MarkAllReadResponse(success=True, count=result.rowcount)


@router.put("/{notification_id}/read", response_model=Notification)
def mark_read(notification_id: int):
    table = tables.notifications
    with db.engine.begin() as connection:
        row = connection.execute(
            sqlalchemy.update(table)
            .where(table.c.id == notification_id)
            .values(is_read=True)
            .returning(*table.c)
        ).mappings().one_or_none()

    if not row:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=resource.not_found)
    return to_model(resource, row)


crud_router(resource, router)
