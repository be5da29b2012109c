"""Guest <-> staff / assistant chat history"""
from datetime import datetime
from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel, Field

from concierge import tables
from concierge.api.resources import ALL_OPERATIONS, Resource, crud_router, fetch_all


class ChatMessageCreate(BaseModel):
    role: Literal["user", "model"]
    text: str = Field(min_length=1)
    user_id: int | None = None
    room_number: str | None = None
    service_type: str | None = None


class ChatMessage(BaseModel):
    id: int
    role: str
    text: str
    user_id: int | None = None
    room_number: str | None = None
    service_type: str | None = None
    created_at: datetime


resource = Resource(
    name="chat_message",
    path="chat-messages",
    table=tables.chat_messages,
    read_schema=ChatMessage,
    create_schema=ChatMessageCreate,
    order_by=(tables.chat_messages.c.created_at.desc(), tables.chat_messages.c.id.desc()),
    not_found="Chat message not found",
    operations=ALL_OPERATIONS - {"update"},
)

# Conversations read oldest first
CONVERSATION_ORDER = (tables.chat_messages.c.created_at.asc(), tables.chat_messages.c.id.asc())

router = APIRouter(prefix=resource.prefix, tags=["chat-messages"])


@router.get("/user/{user_id}", response_model=list[ChatMessage])
def get_messages_by_user(user_id: int):
    return fetch_all(resource, tables.chat_messages.c.user_id == user_id, order_by=CONVERSATION_ORDER)


@router.get("/room/{room_number}", response_model=list[ChatMessage])
def get_messages_by_room(room_number: str, service_type: str | None = None):
    criteria = [tables.chat_messages.c.room_number == room_number]
    if service_type is not None:
        criteria.append(tables.chat_messages.c.service_type == service_type)
    return fetch_all(resource, *criteria, order_by=CONVERSATION_ORDER)


crud_router(resource, router)
