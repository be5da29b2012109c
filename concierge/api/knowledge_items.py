"""FAQ entries the concierge chat answers from"""
from datetime import datetime

from pydantic import BaseModel, Field

from concierge import tables
from concierge.api.resources import Resource, crud_router


class KnowledgeItemCreate(BaseModel):
    question: str = Field(min_length=1)
    answer: str = Field(min_length=1)


class KnowledgeItemUpdate(BaseModel):
    question: str | None = Field(default=None, min_length=1)
    answer: str | None = Field(default=None, min_length=1)


class KnowledgeItem(BaseModel):
    id: int
    question: str
    answer: str
    created_at: datetime
    updated_at: datetime


resource = Resource(
    name="knowledge_item",
    path="knowledge-items",
    table=tables.knowledge_items,
    read_schema=KnowledgeItem,
    create_schema=KnowledgeItemCreate,
    update_schema=KnowledgeItemUpdate,
    order_by=(tables.knowledge_items.c.question,),
    not_found="Knowledge item not found",
)

router = crud_router(resource)
