from datetime import datetime

from fastapi import APIRouter
from pydantic import BaseModel, Field

from concierge import tables
from concierge.api.resources import ALL_OPERATIONS, Resource, crud_router, fetch_all


class PromotionCreate(BaseModel):
    title: str = Field(min_length=1)
    description: str | None = None
    discount: str | None = None
    valid_until: str | None = None
    image_color: str | None = None
    image_url: str | None = None
    language: str | None = None


class PromotionUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    discount: str | None = None
    valid_until: str | None = None
    image_color: str | None = None
    image_url: str | None = None
    language: str | None = None


class Promotion(PromotionCreate):
    id: int
    created_at: datetime
    updated_at: datetime


resource = Resource(
    name="promotion",
    path="promotions",
    table=tables.promotions,
    read_schema=Promotion,
    create_schema=PromotionCreate,
    update_schema=PromotionUpdate,
    order_by=(tables.promotions.c.created_at.desc(), tables.promotions.c.id.desc()),
    not_found="Promotion not found",
    error_context="promotion",
    operations=ALL_OPERATIONS - {"list"},
)

router = APIRouter(prefix=resource.prefix, tags=["promotions"])


@router.get("/", response_model=list[Promotion])
def get_promotions(language: str | None = None):
    criteria = [tables.promotions.c.language == language] if language is not None else []
    return fetch_all(resource, *criteria)


crud_router(resource, router)
