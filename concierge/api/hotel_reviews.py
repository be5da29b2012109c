"""Guest reviews of their stay - one per room, resubmitting replaces it"""
from datetime import datetime

import sqlalchemy
from fastapi import APIRouter, status
from pydantic import BaseModel, Field
from sqlalchemy.dialects import postgresql, sqlite

from concierge import database as db
from concierge import tables
from concierge.api.resources import ALL_OPERATIONS, Resource, crud_router, fetch_first, to_model
from concierge.errors import STORE_REJECTIONS, bad_request_from


class CategoryRating(BaseModel):
    category: str = Field(min_length=1)
    rating: int = Field(ge=1, le=5)


class HotelReviewCreate(BaseModel):
    room_number: str = Field(min_length=1)
    guest_name: str = Field(min_length=1)
    category_ratings: list[CategoryRating] = Field(min_length=1)
    average_rating: float | None = Field(default=None, ge=1, le=5)
    comment: str | None = None
    timestamp: int


class HotelReviewUpdate(BaseModel):
    guest_name: str | None = Field(default=None, min_length=1)
    category_ratings: list[CategoryRating] | None = Field(default=None, min_length=1)
    average_rating: float | None = Field(default=None, ge=1, le=5)
    comment: str | None = None
    timestamp: int | None = None


class HotelReview(BaseModel):
    id: int
    room_number: str
    guest_name: str
    category_ratings: list[CategoryRating]
    average_rating: float
    comment: str | None = None
    timestamp: int
    created_at: datetime
    updated_at: datetime


def average_of(ratings: list[dict]) -> float:
    return round(sum(r["rating"] for r in ratings) / len(ratings), 2)


def fill_average(values: dict) -> dict:
    if values.get("category_ratings") and values.get("average_rating") is None:
        values["average_rating"] = average_of(values["category_ratings"])
    elif "average_rating" in values and values["average_rating"] is None:
        values.pop("average_rating")
    return values


resource = Resource(
    name="hotel_review",
    path="hotel-reviews",
    table=tables.hotel_reviews,
    read_schema=HotelReview,
    create_schema=HotelReviewCreate,
    update_schema=HotelReviewUpdate,
    order_by=(tables.hotel_reviews.c.created_at.desc(), tables.hotel_reviews.c.id.desc()),
    not_found="Review not found",
    operations=ALL_OPERATIONS - {"create"},
    prepare_update=fill_average,
)

router = APIRouter(prefix=resource.prefix, tags=["hotel-reviews"])


@router.get("/room/{room_number}", response_model=HotelReview)
def get_review_by_room(room_number: str):
    return fetch_first(resource, tables.hotel_reviews.c.room_number == room_number)


@router.post("/", response_model=HotelReview, status_code=status.HTTP_201_CREATED)
def submit_review(body: HotelReviewCreate):
    """Create the room's review, or overwrite the one it already has"""
    table = tables.hotel_reviews
    values = fill_average(body.model_dump())

    dialect_insert = postgresql.insert if db.engine.dialect.name == "postgresql" else sqlite.insert
    stmt = dialect_insert(table).values(**values)
    stmt = stmt.on_conflict_do_update(
        index_elements=[table.c.room_number],
        set_={
            "guest_name": stmt.excluded.guest_name,
            "category_ratings": stmt.excluded.category_ratings,
            "average_rating": stmt.excluded.average_rating,
            "comment": stmt.excluded.comment,
            "timestamp": stmt.excluded.timestamp,
            "updated_at": sqlalchemy.func.now(),
        },
    ).returning(*table.c)

    try:
        with db.engine.begin() as connection:
            row = connection.execute(stmt).mappings().one()
    except STORE_REJECTIONS as e:
        raise bad_request_from(e, None, "create")

    return to_model(resource, row)


crud_router(resource, router)
