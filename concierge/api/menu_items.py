from datetime import datetime

from fastapi import APIRouter
from pydantic import BaseModel, Field

from concierge import tables
from concierge.api.resources import ALL_OPERATIONS, Resource, crud_router, fetch_all


class MenuItemCreate(BaseModel):
    name: str = Field(min_length=1)
    price: float = Field(ge=0)
    category: str = Field(min_length=1)
    description: str | None = None
    language: str | None = None


class MenuItemUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    price: float | None = Field(default=None, ge=0)
    category: str | None = Field(default=None, min_length=1)
    description: str | None = None
    language: str | None = None


class MenuItem(BaseModel):
    id: int
    name: str
    price: float
    category: str
    description: str | None = None
    language: str | None = None
    created_at: datetime
    updated_at: datetime


resource = Resource(
    name="menu_item",
    path="menu-items",
    table=tables.menu_items,
    read_schema=MenuItem,
    create_schema=MenuItemCreate,
    update_schema=MenuItemUpdate,
    order_by=(tables.menu_items.c.category, tables.menu_items.c.name),
    not_found="Menu item not found",
    error_context="menu",
    operations=ALL_OPERATIONS - {"list"},
)

router = APIRouter(prefix=resource.prefix, tags=["menu-items"])


@router.get("/", response_model=list[MenuItem])
def get_menu_items(category: str | None = None, language: str | None = None):
    """
    List the menu, optionally narrowed to one category and/or language.
    """
    criteria = []
    if category is not None:
        criteria.append(tables.menu_items.c.category == category)
    if language is not None:
        criteria.append(tables.menu_items.c.language == language)

    return fetch_all(resource, *criteria)


crud_router(resource, router)
