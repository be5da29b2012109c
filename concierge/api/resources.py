"""Generic CRUD plumbing shared by every concierge resource.

A ``Resource`` describes one table: which columns a client may write (the
create/update schemas), how rows are returned (the read schema), how lists
are ordered and which of the five standard operations are exposed. Each
operation is a single parameterized statement against ``db.engine``.
"""
from dataclasses import dataclass, field
from typing import Any, Callable

import sqlalchemy
from fastapi import APIRouter, HTTPException, Response, status
from pydantic import BaseModel

from concierge import database as db
from concierge.errors import STORE_REJECTIONS, bad_request_from

ALL_OPERATIONS = frozenset({"list", "get", "create", "update", "delete"})


@dataclass(frozen=True)
class Resource:
    name: str
    path: str
    table: sqlalchemy.Table
    read_schema: type[BaseModel]
    create_schema: type[BaseModel]
    update_schema: type[BaseModel] | None = None
    order_by: tuple = ()
    not_found: str = "Item not found"
    error_context: str | None = None
    operations: frozenset = ALL_OPERATIONS
    # Hooks to turn validated request bodies into column values
    prepare_create: Callable[[dict[str, Any]], dict[str, Any]] | None = None
    prepare_update: Callable[[dict[str, Any]], dict[str, Any]] | None = None
    tags: list[str] = field(default_factory=list)

    @property
    def prefix(self) -> str:
        return f"/api/v1/{self.path}"


def not_found(resource: Resource) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=resource.not_found)


def to_model(resource: Resource, row) -> BaseModel:
    return resource.read_schema.model_validate(dict(row))


def fetch_all(resource: Resource, *criteria, order_by: tuple | None = None, limit: int | None = None) -> list:
    """SELECT rows matching ``criteria`` in the resource's default order."""
    table = resource.table
    stmt = sqlalchemy.select(table).where(*criteria).order_by(*(order_by if order_by is not None else resource.order_by))
    if limit is not None:
        stmt = stmt.limit(limit)

    with db.engine.begin() as connection:
        rows = connection.execute(stmt).mappings().all()

    return [to_model(resource, row) for row in rows]


def fetch_first(resource: Resource, *criteria, order_by: tuple | None = None):
    """First matching row, or 404."""
    rows = fetch_all(resource, *criteria, order_by=order_by, limit=1)
    if not rows:
        raise not_found(resource)
    return rows[0]


def fetch_one(resource: Resource, item_id: int):
    table = resource.table
    with db.engine.begin() as connection:
        row = connection.execute(
            sqlalchemy.select(table).where(table.c.id == item_id)
        ).mappings().one_or_none()

    if not row:
        raise not_found(resource)
    return to_model(resource, row)


def insert_one(resource: Resource, body: BaseModel):
    table = resource.table
    values = body.model_dump()
    if resource.prepare_create:
        values = resource.prepare_create(values)

    try:
        with db.engine.begin() as connection:
            row = connection.execute(
                sqlalchemy.insert(table).values(**values).returning(*table.c)
            ).mappings().one()
    except STORE_REJECTIONS as e:
        raise bad_request_from(e, resource.error_context, "create")

    return to_model(resource, row)


def update_one(resource: Resource, item_id: int, body: BaseModel):
    """Apply only the fields the client sent; an empty body returns the row unchanged."""
    table = resource.table
    values = body.model_dump(exclude_unset=True)
    if resource.prepare_update:
        values = resource.prepare_update(values)

    if not values:
        return fetch_one(resource, item_id)

    try:
        with db.engine.begin() as connection:
            row = connection.execute(
                sqlalchemy.update(table)
                .where(table.c.id == item_id)
                .values(**values)
                .returning(*table.c)
            ).mappings().one_or_none()
    except STORE_REJECTIONS as e:
        raise bad_request_from(e, resource.error_context, "update")

    if not row:
        raise not_found(resource)
    return to_model(resource, row)


def delete_one(resource: Resource, item_id: int) -> None:
    table = resource.table
    try:
        with db.engine.begin() as connection:
            result = connection.execute(
                sqlalchemy.delete(table).where(table.c.id == item_id)
            )
    except STORE_REJECTIONS as e:
        raise bad_request_from(e, resource.error_context, "delete")

    if result.rowcount == 0:
        raise not_found(resource)


def crud_router(resource: Resource, router: APIRouter | None = None) -> APIRouter:
    """
    Register the standard list/get/create/update/delete endpoints for ``resource``.

    Routes a resource module already put on ``router`` are matched first, so
    literal paths like ``/room/{room_number}`` take priority over ``/{item_id}``.
    """
    if router is None:
        router = APIRouter(prefix=resource.prefix, tags=resource.tags or [resource.path])

    read_schema = resource.read_schema
    create_schema = resource.create_schema
    update_schema = resource.update_schema or resource.create_schema
    operations = resource.operations

    if "list" in operations:
        @router.get("/", response_model=list[read_schema], name=f"list_{resource.name}")
        def list_items():
            return fetch_all(resource)

    if "get" in operations:
        @router.get("/{item_id}", response_model=read_schema, name=f"get_{resource.name}")
        def get_item(item_id: int):
            return fetch_one(resource, item_id)

    if "create" in operations:
        @router.post("/", response_model=read_schema, status_code=status.HTTP_201_CREATED, name=f"create_{resource.name}")
        def create_item(body: create_schema):
            return insert_one(resource, body)

    if "update" in operations:
        @router.put("/{item_id}", response_model=read_schema, name=f"update_{resource.name}")
        def update_item(item_id: int, body: update_schema):
            return update_one(resource, item_id, body)

    if "delete" in operations:
        @router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT, name=f"delete_{resource.name}")
        def delete_item(item_id: int):
            delete_one(resource, item_id)
            return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router
