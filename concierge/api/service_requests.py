from datetime import datetime
from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel, Field

from concierge import tables
from concierge.api.resources import Resource, crud_router, fetch_all

ServiceType = Literal["DINING", "SPA", "HOUSEKEEPING", "POOL", "BUTLER", "EXTEND_STAY"]
ServiceStatus = Literal["PENDING", "CONFIRMED", "COMPLETED"]


class ServiceRequestCreate(BaseModel):
    type: ServiceType
    status: ServiceStatus = "PENDING"
    details: str = Field(min_length=1)
    room_number: str = Field(min_length=1)
    timestamp: int


class ServiceRequestUpdate(BaseModel):
    type: ServiceType | None = None
    status: ServiceStatus | None = None
    details: str | None = Field(default=None, min_length=1)
    room_number: str | None = Field(default=None, min_length=1)
    timestamp: int | None = None
    rating: int | None = Field(default=None, ge=1, le=5)
    feedback: str | None = None


class ServiceRequest(BaseModel):
    id: int
    type: str
    status: str
    details: str
    room_number: str
    timestamp: int
    rating: int | None = None
    feedback: str | None = None
    created_at: datetime
    updated_at: datetime


resource = Resource(
    name="service_request",
    path="service-requests",
    table=tables.service_requests,
    read_schema=ServiceRequest,
    create_schema=ServiceRequestCreate,
    update_schema=ServiceRequestUpdate,
    order_by=(tables.service_requests.c.timestamp.desc(),),
    not_found="Service request not found",
    error_context="service",
)

router = APIRouter(prefix=resource.prefix, tags=["service-requests"])


@router.get("/room/{room_number}", response_model=list[ServiceRequest])
def get_requests_by_room(room_number: str):
    return fetch_all(resource, tables.service_requests.c.room_number == room_number)


@router.get("/status/{request_status}", response_model=list[ServiceRequest])
def get_requests_by_status(request_status: ServiceStatus):
    return fetch_all(resource, tables.service_requests.c.status == request_status)


@router.get("/type/{service_type}", response_model=list[ServiceRequest])
def get_requests_by_type(service_type: ServiceType):
    return fetch_all(resource, tables.service_requests.c.type == service_type)


crud_router(resource, router)
