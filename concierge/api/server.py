import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware

from concierge.api import (
    auth_endpoints,
    chat_messages,
    driver_schedules,
    hotel_reviews,
    knowledge_items,
    locations,
    menu_items,
    notifications,
    promotions,
    resort_events,
    ride_requests,
    room_types,
    rooms,
    service_requests,
    users,
)
from concierge.config import settings
from concierge.rate_limit import limiter, rate_limit_exceeded_handler
from concierge.services.scheduler import ReminderScheduler

# Configure logging
logging.basicConfig(level=logging.INFO)
log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle - start and stop the checkout reminder sweep."""
    reminders = ReminderScheduler()
    app.state.reminder_scheduler = reminders
    if settings.SCHEDULER_ENABLED:
        log.info("Starting checkout reminder scheduler...")
        reminders.start()
    else:
        log.info("Checkout reminder scheduler disabled")
    yield
    log.info("Stopping checkout reminder scheduler...")
    reminders.stop()


description = """
Digital concierge for Furama Resort Danang: resort map, rooms, dining menus,
promotions, events, buggy rides, service requests, guest chat, notifications
and reviews.
"""

tags_metadata = [
    {"name": "auth", "description": "Guest and staff login"},
    {"name": "users", "description": "Guests (stays) and staff accounts"},
    {"name": "locations", "description": "Resort map locations"},
    {"name": "room-types", "description": "Villa and room categories"},
    {"name": "rooms", "description": "Physical rooms"},
    {"name": "menu-items", "description": "Restaurant and room service menu"},
    {"name": "promotions", "description": "Current offers"},
    {"name": "knowledge-items", "description": "Concierge knowledge base"},
    {"name": "resort-events", "description": "Resort activities calendar"},
    {"name": "ride-requests", "description": "Buggy ride requests"},
    {"name": "service-requests", "description": "Housekeeping and other service requests"},
    {"name": "chat-messages", "description": "Guest and staff chat"},
    {"name": "notifications", "description": "In-app notifications"},
    {"name": "hotel-reviews", "description": "Guest reviews"},
    {"name": "driver-schedules", "description": "Buggy driver shifts and days off"},
]

app = FastAPI(
    title="Furama Resort Digital Concierge API",
    description=description,
    version="1.0.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail
    if exc.status_code == 404 and detail == "Not Found":
        # No route matched
        detail = "Route not found"
    return JSONResponse(status_code=exc.status_code, content={"error": detail}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    problems = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc)
        problems.append(f"{field}: {error.get('msg')}" if field else str(error.get("msg")))
    return JSONResponse(status_code=400, content={"error": "; ".join(problems) or "Invalid request"})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    log.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": str(exc) or "Internal server error"})


# Include routers
app.include_router(auth_endpoints.router)
app.include_router(users.router)
app.include_router(locations.router)
app.include_router(room_types.router)
app.include_router(rooms.router)
app.include_router(menu_items.router)
app.include_router(promotions.router)
app.include_router(knowledge_items.router)
app.include_router(resort_events.router)
app.include_router(ride_requests.router)
app.include_router(service_requests.router)
app.include_router(chat_messages.router)
app.include_router(notifications.router)
app.include_router(hotel_reviews.router)
app.include_router(driver_schedules.router)


@app.get("/health")
@limiter.exempt
def health():
    return {"status": "ok", "message": "Furama Resort Digital Concierge API is running"}
