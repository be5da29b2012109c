"""Tests for the filtered read paths of menus, promotions, chat and service requests"""
from concierge.api import chat_messages, menu_items, promotions, service_requests
from concierge.api.chat_messages import ChatMessageCreate, get_messages_by_room, get_messages_by_user
from concierge.api.menu_items import MenuItemCreate, get_menu_items
from concierge.api.promotions import PromotionCreate, get_promotions
from concierge.api.resources import insert_one
from concierge.api.service_requests import (
    ServiceRequestCreate,
    get_requests_by_room,
    get_requests_by_status,
    get_requests_by_type,
)


def test_menu_filters():
    for name, category, language in [
        ("Pho Bo", "Dining", "English"),
        ("Banh Xeo", "Dining", "Vietnamese"),
        ("Hot Stone Massage", "Spa", "English"),
    ]:
        insert_one(menu_items.resource, MenuItemCreate(name=name, price=10, category=category, language=language))

    assert [item.name for item in get_menu_items()] == ["Banh Xeo", "Pho Bo", "Hot Stone Massage"]
    assert [item.name for item in get_menu_items(category="Dining")] == ["Banh Xeo", "Pho Bo"]
    assert [item.name for item in get_menu_items(category="Dining", language="English")] == ["Pho Bo"]
    assert get_menu_items(category="Bar") == []


def test_menu_filter_query_params(client):
    insert_one(menu_items.resource, MenuItemCreate(name="Pho Bo", price=10, category="Dining", language="English"))
    insert_one(menu_items.resource, MenuItemCreate(name="Massage", price=60, category="Spa", language="English"))

    response = client.get("/api/v1/menu-items/", params={"category": "Spa"})
    assert [item["name"] for item in response.json()] == ["Massage"]


def test_promotions_language_filter():
    insert_one(promotions.resource, PromotionCreate(title="Sunset Spa", language="English"))
    insert_one(promotions.resource, PromotionCreate(title="Khuyen mai Spa", language="Vietnamese"))

    assert [p.title for p in get_promotions(language="Vietnamese")] == ["Khuyen mai Spa"]
    assert len(get_promotions()) == 2


def test_chat_conversations_read_oldest_first():
    first = insert_one(chat_messages.resource, ChatMessageCreate(role="user", text="Hello", user_id=7, room_number="101", service_type="DINING"))
    second = insert_one(chat_messages.resource, ChatMessageCreate(role="model", text="Hi!", user_id=7, room_number="101", service_type="DINING"))
    insert_one(chat_messages.resource, ChatMessageCreate(role="user", text="Towels?", user_id=7, room_number="101", service_type="HOUSEKEEPING"))

    assert [m.id for m in get_messages_by_room("101", service_type="DINING")] == [first.id, second.id]
    assert len(get_messages_by_room("101")) == 3
    assert [m.text for m in get_messages_by_user(7)][:2] == ["Hello", "Hi!"]
    assert get_messages_by_user(8) == []


def test_service_request_extras():
    towels = insert_one(service_requests.resource, ServiceRequestCreate(
        type="HOUSEKEEPING", details="Extra towels", room_number="101", timestamp=1772683200000,
    ))
    dinner = insert_one(service_requests.resource, ServiceRequestCreate(
        type="DINING", status="CONFIRMED", details="Table for two", room_number="101", timestamp=1772686800000,
    ))
    insert_one(service_requests.resource, ServiceRequestCreate(
        type="SPA", details="Massage at 5pm", room_number="202", timestamp=1772690400000,
    ))

    assert [r.id for r in get_requests_by_room("101")] == [dinner.id, towels.id]
    assert [r.id for r in get_requests_by_status("CONFIRMED")] == [dinner.id]
    assert [r.id for r in get_requests_by_type("HOUSEKEEPING")] == [towels.id]


def test_unknown_service_status_is_400(client):
    response = client.get("/api/v1/service-requests/status/LOST")
    assert response.status_code == 400
