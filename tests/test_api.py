from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from foodexpress import main
from foodexpress.database import get_session
from foodexpress.menu import filter_menu
from foodexpress.models import MenuItem, Order


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_menu_newest_first(client, db):
    now = datetime.now(timezone.utc)
    db.add(MenuItem(name="Paneer Tikka", price=8.5, category="Starters", created_at=now - timedelta(days=1)))
    db.add(MenuItem(name="Masala Dosa", price=6, created_at=now))
    db.commit()
    r = client.get("/menu")
    assert r.status_code == 200
    items = r.json()["items"]
    assert [i["name"] for i in items] == ["Masala Dosa", "Paneer Tikka"]
    assert items[0]["category"] == "General"
    assert items[1]["imageUrl"] == ""


def test_menu_empty(client):
    assert client.get("/menu").json() == {"items": []}


def test_create_order(client, db):
    r = client.post("/order", json={"foodName": "Pizza", "userLocation": {"city": "Pune"}, "totalAmount": 12.5})
    assert r.status_code == 201
    order = r.json()["order"]
    assert order["foodName"] == "Pizza"
    assert order["userLocation"] == {"pincode": "", "city": "Pune", "address": ""}
    assert order["totalAmount"] == 12.5
    assert order["status"] == "received"
    assert db.get(Order, order["id"]).city == "Pune"


def test_create_order_without_location(client):
    r = client.post("/order", json={"foodName": "Tea", "totalAmount": 0})
    assert r.status_code == 201
    assert r.json()["order"]["userLocation"]["address"] == ""


def test_create_order_rejects_bad_food_name(client):
    for body in ({"totalAmount": 3}, {"foodName": "", "totalAmount": 3}, {"foodName": 7, "totalAmount": 3}):
        r = client.post("/order", json=body)
        assert r.status_code == 400
        assert r.json() == {"error": "Invalid or missing foodName"}


def test_create_order_rejects_bad_total(client):
    for total in (None, "12", -1, True):
        r = client.post("/order", json={"foodName": "Pizza", "totalAmount": total})
        assert r.status_code == 400
        assert r.json() == {"error": "Invalid totalAmount"}


def test_create_order_rejects_infinite_total(client, db):
    for raw in (b'{"foodName": "Pizza", "totalAmount": Infinity}', b'{"foodName": "Pizza", "totalAmount": NaN}'):
        r = client.post("/order", content=raw, headers={"content-type": "application/json"})
        assert r.status_code == 400
        assert r.json() == {"error": "Invalid totalAmount"}
    assert db.exec(select(Order)).all() == []


def test_create_order_without_body(client):
    r = client.post("/order", content=b"garbage", headers={"content-type": "application/json"})
    assert r.status_code == 400


def test_delivery_time(client):
    r = client.get("/delivery-time", params={"location": "  Mumbai "})
    assert r.json() == {"location": "Mumbai", "etaMinutes": 25, "etaText": "25-40 mins"}


def test_delivery_time_accepts_pincode_or_city(client):
    assert client.get("/delivery-time", params={"pincode": "110001"}).json()["etaMinutes"] == 20
    assert client.get("/delivery-time", params={"city": "india"}).json()["etaMinutes"] == 35


def test_delivery_time_requires_location(client):
    r = client.get("/delivery-time", params={"location": "  "})
    assert r.status_code == 400
    assert r.json() == {"error": "Missing location (pincode or city)"}


def test_unknown_api_path(client):
    r = client.get("/menu/specials")
    assert r.status_code == 404
    assert r.json() == {"error": "Not found"}


def test_wrong_method_on_api_path(client):
    r = client.get("/order")
    assert r.status_code == 404
    assert r.json() == {"error": "Not found"}
    assert client.delete("/delivery-time").json() == {"error": "Not found"}


def test_negative_prices_are_refused_by_the_store(db):
    db.add(MenuItem(name="Refund", price=-1))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()
    db.add(Order(food_name="Pizza", total_amount=-5))
    with pytest.raises(IntegrityError):
        db.commit()


def broken_session():
    raise RuntimeError("connection reset")
    yield


def test_unexpected_error_shows_message_outside_production(monkeypatch):
    monkeypatch.setattr(main, "IS_PRODUCTION", False)
    main.app.dependency_overrides[get_session] = broken_session
    try:
        r = TestClient(main.app, raise_server_exceptions=False).get("/menu")
    finally:
        main.app.dependency_overrides.clear()
    assert r.status_code == 500
    assert r.json() == {"error": "Internal Server Error", "message": "connection reset"}


def test_unexpected_error_is_generic_in_production(monkeypatch):
    monkeypatch.setattr(main, "IS_PRODUCTION", True)
    main.app.dependency_overrides[get_session] = broken_session
    try:
        r = TestClient(main.app, raise_server_exceptions=False).get("/menu")
    finally:
        main.app.dependency_overrides.clear()
    assert r.json() == {"error": "Internal Server Error"}


def test_filter_menu():
    items = [
        {"name": "Paneer Tikka", "category": "starters"},
        {"name": "Chicken Tikka", "category": "mains"},
        {"name": "Lassi", "category": "drinks"},
    ]
    assert [i["name"] for i in filter_menu(items, "tikka")] == ["Paneer Tikka", "Chicken Tikka"]
    assert [i["name"] for i in filter_menu(items, "TIKKA", "mains")] == ["Chicken Tikka"]
    assert filter_menu(items, "", "all") == items
    assert filter_menu(items, "naan") == []
