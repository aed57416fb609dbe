from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from sqlalchemy import CheckConstraint
from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OrderStatus(str, Enum):
    received = "received"
    preparing = "preparing"
    out_for_delivery = "out-for-delivery"
    delivered = "delivered"


class MenuItem(SQLModel, table=True):
    __table_args__ = (CheckConstraint("price >= 0", name="menuitem_price_non_negative"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    description: str = ""
    price: float
    category: str = "General"
    image_url: str = ""
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def document(self) -> dict:
        return {
            "id": self.id, "name": self.name, "description": self.description, "price": self.price,
            "category": self.category, "imageUrl": self.image_url,
            "createdAt": self.created_at.isoformat(), "updatedAt": self.updated_at.isoformat(),
        }


class Order(SQLModel, table=True):
    __table_args__ = (CheckConstraint("total_amount >= 0", name="order_total_non_negative"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    food_name: str
    pincode: str = ""
    city: str = ""
    address: str = ""
    total_amount: float
    status: OrderStatus = OrderStatus.received
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def document(self) -> dict:
        return {
            "id": self.id, "foodName": self.food_name,
            "userLocation": {"pincode": self.pincode, "city": self.city, "address": self.address},
            "totalAmount": self.total_amount, "status": self.status.value,
            "createdAt": self.created_at.isoformat(), "updatedAt": self.updated_at.isoformat(),
        }


class StoredValue(SQLModel, table=True):
    key: str = Field(primary_key=True)
    value: str
