import math
from dataclasses import dataclass, asdict
from decimal import Decimal
from .errors import ValidationError
from .storage import Storage, USER_KEY, LOCATION_KEY, ORDERS_KEY


@dataclass(frozen=True)
class Identity:
    """Who is logged in. Nothing about this is verified against a server."""

    name: str
    email: str


@dataclass(frozen=True)
class LocationEstimate:
    label: str
    eta_minutes: int


@dataclass(frozen=True)
class OrderRecord:
    id: str
    timestamp: str
    items: tuple[dict, ...]

    @property
    def total(self) -> Decimal:
        return sum((Decimal(str(i["price"])) * i["quantity"] for i in self.items), Decimal("0")).quantize(Decimal("0.01"))

    def document(self) -> dict:
        return {"id": self.id, "when": self.timestamp, "items": [dict(i) for i in self.items]}

    @classmethod
    def from_document(cls, doc) -> "OrderRecord | None":
        """Rebuild a stored record, or None when the stored entry is not one. Bad items are dropped."""
        if not isinstance(doc, dict) or not isinstance(doc.get("id"), str): return None
        when, raw_items = doc.get("when"), doc.get("items")
        items = tuple(i for i in map(_stored_item, raw_items if isinstance(raw_items, list) else []) if i)
        return cls(id=doc["id"], timestamp=when if isinstance(when, str) else "", items=items)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _stored_item(item) -> dict | None:
    if not isinstance(item, dict) or not isinstance(item.get("name"), str): return None
    price, quantity = item.get("price", 0), item.get("quantity", item.get("qty", 1))
    if not _is_number(price) or price < 0: return None
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1: return None
    return {"name": item["name"], "price": price, "quantity": quantity}


class SessionStore:
    """Durable per-profile state: identity, last location and order history."""

    def __init__(self, storage: Storage):
        self.storage = storage

    def current_user(self) -> Identity | None:
        data = self.storage.get(USER_KEY)
        if not isinstance(data, dict): return None
        name, email = data.get("name", ""), data.get("email")
        if not isinstance(email, str) or not email or not isinstance(name, str): return None
        return Identity(name=name, email=email)

    @property
    def is_authenticated(self) -> bool:
        return self.current_user() is not None

    def login(self, email: str, password: str) -> Identity:
        email, password = (email or "").strip(), (password or "").strip()
        if not email or not password: raise ValidationError("Enter email and password.")
        return self._save_user(Identity(name=email.split("@")[0], email=email))

    def signup(self, name: str, email: str, password: str) -> Identity:
        name, email, password = (name or "").strip(), (email or "").strip(), (password or "").strip()
        if not name or not email or not password: raise ValidationError("Fill all fields.")
        return self._save_user(Identity(name=name, email=email))

    def _save_user(self, identity: Identity) -> Identity:
        self.storage.set(USER_KEY, asdict(identity))
        return identity

    def logout(self) -> None:
        # location and order history outlive the identity
        self.storage.remove(USER_KEY)

    def location(self) -> LocationEstimate | None:
        data = self.storage.get(LOCATION_KEY)
        if not isinstance(data, dict): return None
        label, eta = data.get("label"), data.get("eta", 30)
        if not isinstance(label, str) or isinstance(eta, bool) or not isinstance(eta, int): return None
        return LocationEstimate(label=label, eta_minutes=eta)

    def save_location(self, label: str, eta_minutes: int) -> LocationEstimate:
        self.storage.set(LOCATION_KEY, {"label": label, "eta": eta_minutes})
        return LocationEstimate(label=label, eta_minutes=eta_minutes)

    def orders(self) -> list[OrderRecord]:
        data = self.storage.get(ORDERS_KEY, [])
        if not isinstance(data, list): return []
        return [o for o in map(OrderRecord.from_document, data) if o is not None]

    def record_order(self, order: OrderRecord) -> None:
        history = self.storage.get(ORDERS_KEY, [])
        if not isinstance(history, list): history = []
        history.insert(0, order.document())
        self.storage.set(ORDERS_KEY, history)
