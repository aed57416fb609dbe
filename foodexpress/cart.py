from dataclasses import dataclass
from decimal import Decimal
import itertools
from typing import Callable

CENTS = Decimal("0.01")


def to_price(value) -> Decimal:
    price = Decimal(str(value))
    if price < 0: raise ValueError("price must be non-negative")
    return price


@dataclass
class CartLine:
    id: int
    name: str
    price: Decimal
    quantity: int = 1

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity

    def snapshot(self) -> dict:
        return {"name": self.name, "price": float(self.price), "quantity": self.quantity}


class Cart:
    """In-memory cart for one page lifetime. Lines are addressed by a stable id, never by position."""

    def __init__(self):
        self.lines: list[CartLine] = []
        self._ids = itertools.count(1)
        self._listeners: list[Callable[["Cart"], None]] = []

    def subscribe(self, listener: Callable[["Cart"], None]) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _changed(self):
        for listener in list(self._listeners): listener(self)

    def find(self, name: str) -> CartLine | None:
        return next((l for l in self.lines if l.name == name), None)

    def line(self, line_id: int) -> CartLine:
        for l in self.lines:
            if l.id == line_id: return l
        raise KeyError(line_id)

    def add(self, name: str, price) -> CartLine:
        line = self.find(name)
        if line: line.quantity += 1
        else:
            line = CartLine(id=next(self._ids), name=name, price=to_price(price))
            self.lines.append(line)
        self._changed()
        return line

    def increment(self, line_id: int) -> CartLine:
        line = self.line(line_id)
        line.quantity += 1
        self._changed()
        return line

    def decrement(self, line_id: int) -> CartLine:
        line = self.line(line_id)
        line.quantity = max(1, line.quantity - 1)
        self._changed()
        return line

    def remove(self, line_id: int) -> None:
        self.lines.remove(self.line(line_id))
        self._changed()

    def clear(self) -> None:
        self.lines.clear()
        self._changed()

    def total(self) -> Decimal:
        return sum((l.subtotal for l in self.lines), Decimal("0")).quantize(CENTS)

    def count(self) -> int:
        return sum(l.quantity for l in self.lines)

    def snapshot(self) -> tuple[dict, ...]:
        return tuple(l.snapshot() for l in self.lines)

