import logging
import random
import re
from datetime import datetime, timezone
from enum import Enum
from typing import Callable
from .cart import Cart
from .client import FoodExpressClient
from .delivery import estimate_delivery_minutes
from .errors import RemoteUnavailable, ValidationError
from .session import LocationEstimate, OrderRecord, SessionStore

logger = logging.getLogger(__name__)

LOGIN_PAGE = "login.html"
TRACK_PAGE = "track.html"
FALLBACK_ETA = (25, 40)
DEFAULT_TRACK_ETA = 30
PINCODE = re.compile(r"^\d{6}$")


class CheckoutState(str, Enum):
    IDLE = "idle"
    AWAITING_ESTIMATE = "awaiting_estimate"
    ESTIMATE_READY = "estimate_ready"
    PAYMENT_SIMULATED = "payment_simulated"


class Checkout:
    """Drives one checkout attempt: location estimate, then simulated payment.

    All state changes happen inside the handler that triggered them. The only
    suspension point is the remote estimate call; while it is outstanding any
    further estimate request is ignored, so the first call wins.
    """

    def __init__(self, cart: Cart, session: SessionStore, navigate: Callable[[str], None],
                 client: FoodExpressClient | None = None, rng: random.Random | None = None):
        self.cart = cart
        self.session = session
        self.navigate = navigate
        self.client = client
        self.rng = rng or random.Random()
        self.state = CheckoutState.IDLE
        self.estimate: LocationEstimate | None = None
        self._listeners: list[Callable[["Checkout"], None]] = []

    def subscribe(self, listener: Callable[["Checkout"], None]) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _move(self, state: CheckoutState):
        self.state = state
        for listener in list(self._listeners): listener(self)

    def reset(self) -> None:
        self.estimate = None
        self._move(CheckoutState.IDLE)

    async def request_estimate(self, location: str) -> LocationEstimate | None:
        if self.state == CheckoutState.AWAITING_ESTIMATE:
            logger.debug("Estimate already in flight, ignoring %r", location)
            return None
        label = (location or "").strip()
        if not label: raise ValidationError("Please enter a city or pincode.")

        previous = self.state
        self._move(CheckoutState.AWAITING_ESTIMATE)
        try:
            minutes = await self._minutes(label)
        except BaseException:
            self._move(previous)
            raise
        self.estimate = self.session.save_location(label, minutes)
        self._move(CheckoutState.ESTIMATE_READY)
        return self.estimate

    async def _minutes(self, label: str) -> int:
        if self.client is None: return estimate_delivery_minutes(label)
        try:
            return await self.client.delivery_minutes(label)
        except RemoteUnavailable as e:
            minutes = self.rng.randint(*FALLBACK_ETA)
            logger.warning("Delivery estimate unavailable (%s), using %d mins", e, minutes)
            return minutes

    def proceed_to_pay(self) -> OrderRecord | None:
        if self.state != CheckoutState.ESTIMATE_READY:
            raise ValidationError("Get a delivery estimate first.")
        if not self.session.is_authenticated:
            self.navigate(LOGIN_PAGE)
            return None

        order = OrderRecord(
            id=f"FX{self.rng.randint(100000, 999999)}",
            timestamp=datetime.now(timezone.utc).isoformat(),
            items=self.cart.snapshot(),
        )
        self.session.record_order(order)
        logger.info("Payment simulated for order %s (%s)", order.id, order.total)
        self.estimate = None
        self._move(CheckoutState.PAYMENT_SIMULATED)
        self.cart.clear()
        self.navigate(TRACK_PAGE)
        return order

    async def submit_remote_order(self) -> dict:
        """Send the cart to POST /order. Not linked to the local order history."""
        if self.client is None: raise RemoteUnavailable("No API client configured")
        if not self.cart.lines: raise ValidationError("Your cart is empty.")
        food_name = ", ".join(l.name if l.quantity == 1 else f"{l.name} x{l.quantity}" for l in self.cart.lines)
        location = self.session.location()
        label = location.label if location else ""
        if PINCODE.match(label):
            return await self.client.create_order(food_name, float(self.cart.total()), pincode=label)
        return await self.client.create_order(food_name, float(self.cart.total()), city=label)

    def track(self, order_id: str) -> str:
        order_id = (order_id or "").strip()
        if not order_id: raise ValidationError("Enter an Order ID.")
        location = self.session.location()
        eta = location.eta_minutes if location else DEFAULT_TRACK_ETA
        return f"Order {order_id} is on the way. ETA ~ {eta} mins (simulated)."
