import httpx
from .config import API_BASE_URL, ESTIMATE_TIMEOUT
from .errors import RemoteUnavailable


class FoodExpressClient:
    """Thin async wrapper over the menu, order and delivery-time endpoints."""

    def __init__(self, base_url: str = API_BASE_URL, timeout: float = ESTIMATE_TIMEOUT, transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = base_url
        self.timeout = timeout
        self.transport = transport

    async def _request(self, method: str, path: str, **kwargs) -> dict:
        try:
            async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self.transport) as client:
                r = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise RemoteUnavailable(f"{method} {path} failed: {e}") from e
        if not r.is_success:
            raise RemoteUnavailable(f"{method} {path} returned {r.status_code}", status_code=r.status_code)
        try: data = r.json()
        except ValueError as e:
            raise RemoteUnavailable(f"{method} {path} returned invalid JSON") from e
        if not isinstance(data, dict): raise RemoteUnavailable(f"{method} {path} returned an unexpected body")
        return data

    async def menu(self) -> list[dict]:
        data = await self._request("GET", "/menu")
        return data.get("items") or []

    async def delivery_minutes(self, location: str) -> int:
        data = await self._request("GET", "/delivery-time", params={"location": location})
        minutes = data.get("etaMinutes")
        if isinstance(minutes, bool) or not isinstance(minutes, int):
            raise RemoteUnavailable("delivery-time response has no etaMinutes")
        return minutes

    async def create_order(self, food_name: str, total_amount: float, pincode: str = "", city: str = "", address: str = "") -> dict:
        payload = {
            "foodName": food_name, "totalAmount": total_amount,
            "userLocation": {"pincode": pincode, "city": city, "address": address},
        }
        data = await self._request("POST", "/order", json=payload)
        return data.get("order") or {}
