"""
client.py – Low-level helpers for the turbo inventory REST backend.

Every method performs exactly one HTTP call and returns the decoded JSON
body. Error responses and transport failures are raised as ApiError.
"""

import logging
from typing import Optional
from urllib.parse import quote

import requests

from .errors import ApiError
from .models import InventoryLot, PendingOrder, TurboStats

logger = logging.getLogger(__name__)


class TurboAPI:
    """Thin wrapper around one ``requests.Session`` bound to the backend origin."""

    def __init__(self, base_url: str, timeout: float = 15, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json",
        })

    # ------------------------------------------------------------------
    # Inventory
    # ------------------------------------------------------------------

    def list_turbos(self) -> list[InventoryLot]:
        body = self._request("GET", "/turbos")
        return [InventoryLot.from_api(raw) for raw in body.get("turbos") or []]

    def get_stats(self) -> TurboStats:
        return TurboStats.from_api(self._request("GET", "/turbos/stats"))

    def create_turbo(self, payload: dict) -> dict:
        return self._request("POST", "/create-turbo", json=payload)

    def update_by_part_number(self, part_number: str, payload: dict) -> dict:
        return self._request(
            "PUT", "/turbos/update-by-partnumber",
            json={"partNumber": part_number, **payload},
        )

    def add_stock(self, part_number: str, quantity: int) -> dict:
        """Additive quantity update used when ordered stock arrives."""
        return self.update_by_part_number(part_number, {"quantity": quantity, "operation": "add"})

    def delete_by_part_number(self, part_number: str) -> dict:
        return self._request("DELETE", f"/turbos/delete-by-partnumber/{quote(part_number, safe='')}")

    def sell(self, part_number: str, quantity: int) -> dict:
        return self._request("POST", "/turbos/sell", json={"partNumber": part_number, "quantity": quantity})

    # ------------------------------------------------------------------
    # Pending orders
    # ------------------------------------------------------------------

    def list_pending_orders(self) -> list[PendingOrder]:
        body = self._request("GET", "/all-pending-orders")
        return [PendingOrder.from_api(raw) for raw in body.get("pendingOrders") or []]

    def create_order(self, payload: dict) -> dict:
        return self._request("POST", "/create-order", json=payload)

    def mark_order_arrived(self, order_id: str) -> dict:
        return self._request("PUT", f"/{quote(order_id, safe='')}/arrived")

    # ------------------------------------------------------------------
    # Email / auth
    # ------------------------------------------------------------------

    def send_order_email(self, order: dict) -> dict:
        return self._request("POST", "/email/send-order-email-with-pdf", json=order)

    def send_bulk_order_email(self, order_number: str, orders: list[dict]) -> dict:
        return self._request(
            "POST", "/email/send-bulk-order-email",
            json={"orderNumber": order_number, "orders": orders},
        )

    def login(self, username: str, password: str) -> dict:
        return self._request("POST", "/auth/login", json={"username": username, "password": password})

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _decode(resp: requests.Response) -> dict:
        try:
            body = resp.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {"data": body}

    def _request(self, method: str, path: str, json: Optional[dict] = None) -> dict:
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method, url)
        try:
            resp = self.session.request(method, url, json=json, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("%s %s failed: %s", method, url, exc)
            raise ApiError("Network error", payload={"detail": str(exc)}) from exc

        body = self._decode(resp)
        if not resp.ok:
            message = body.get("message") or body.get("error") or ""
            logger.warning("%s %s returned %s: %s", method, url, resp.status_code, message or "-")
            raise ApiError(message, status_code=resp.status_code, payload=body)
        return body
