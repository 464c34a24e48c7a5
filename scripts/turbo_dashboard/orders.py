"""
orders.py – Individual and bulk purchase orders for low-stock turbos.

Orders are created one at a time; a bulk order sends a single consolidated
email covering every order the backend accepted.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from .client import TurboAPI
from .errors import ApiError
from .models import DisplayRow, PendingOrder
from .normalizer import low_stock_rows
from .notifier import Notifier

logger = logging.getLogger(__name__)


@dataclass
class BulkOrderResult:
    order_number: Optional[str] = None
    succeeded: list = field(default_factory=list)  # backend order records
    failed: list = field(default_factory=list)  # DisplayRow ids


def generate_order_number(clock: Callable[[], float] = time.time) -> str:
    """'ORD-1718000000000' – derived from the current time in milliseconds."""
    return f"ORD-{int(clock() * 1000)}"


def _order_payload(row: DisplayRow, quantity: int) -> dict:
    return {
        "partNumber": row.primary_part_number,
        "model": row.display_text,
        "location": row.location,
        "quantity": quantity,
    }


class OrderComposer:
    """Builds purchase orders from selected rows and tracks the bulk selection."""

    def __init__(
        self,
        api: TurboAPI,
        notifier: Optional[Notifier] = None,
        on_change: Optional[Callable[[], None]] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.api = api
        self.notifier = notifier or Notifier()
        self.on_change = on_change
        self.clock = clock
        self.selection: dict[str, tuple[DisplayRow, int]] = {}

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    @staticmethod
    def order_candidates(rows: list[DisplayRow]) -> list[DisplayRow]:
        return low_stock_rows(rows)

    def select(self, row: DisplayRow, quantity: int = 1) -> None:
        self.selection[row.id] = (row, max(0, int(quantity)))

    def adjust(self, row_id: str, change: int) -> int:
        """Add *change* to a selected row's quantity, never going below zero."""
        row, current = self.selection[row_id]
        new_quantity = max(0, current + change)
        self.selection[row_id] = (row, new_quantity)
        return new_quantity

    def deselect(self, row_id: str) -> None:
        self.selection.pop(row_id, None)

    def clear_selection(self) -> None:
        self.selection.clear()

    @property
    def total_selected(self) -> int:
        return sum(qty for _, qty in self.selection.values())

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    def place_order(self, row: DisplayRow, quantity) -> Optional[dict]:
        """Create one pending order for *row* and email it. Returns the order or None."""
        try:
            quantity = int(quantity)
        except (TypeError, ValueError):
            quantity = 0
        if quantity <= 0:
            self.notifier.error("Please enter a quantity greater than 0")
            return None
        if not row.is_low_stock:
            self.notifier.error(f"{row.display_text} is not low on stock")
            return None

        try:
            body = self.api.create_order(_order_payload(row, quantity))
        except ApiError as exc:
            logger.error("Order for %s failed: %s", row.id, exc)
            self.notifier.error(exc.message or "Failed to create order")
            return None

        order = body.get("order") or body
        try:
            self.api.send_order_email(order)
        except ApiError as exc:
            logger.warning("Order email for %s failed: %s", row.id, exc)
            self.notifier.warning("Order created, but the notification email could not be sent")
        else:
            self.notifier.success(f"Order placed for {quantity} x {row.display_text}")

        self._changed()
        return order

    def place_bulk_order(self) -> BulkOrderResult:
        """Order every selected row with a positive quantity, one after another."""
        result = BulkOrderResult()
        selected = [(row, qty) for row, qty in self.selection.values() if qty > 0]
        if not selected:
            self.notifier.error("Select at least one turbo to order")
            return result

        for row, quantity in selected:
            try:
                body = self.api.create_order(_order_payload(row, quantity))
            except ApiError as exc:
                logger.error("Bulk order line for %s failed: %s", row.id, exc)
                result.failed.append(row.id)
                continue
            result.succeeded.append(body.get("order") or body)

        if result.succeeded:
            result.order_number = generate_order_number(self.clock)
            try:
                self.api.send_bulk_order_email(result.order_number, result.succeeded)
            except ApiError as exc:
                logger.warning("Bulk order email %s failed: %s", result.order_number, exc)
                self.notifier.warning("Orders created, but the notification email could not be sent")
            else:
                self.notifier.success(
                    f"Bulk order {result.order_number} placed for {len(result.succeeded)} item(s)"
                )

        if result.failed:
            self.notifier.error(f"{len(result.failed)} order(s) failed")

        self.clear_selection()
        self._changed()
        return result

    def mark_arrived(self, order: PendingOrder) -> bool:
        """Add the ordered stock to inventory, then flag the order as arrived."""
        part_number = (order.part_number or "").split(",")[0].strip()
        if not part_number:
            logger.error("Order %s has no part number", order.id)
            self.notifier.error("Order has no part number; cannot update inventory")
            return False

        try:
            self.api.add_stock(part_number, order.quantity)
        except ApiError as exc:
            logger.error("Stock update for order %s failed: %s", order.id, exc)
            self.notifier.error(exc.message or "Failed to update inventory")
            return False

        try:
            self.api.mark_order_arrived(order.id)
        except ApiError as exc:
            logger.error("Marking order %s arrived failed: %s", order.id, exc)
            self.notifier.error(exc.message or "Failed to mark order as arrived")
            return False

        order.status = "arrived"
        self.notifier.success(f"Order for {order.model or part_number} marked as arrived")
        self._changed()
        return True

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()
