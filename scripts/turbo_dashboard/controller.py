"""
controller.py – Orchestrates backend calls and owns the dashboard state.

Writes are fire-and-forget: on success the controller waits a short, fixed
delay and re-fetches everything; on failure it notifies the operator and
leaves the state as it was.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from .client import TurboAPI
from .errors import ApiError, ValidationError
from .forms import TurboForm, build_payload
from .models import DisplayRow, TurboStats
from .normalizer import filter_rows, find_row, normalize_inventory, summarize
from .notifier import Notifier
from .session import SessionManager

logger = logging.getLogger(__name__)

MODALS = frozenset({"add", "edit", "order", "bulk_order", "sell"})


def _always(_message: str) -> bool:
    return True


@dataclass
class DashboardState:
    """Everything the dashboard shows or is in the middle of editing."""

    rows: list = field(default_factory=list)  # list[DisplayRow]
    stats: TurboStats = field(default_factory=TurboStats)
    pending_orders: list = field(default_factory=list)  # list[PendingOrder]
    search_term: str = ""
    modal: Optional[str] = None
    form: TurboForm = field(default_factory=TurboForm)
    editing: Optional[DisplayRow] = None
    loading: bool = False

    # -- named transitions ---------------------------------------------

    def open_modal(self, name: str) -> None:
        if name not in MODALS:
            raise ValueError(f"unknown modal {name!r}")
        self.modal = name

    def close_modal(self) -> None:
        self.modal = None
        self.editing = None
        self.reset_form()

    def start_edit(self, row: DisplayRow) -> None:
        self.editing = row
        self.form = TurboForm.from_row(row)
        self.modal = "edit"

    def reset_form(self) -> None:
        self.form = TurboForm()

    def set_search(self, term: str) -> None:
        self.search_term = term or ""


class DashboardController:
    def __init__(
        self,
        api: TurboAPI,
        session: SessionManager,
        notifier: Optional[Notifier] = None,
        refresh_delay: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
        confirm: Callable[[str], bool] = _always,
    ):
        self.api = api
        self.session = session
        self.notifier = notifier or session.notifier
        self.refresh_delay = refresh_delay
        self.sleep = sleep
        self.confirm = confirm
        self.state = DashboardState()

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def login(self, username: str, password: str) -> bool:
        if not username or not password:
            self.notifier.error("Please enter both username and password.")
            return False

        self.state.loading = True
        try:
            self.api.login(username, password)
        except ApiError as exc:
            logger.error("Login failed for %s: %s", username, exc)
            if exc.status_code is None:
                self.notifier.error("Network error. Please check your connection and try again.")
            else:
                self.notifier.error(exc.message or "Login failed. Please check your credentials.")
            return False
        finally:
            self.state.loading = False

        self.session.save_session(username)
        self.notifier.success("Login successful!")
        self.refresh()
        return True

    def logout(self) -> None:
        self.session.clear_session()
        self.state = DashboardState()
        self.notifier.info("Logged out")

    # ------------------------------------------------------------------
    # Fetch cycle
    # ------------------------------------------------------------------

    def refresh(self) -> None:
        """Re-fetch inventory, stats and pending orders; each call stands alone."""
        try:
            self.state.rows = normalize_inventory(self.api.list_turbos())
        except ApiError as exc:
            logger.error("Fetching turbos failed: %s", exc)
            self.notifier.error("Failed to fetch turbo items")

        try:
            self.state.stats = self.api.get_stats()
        except ApiError as exc:
            logger.warning("Fetching stats failed, using local summary: %s", exc)
            self.notifier.error("Failed to fetch turbo statistics")
            self.state.stats = summarize(self.state.rows)

        self.refresh_pending_orders()

    def refresh_pending_orders(self) -> None:
        try:
            orders = self.api.list_pending_orders()
        except ApiError as exc:
            logger.error("Fetching pending orders failed: %s", exc)
            self.notifier.error("Failed to fetch pending orders")
            return
        self.state.pending_orders = [o for o in orders if not o.is_arrived]

    def schedule_refresh(self) -> None:
        """Give the backend a moment to settle, then re-fetch."""
        if self.refresh_delay > 0:
            self.sleep(self.refresh_delay)
        self.refresh()

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def search(self, term: str) -> list[DisplayRow]:
        self.state.set_search(term)
        return self.visible_rows

    @property
    def visible_rows(self) -> list[DisplayRow]:
        return filter_rows(self.state.rows, self.state.search_term)

    def find(self, key: str) -> Optional[DisplayRow]:
        row = find_row(self.state.rows, key)
        if row is None:
            self.notifier.error(f"Turbo item not found: {key}")
        return row

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_turbo(self, form: Optional[TurboForm] = None) -> bool:
        form = form or self.state.form
        try:
            payload = build_payload(form)
        except ValidationError as exc:
            self.notifier.error(str(exc))
            return False

        try:
            self.api.create_turbo(payload)
        except ApiError as exc:
            logger.error("Create turbo failed: %s", exc)
            self.notifier.error(self._message(exc, "Failed to add turbo"))
            return False

        self.notifier.success("Turbo added successfully!")
        self.state.close_modal()
        self.schedule_refresh()
        return True

    def update_turbo(self, row: DisplayRow, form: Optional[TurboForm] = None) -> bool:
        form = form or self.state.form
        try:
            payload = build_payload(form)
        except ValidationError as exc:
            self.notifier.error(str(exc))
            return False

        try:
            self.api.update_by_part_number(row.primary_part_number, payload)
        except ApiError as exc:
            logger.error("Update of %s failed: %s", row.id, exc)
            self.notifier.error(self._message(exc, "Failed to update turbo"))
            return False

        self.notifier.success("Turbo updated successfully!")
        self.state.close_modal()
        self.schedule_refresh()
        return True

    def delete_turbo(self, row: DisplayRow) -> bool:
        if not self.confirm(f"Delete {row.id}? This action cannot be undone."):
            logger.info("Delete of %s cancelled", row.id)
            return False

        try:
            self.api.delete_by_part_number(row.primary_part_number)
        except ApiError as exc:
            logger.error("Delete of %s failed: %s", row.id, exc)
            self.notifier.error(self._message(exc, "Failed to delete turbo"))
            return False

        self.notifier.success("Turbo deleted successfully!")
        self.schedule_refresh()
        return True

    def sell_turbo(self, row: DisplayRow, quantity) -> bool:
        try:
            quantity = int(quantity)
        except (TypeError, ValueError):
            self.notifier.error("Please enter a valid quantity")
            return False
        if quantity < 1:
            self.notifier.error("Please enter a valid quantity")
            return False
        if quantity > row.quantity:
            self.notifier.error(f"Only {row.quantity} available (requested {quantity})")
            return False
        if not self.confirm(f"Sell {quantity} x {row.display_text}?"):
            logger.info("Sale of %s cancelled", row.id)
            return False

        try:
            self.api.sell(row.primary_part_number, quantity)
        except ApiError as exc:
            logger.error("Sale of %s failed: %s", row.id, exc)
            if "available" in exc.payload:
                self.notifier.error(
                    f"Not enough quantity: {exc.payload.get('available')} available, "
                    f"{exc.payload.get('requested', quantity)} requested"
                )
            else:
                self.notifier.error(self._message(exc, "Failed to sell turbo"))
            return False

        self.notifier.success(f"Sold {quantity} x {row.display_text}")
        self.state.close_modal()
        self.schedule_refresh()
        return True

    @staticmethod
    def _message(exc: ApiError, fallback: str) -> str:
        if exc.status_code is None:
            return f"Network error: {fallback.lower()}"
        return exc.message or fallback
