#!/usr/bin/env python3
"""
cli.py – Operator console for the turbo inventory backend.

Every command except ``login`` needs a live session (see session.py). Rows
are addressed by their id as shown by ``list`` or by any one part number.

Optional environment variables:
    TURBO_DASHBOARD_CONFIG – YAML settings file (same as --config)
    TURBO_API_BASE_URL     – backend base URL
"""

import argparse
import getpass
import logging
import sys
from typing import Optional

from .client import TurboAPI
from .config import Settings, load_config
from .controller import DashboardController
from .forms import TurboForm
from .models import DisplayRow
from .normalizer import is_low_stock, low_stock_rows
from .notifier import Notifier
from .orders import OrderComposer
from .session import ActivityObserver, SessionManager

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

def _add_form_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--location", help="Bay / shelf location")
    parser.add_argument("--models", help="Comma-separated part numbers sharing one quantity")
    parser.add_argument("--quantity", help="Quantity for --models")
    parser.add_argument("--big", help="Comma-separated big-size part numbers")
    parser.add_argument("--big-qty", dest="big_qty", help="Quantity of the big variant")
    parser.add_argument("--small", help="Comma-separated small-size part numbers")
    parser.add_argument("--small-qty", dest="small_qty", help="Quantity of the small variant")
    parser.add_argument("--priority", action=argparse.BooleanOptionalAction, default=None,
                        help="Priority lots are flagged low at 5 or fewer instead of 1")


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="turbo-dashboard",
        description="Manage turbocharger stock, sales and purchase orders.",
    )
    parser.add_argument("--config", help="YAML settings file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("login", help="Start a session")
    p.add_argument("--username")
    p.add_argument("--password")

    sub.add_parser("logout", help="End the session")

    p = sub.add_parser("list", help="Show stocked turbos")
    p.add_argument("--search", default="", help="Filter by model text")
    p.add_argument("--low-stock", dest="low_stock", action="store_true", help="Only low-stock rows")

    sub.add_parser("stats", help="Show inventory statistics")

    p = sub.add_parser("add", help="Add a turbo lot")
    _add_form_args(p)

    p = sub.add_parser("edit", help="Edit a turbo lot")
    p.add_argument("id")
    _add_form_args(p)

    p = sub.add_parser("sell", help="Sell stock from a row")
    p.add_argument("id")
    p.add_argument("--quantity", default="1")
    p.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")

    p = sub.add_parser("delete", help="Delete a turbo lot")
    p.add_argument("id")
    p.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")

    sub.add_parser("orders", help="Show pending orders")

    p = sub.add_parser("order", help="Order stock for one row")
    p.add_argument("id")
    p.add_argument("--quantity", required=True)

    p = sub.add_parser("bulk-order", help="Order several rows at once")
    p.add_argument("items", nargs="+", metavar="ID[=QTY]", help="Row id, optionally with a quantity (default 1)")

    p = sub.add_parser("arrived", help="Mark a pending order as arrived")
    p.add_argument("order_id")

    return parser.parse_args(argv)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _form_from_args(args: argparse.Namespace, base: Optional[TurboForm] = None) -> TurboForm:
    """Overlay the form flags given on the command line onto *base*."""
    form = base or TurboForm()
    if args.location is not None:
        form.location = args.location
    if args.models is not None:
        form.model = args.models
        form.multiple_models = True
        form.size_variants = False
    if args.quantity is not None:
        form.quantity = args.quantity
    if args.big is not None or args.small is not None:
        form.size_variants = True
    if args.big is not None:
        form.big_models = args.big
    if args.big_qty is not None:
        form.big_quantity = args.big_qty
    if args.small is not None:
        form.small_models = args.small
    if args.small_qty is not None:
        form.small_quantity = args.small_qty
    if args.priority is not None:
        form.priority = args.priority
    return form


def _always_yes(_message: str) -> bool:
    return True


def _confirm(message: str) -> bool:
    try:
        answer = input(f"{message} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def _print_rows(rows: list[DisplayRow]) -> None:
    if not rows:
        print("No turbos found.")
        return
    for row in rows:
        flag = "LOW" if is_low_stock(row.quantity, row.priority) else "   "
        star = "*" if row.priority else " "
        print(f"{flag} {star} {row.quantity:>4}  {row.location:<12}  {row.display_text}")


def _parse_bulk_item(item: str) -> tuple[str, int]:
    key, _, qty = item.partition("=")
    try:
        return key.strip(), int(qty) if qty else 1
    except ValueError:
        raise SystemExit(f"ERROR: invalid quantity in {item!r}")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def run(args: argparse.Namespace, settings: Settings, api: Optional[TurboAPI] = None) -> bool:
    notifier = Notifier()
    session = SessionManager(
        settings.session_path,
        notifier=notifier,
        max_age_hours=settings.session_max_age_hours,
        warning_hours=settings.session_warning_hours,
    )
    api = api or TurboAPI(settings.api_base_url, timeout=settings.timeout)
    controller = DashboardController(
        api, session, notifier,
        refresh_delay=settings.refresh_delay,
        confirm=_always_yes if getattr(args, "yes", False) else _confirm,
    )
    composer = OrderComposer(api, notifier, on_change=controller.schedule_refresh)

    if args.command == "login":
        username = args.username or input("Username: ")
        password = args.password or getpass.getpass("Password: ")
        return controller.login(username, password)

    if not session.check_session():
        log.error("Not logged in (or the session expired). Run 'turbo-dashboard login'.")
        return False

    observer = ActivityObserver(session)
    observer.attach()
    try:
        observer.notify("key")
        if args.command == "logout":
            controller.logout()
            return True
        return _dispatch(args, controller, composer)
    finally:
        observer.detach()


def _dispatch(args: argparse.Namespace, controller: DashboardController, composer: OrderComposer) -> bool:
    state = controller.state
    controller.refresh()

    if args.command == "list":
        rows = controller.search(args.search)
        _print_rows(low_stock_rows(rows) if args.low_stock else rows)
        return True

    if args.command == "stats":
        print(f"Total items:     {state.stats.total_items}")
        print(f"Low stock items: {state.stats.low_stock_items}")
        print(f"Total quantity:  {state.stats.total_quantity}")
        return True

    if args.command == "orders":
        if not state.pending_orders:
            print("No pending orders.")
        for order in state.pending_orders:
            print(f"{order.id}  {order.quantity:>4}  {order.part_number:<20}  {order.order_date}  {order.status}")
        return True

    if args.command == "add":
        state.open_modal("add")
        state.form = _form_from_args(args)
        return controller.create_turbo()

    if args.command == "arrived":
        order = next((o for o in state.pending_orders if o.id == args.order_id), None)
        if order is None:
            log.error("No pending order with id %s", args.order_id)
            return False
        return composer.mark_arrived(order)

    if args.command == "bulk-order":
        for item in args.items:
            key, qty = _parse_bulk_item(item)
            row = controller.find(key)
            if row is None:
                return False
            composer.select(row, qty)
        state.open_modal("bulk_order")
        result = composer.place_bulk_order()
        state.close_modal()
        return bool(result.succeeded) and not result.failed

    row = controller.find(args.id)
    if row is None:
        return False

    if args.command == "edit":
        state.start_edit(row)
        state.form = _form_from_args(args, state.form)
        return controller.update_turbo(row)
    if args.command == "sell":
        state.open_modal("sell")
        return controller.sell_turbo(row, args.quantity)
    if args.command == "delete":
        return controller.delete_turbo(row)
    if args.command == "order":
        return composer.place_order(row, args.quantity) is not None

    log.error("Unknown command %s", args.command)
    return False


def main(argv: Optional[list] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )
    settings = load_config(args.config)
    return 0 if run(args, settings) else 1


if __name__ == "__main__":
    sys.exit(main())
