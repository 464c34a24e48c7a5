"""
normalizer.py – Reshape backend inventory lots into flat display rows.

The row list is always rebuilt from a fresh fetch; nothing here patches
existing rows.
"""

import logging
from typing import Iterable, Optional

from .models import DisplayRow, InventoryLot, SizeVariant, TurboStats

logger = logging.getLogger(__name__)

PRIORITY_LOW_STOCK_THRESHOLD = 5
LOW_STOCK_THRESHOLD = 1


def is_low_stock(quantity: int, priority: bool) -> bool:
    """Return True when *quantity* is at or below the lot's reorder threshold."""
    if priority:
        return quantity <= PRIORITY_LOW_STOCK_THRESHOLD
    return quantity <= LOW_STOCK_THRESHOLD


def _clean(part_numbers: Iterable) -> list[str]:
    """Trim part numbers and drop blanks."""
    return [str(p).strip() for p in part_numbers or [] if p and str(p).strip()]


def _variant_parts(variant: Optional[SizeVariant]) -> tuple[list[str], int]:
    if variant is None:
        return [], 0
    return _clean(variant.part_numbers), variant.quantity or 0


def _variant_text(big: list[str], big_qty: int, small: list[str], small_qty: int) -> str:
    """
    Compose the label of a size-variant row.
    'Big: 123 (Qty: 2) | Small: 456 (Qty: 1)'
    """
    pieces = []
    if big:
        pieces.append(f"Big: {', '.join(big)} (Qty: {big_qty})")
    if small:
        pieces.append(f"Small: {', '.join(small)} (Qty: {small_qty})")
    return " | ".join(pieces)


def normalize_lot(lot: InventoryLot) -> list[DisplayRow]:
    """Return zero or one DisplayRow for *lot*."""
    if lot.has_size_option:
        big, big_qty = _variant_parts(lot.big)
        small, small_qty = _variant_parts(lot.small)
        if not big and not small:
            logger.debug("Dropping size-variant lot at %s without part numbers", lot.location)
            return []
        quantity = big_qty + small_qty
        text = _variant_text(big, big_qty, small, small_qty)
        return [DisplayRow(
            id=", ".join(big + small),
            model=text,
            display_text=text,
            location=lot.location,
            quantity=quantity,
            is_low_stock=is_low_stock(quantity, lot.priority),
            priority=lot.priority,
            has_size_option=True,
            all_part_numbers=tuple(big + small),
            big_part_numbers=tuple(big),
            small_part_numbers=tuple(small),
            big_quantity=big_qty,
            small_quantity=small_qty,
        )]

    parts = _clean(lot.part_numbers)
    if not parts:
        logger.debug("Dropping lot at %s without part numbers", lot.location)
        return []
    joined = ", ".join(parts)
    return [DisplayRow(
        id=joined,
        model=joined,
        display_text=joined,
        location=lot.location,
        quantity=lot.quantity,
        is_low_stock=is_low_stock(lot.quantity, lot.priority),
        priority=lot.priority,
        all_part_numbers=tuple(parts),
    )]


def normalize_inventory(lots: Iterable[InventoryLot]) -> list[DisplayRow]:
    """Flatten every lot into display rows, keeping the input order."""
    rows: list[DisplayRow] = []
    for lot in lots:
        rows.extend(normalize_lot(lot))
    return rows


def filter_rows(rows: Iterable[DisplayRow], term: str) -> list[DisplayRow]:
    """Case-insensitive substring search over the row label only."""
    needle = (term or "").strip().lower()
    if not needle:
        return list(rows)
    return [
        row for row in rows
        if needle in (row.model or "").lower() or needle in (row.display_text or "").lower()
    ]


def low_stock_rows(rows: Iterable[DisplayRow]) -> list[DisplayRow]:
    """Rows whose stock is low, judged from the current quantity."""
    return [row for row in rows if is_low_stock(row.quantity, row.priority)]


def summarize(rows: list[DisplayRow]) -> TurboStats:
    """Compute dashboard statistics locally from *rows*."""
    return TurboStats(
        total_items=len(rows),
        low_stock_items=len(low_stock_rows(rows)),
        total_quantity=sum(row.quantity for row in rows),
    )


def find_row(rows: Iterable[DisplayRow], key: str) -> Optional[DisplayRow]:
    """Look a row up by its id or by any one of its part numbers."""
    key = (key or "").strip()
    if not key:
        return None
    rows = list(rows)
    for row in rows:
        if row.id == key:
            return row
    for row in rows:
        if key in row.all_part_numbers:
            return row
    return None
