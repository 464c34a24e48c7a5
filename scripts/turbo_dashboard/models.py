"""
models.py – Shared data-model dataclasses for backend lots, display rows,
pending orders and inventory statistics.
"""

from dataclasses import dataclass, field
from typing import Optional

NO_LOCATION = "No location"


def _as_int(value, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_str(value) -> str:
    """None (JSON null) becomes an empty string."""
    return "" if value is None else str(value)


@dataclass
class SizeVariant:
    """One side (big or small) of a size-variant lot."""

    part_numbers: list = field(default_factory=list)
    quantity: int = 0

    @classmethod
    def from_api(cls, raw: Optional[dict]) -> Optional["SizeVariant"]:
        if not raw:
            return None
        return cls(
            part_numbers=list(raw.get("partNumbers") or []),
            quantity=_as_int(raw.get("quantity")),
        )


@dataclass
class InventoryLot:
    """One stock-keeping group as returned by ``GET /turbos``."""

    location: str = NO_LOCATION
    quantity: int = 0
    part_numbers: list = field(default_factory=list)
    has_size_option: bool = False
    big: Optional[SizeVariant] = None
    small: Optional[SizeVariant] = None
    priority: bool = False

    @classmethod
    def from_api(cls, raw: dict) -> "InventoryLot":
        variants = raw.get("sizeVariants") or {}
        return cls(
            location=raw.get("location") or NO_LOCATION,
            quantity=_as_int(raw.get("quantity")),
            part_numbers=list(raw.get("partNumbers") or []),
            has_size_option=bool(raw.get("hasSizeOption")),
            big=SizeVariant.from_api(variants.get("big")),
            small=SizeVariant.from_api(variants.get("small")),
            priority=bool(raw.get("priority")),
        )


@dataclass(frozen=True)
class DisplayRow:
    """A flat, render-ready row derived from one InventoryLot."""

    id: str
    model: str
    display_text: str
    location: str
    quantity: int
    is_low_stock: bool
    priority: bool = False
    has_size_option: bool = False
    all_part_numbers: tuple = ()
    big_part_numbers: tuple = ()
    small_part_numbers: tuple = ()
    big_quantity: int = 0
    small_quantity: int = 0

    @property
    def primary_part_number(self) -> str:
        """The part number the backend uses to address this row's lot."""
        return self.all_part_numbers[0] if self.all_part_numbers else self.id


@dataclass
class PendingOrder:
    id: str
    part_number: str
    model: str = ""
    location: str = ""
    quantity: int = 0
    order_date: str = ""
    status: str = "pending"

    @property
    def is_arrived(self) -> bool:
        return self.status == "arrived"

    @classmethod
    def from_api(cls, raw: dict) -> "PendingOrder":
        return cls(
            id=str(raw.get("_id") or raw.get("id") or ""),
            part_number=_as_str(raw.get("partNumber")),
            model=_as_str(raw.get("model")),
            location=_as_str(raw.get("location")),
            quantity=_as_int(raw.get("quantity")),
            order_date=_as_str(raw.get("orderDate")),
            status=_as_str(raw.get("status")) or "pending",
        )


@dataclass
class TurboStats:
    total_items: int = 0
    low_stock_items: int = 0
    total_quantity: int = 0

    @classmethod
    def from_api(cls, raw: dict) -> "TurboStats":
        return cls(
            total_items=_as_int(raw.get("totalItems")),
            low_stock_items=_as_int(raw.get("lowStockItems")),
            total_quantity=_as_int(raw.get("totalQuantity")),
        )
