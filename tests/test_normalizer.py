# tests/test_normalizer.py
import pytest

from turbo_dashboard.models import DisplayRow, InventoryLot
from turbo_dashboard.normalizer import (
    filter_rows,
    find_row,
    is_low_stock,
    low_stock_rows,
    normalize_inventory,
    normalize_lot,
    summarize,
)


def lot(**raw) -> InventoryLot:
    return InventoryLot.from_api(raw)


@pytest.mark.parametrize(
    "quantity, priority, expected",
    [
        (0, False, True),
        (1, False, True),
        (2, False, False),
        (5, True, True),
        (6, True, False),
        (3, True, True),
    ],
)
def test_is_low_stock(quantity, priority, expected):
    assert is_low_stock(quantity, priority) is expected


def test_simple_lot_yields_one_row_with_joined_id():
    rows = normalize_lot(lot(location="B2", quantity=4, partNumbers=[" 111 ", "222", ""]))

    assert len(rows) == 1
    row = rows[0]
    assert row.id == "111, 222"
    assert row.model == "111, 222"
    assert row.quantity == 4
    assert row.location == "B2"
    assert row.is_low_stock is False
    assert row.primary_part_number == "111"


def test_simple_lot_without_part_numbers_is_dropped():
    assert normalize_lot(lot(location="B2", quantity=4, partNumbers=["", "  "])) == []


def test_size_variant_example_row():
    rows = normalize_lot(lot(
        location="A1",
        hasSizeOption=True,
        priority=False,
        sizeVariants={
            "big": {"partNumbers": ["123"], "quantity": 2},
            "small": {"partNumbers": ["456"], "quantity": 1},
        },
    ))

    assert len(rows) == 1
    row = rows[0]
    assert row.id == "123, 456"
    assert row.quantity == 3
    assert row.is_low_stock is False
    assert row.display_text == "Big: 123 (Qty: 2) | Small: 456 (Qty: 1)"
    assert row.big_part_numbers == ("123",)
    assert row.small_part_numbers == ("456",)
    assert row.big_quantity == 2
    assert row.small_quantity == 1


def test_size_variant_missing_side_counts_as_zero():
    rows = normalize_lot(lot(
        location="A1",
        hasSizeOption=True,
        priority=True,
        sizeVariants={"small": {"partNumbers": ["789"], "quantity": 4}},
    ))

    assert rows[0].quantity == 4
    assert rows[0].id == "789"
    assert rows[0].display_text == "Small: 789 (Qty: 4)"
    assert rows[0].is_low_stock is True


def test_size_variant_with_empty_lists_is_dropped():
    assert normalize_lot(lot(
        location="A1",
        hasSizeOption=True,
        sizeVariants={"big": {"partNumbers": [" "], "quantity": 3}, "small": {"partNumbers": [], "quantity": 1}},
    )) == []


def test_inventory_keeps_lot_order_and_ids_are_stable():
    raw = [
        {"location": "C3", "quantity": 9, "partNumbers": ["Z9"]},
        {"location": "A1", "quantity": 0, "partNumbers": []},
        {"location": "A2", "quantity": 1, "partNumbers": ["A0"]},
    ]
    first = normalize_inventory(InventoryLot.from_api(r) for r in raw)
    second = normalize_inventory(InventoryLot.from_api(r) for r in raw)

    assert [r.id for r in first] == ["Z9", "A0"]
    assert first == second


def test_missing_location_defaults():
    assert normalize_lot(lot(quantity=2, partNumbers=["X"]))[0].location == "No location"


def _row(text: str, location: str = "A1", quantity: int = 3, priority: bool = False) -> DisplayRow:
    return DisplayRow(
        id=text, model=text, display_text=text, location=location, quantity=quantity,
        is_low_stock=is_low_stock(quantity, priority), priority=priority, all_part_numbers=(text,),
    )


def test_search_matches_model_text_only():
    rows = [_row("GT1749V", location="SHELF-9"), _row("K03-0053", location="A1")]

    assert [r.id for r in filter_rows(rows, "gt17")] == ["GT1749V"]
    assert filter_rows(rows, "shelf") == []
    assert filter_rows(rows, "") == rows


def test_low_stock_rows_and_summary():
    rows = [_row("A", quantity=1), _row("B", quantity=4, priority=True), _row("C", quantity=8)]

    assert [r.id for r in low_stock_rows(rows)] == ["A", "B"]
    stats = summarize(rows)
    assert (stats.total_items, stats.low_stock_items, stats.total_quantity) == (3, 2, 13)


def test_find_row_by_id_or_part_number():
    row = normalize_lot(lot(location="A", quantity=2, partNumbers=["111", "222"]))[0]

    assert find_row([row], "111, 222") is row
    assert find_row([row], "222") is row
    assert find_row([row], "333") is None
