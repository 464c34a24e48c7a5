# tests/test_forms.py
import re

import pytest

from turbo_dashboard.errors import ValidationError
from turbo_dashboard.forms import TurboForm, build_payload, split_models
from turbo_dashboard.models import InventoryLot
from turbo_dashboard.normalizer import normalize_lot


def test_split_models():
    assert split_models("A1, B2,,C3 ") == ["A1", "B2", "C3"]
    assert split_models("") == []


@pytest.mark.parametrize(
    "form, message",
    [
        (TurboForm(model="X", quantity="1"), "Please enter bay location"),
        (TurboForm(location="A1", quantity="1"), "Please enter model name(s)"),
        (TurboForm(model="X", location="A1", quantity="-1"), "Please enter a valid quantity"),
        (TurboForm(model="X", location="A1", quantity=""), "Please enter a valid quantity"),
        (TurboForm(location="A1", size_variants=True), "Please enter big or small model name(s)"),
        (TurboForm(location="A1", size_variants=True, big_models="B", big_quantity="x"),
         "Please enter a valid big quantity"),
        (TurboForm(location="A1", size_variants=True, small_models="S", small_quantity="-2"),
         "Please enter a valid small quantity"),
    ],
)
def test_validation_messages(form, message):
    with pytest.raises(ValidationError, match=re.escape(message)):
        build_payload(form)


def test_zero_quantity_is_accepted():
    assert build_payload(TurboForm(model="X", location="A1", quantity="0"))["quantity"] == 0


def test_single_model_is_not_split():
    payload = build_payload(TurboForm(model="GT15, GT17", location="A1", quantity="2"))

    assert payload["partNumbers"] == ["GT15, GT17"]


def test_size_variant_payload_only_carries_supplied_sides():
    payload = build_payload(TurboForm(
        location=" B4 ", size_variants=True, big_models="900, 901", big_quantity="3", priority=True,
    ))

    assert payload == {
        "location": "B4",
        "hasSizeOption": True,
        "priority": True,
        "sizeVariants": {"big": {"partNumbers": ["900", "901"], "quantity": 3}},
    }


def test_form_from_simple_multi_part_row():
    row = normalize_lot(InventoryLot.from_api({"location": "A1", "quantity": 2, "partNumbers": ["1", "2"]}))[0]
    form = TurboForm.from_row(row)

    assert (form.model, form.quantity, form.multiple_models, form.location) == ("1, 2", "2", True, "A1")
    assert build_payload(form)["partNumbers"] == ["1", "2"]
