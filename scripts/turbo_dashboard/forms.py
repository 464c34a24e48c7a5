"""
forms.py – Add/edit form state, local validation and request payloads.
"""

from dataclasses import dataclass
from typing import Optional

from .errors import ValidationError
from .models import DisplayRow


@dataclass
class TurboForm:
    """Field values of the add/edit turbo form.

    Model lists are comma-separated strings, exactly as typed by the operator.
    """

    model: str = ""
    location: str = ""
    quantity: str = ""
    multiple_models: bool = False
    size_variants: bool = False
    big_models: str = ""
    big_quantity: str = "0"
    small_models: str = ""
    small_quantity: str = "0"
    priority: bool = False

    @classmethod
    def from_row(cls, row: DisplayRow) -> "TurboForm":
        """Pre-fill the form for editing *row*."""
        if row.has_size_option:
            return cls(
                location=row.location,
                size_variants=True,
                big_models=", ".join(row.big_part_numbers),
                big_quantity=str(row.big_quantity),
                small_models=", ".join(row.small_part_numbers),
                small_quantity=str(row.small_quantity),
                priority=row.priority,
            )
        return cls(
            model=", ".join(row.all_part_numbers) or row.model,
            location=row.location,
            quantity=str(row.quantity),
            multiple_models=len(row.all_part_numbers) > 1,
            priority=row.priority,
        )


def split_models(text: str) -> list[str]:
    """'A1, B2,,C3 ' → ['A1', 'B2', 'C3']"""
    return [m.strip() for m in (text or "").split(",") if m.strip()]


def _parse_quantity(value) -> Optional[int]:
    """Return a non-negative int, or None when *value* is not one."""
    if value is None or isinstance(value, bool):
        return None
    try:
        qty = int(str(value).strip())
    except ValueError:
        return None
    return qty if qty >= 0 else None


def _model_list(form: TurboForm) -> list[str]:
    if form.multiple_models:
        return split_models(form.model)
    model = form.model.strip()
    return [model] if model else []


def validate(form: TurboForm) -> None:
    """Raise ValidationError with an operator-facing message when *form* is incomplete."""
    if not form.location.strip():
        raise ValidationError("Please enter bay location")

    if not form.size_variants:
        if not _model_list(form):
            raise ValidationError("Please enter model name(s)")
        if _parse_quantity(form.quantity) is None:
            raise ValidationError("Please enter a valid quantity")
        return

    big = split_models(form.big_models)
    small = split_models(form.small_models)
    if not big and not small:
        raise ValidationError("Please enter big or small model name(s)")
    if big and _parse_quantity(form.big_quantity) is None:
        raise ValidationError("Please enter a valid big quantity")
    if small and _parse_quantity(form.small_quantity) is None:
        raise ValidationError("Please enter a valid small quantity")


def build_payload(form: TurboForm) -> dict:
    """Validate *form* and return the JSON body for create/update calls."""
    validate(form)
    payload = {
        "location": form.location.strip(),
        "hasSizeOption": form.size_variants,
        "priority": form.priority,
    }
    if not form.size_variants:
        payload["quantity"] = _parse_quantity(form.quantity)
        payload["partNumbers"] = _model_list(form)
        return payload

    variants = {}
    big = split_models(form.big_models)
    if big:
        variants["big"] = {"partNumbers": big, "quantity": _parse_quantity(form.big_quantity)}
    small = split_models(form.small_models)
    if small:
        variants["small"] = {"partNumbers": small, "quantity": _parse_quantity(form.small_quantity)}
    payload["sizeVariants"] = variants
    return payload
