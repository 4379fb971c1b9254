"""
Bill derivation

Pure computation from draft line items and configured rates to subtotal,
tax, discount and total. Nothing here touches the entity store.
"""

import math
from numbers import Real
from typing import Any, Iterable, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ValidationError

MAX_DISCOUNT_PERCENT = 100.0
MAX_TAX_PERCENT = 50.0


class LineItemDraft(BaseModel):
    """A service line being edited on a bill draft."""

    model_config = ConfigDict(frozen=True)

    service_id: str = Field(min_length=1)
    service_name: Optional[str] = None
    quantity: int = Field(default=1, ge=1, strict=True)
    price: float = Field(default=0.0, ge=0, allow_inf_nan=False)

    @property
    def total(self) -> float:
        return self.quantity * self.price


class BillTotals(BaseModel):
    model_config = ConfigDict(frozen=True)

    line_totals: Tuple[float, ...]
    subtotal: float
    tax_amount: float
    discount_amount: float
    total: float
    tax_percent: float
    discount_percent: float


LineInput = Union[LineItemDraft, Mapping[str, Any]]


def validate_percent(name: str, value: Any, upper: float) -> float:
    """Reject a rate outside [0, upper]; rates are never clamped."""
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ValidationError(f"{name} must be a number", field=name)
    value = float(value)
    if math.isnan(value) or not (0.0 <= value <= upper):
        raise ValidationError(f"{name} must be between 0 and {upper:g}", field=name)
    return value


def coerce_line(line: LineInput) -> LineItemDraft:
    if isinstance(line, LineItemDraft):
        return line
    try:
        return LineItemDraft.model_validate(line)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e) from e


def calculate_totals(lines: Iterable[LineInput], discount_percent: Any = 0.0,
                     tax_percent: Any = 0.0) -> BillTotals:
    """
    Compute bill totals for a draft.

    Args:
        lines: line items (LineItemDraft or mappings with service_id, quantity, price)
        discount_percent: discount rate, 0-100
        tax_percent: tax rate, 0-50

    Returns:
        BillTotals where total == subtotal + tax_amount - discount_amount

    Raises:
        ValidationError: if a rate is out of range or a line is invalid
    """
    discount_rate = validate_percent("discount_percent", discount_percent, MAX_DISCOUNT_PERCENT)
    tax_rate = validate_percent("tax_percent", tax_percent, MAX_TAX_PERCENT)
    drafts = [coerce_line(line) for line in lines]

    line_totals = tuple(line.quantity * line.price for line in drafts)
    subtotal = sum(line_totals, 0.0)
    tax_amount = subtotal * tax_rate / 100
    discount_amount = subtotal * discount_rate / 100
    total = subtotal + tax_amount - discount_amount

    return BillTotals(
        line_totals=line_totals,
        subtotal=subtotal,
        tax_amount=tax_amount,
        discount_amount=discount_amount,
        total=total,
        tax_percent=tax_rate,
        discount_percent=discount_rate,
    )
