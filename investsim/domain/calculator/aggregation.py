"""Item aggregation.

Splits each selected investment item into an upfront advance and a
financed balance, and sums the portfolio totals.
"""

from __future__ import annotations

from math import isfinite
from typing import Iterable

from investsim.core.exceptions import InvalidInputError
from investsim.core.logging import get_logger
from investsim.domain.models.item import AggregateResult, InvestmentItem, ItemSplit

log = get_logger(__name__)


def validate_item(item: InvestmentItem) -> None:
    """Raise InvalidInputError for a structurally invalid item."""
    if not isfinite(item.amount) or item.amount < 0:
        raise InvalidInputError(f"items[{item.id}].amount", item.amount, "must be a finite number >= 0")
    if not isfinite(item.advance_percentage) or not 0.0 <= item.advance_percentage <= 100.0:
        raise InvalidInputError(
            f"items[{item.id}].advance_percentage",
            item.advance_percentage,
            "must be within [0, 100]",
        )


def split_item(item: InvestmentItem) -> ItemSplit:
    """Compute the advance / financed split of one item at full precision.

    The item is assumed valid; aggregate() validates before splitting.
    """
    return ItemSplit(
        item_id=item.id,
        name=item.label,
        credit_type=item.credit_type,
        amount=item.amount,
        advance_amount=item.advance_amount,
        finance_balance=item.finance_balance,
        is_custom=item.is_custom,
    )


def aggregate(items: Iterable[InvestmentItem]) -> AggregateResult:
    """Aggregate selected items into per-item splits and totals.

    Every item is validated, selected or not, so a malformed line is
    reported even while it is toggled off.

    Args:
        items: Investment items as supplied by the caller

    Returns:
        AggregateResult over the selected items only

    Raises:
        InvalidInputError: If an item has a negative amount or an
            advance percentage outside [0, 100],
            or either is NaN or infinite
    """
    items = list(items)
    for item in items:
        validate_item(item)

    splits = [split_item(item) for item in items if item.is_selected]

    result = AggregateResult(
        per_item=splits,
        total_amount=sum(s.amount for s in splits),
        total_advance=sum(s.advance_amount for s in splits),
        total_financed=sum(s.finance_balance for s in splits),
    )
    log.debug(
        "items_aggregated",
        received=len(items),
        selected=len(splits),
        total_amount=result.total_amount,
        total_financed=result.total_financed,
    )
    return result


class ItemAggregator:
    """Stateless facade over aggregate()."""

    def aggregate(self, items: Iterable[InvestmentItem]) -> AggregateResult:
        return aggregate(items)
