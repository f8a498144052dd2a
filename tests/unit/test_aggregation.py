"""Unit tests for investsim.domain.calculator.aggregation."""

import pytest

from investsim.core.exceptions import InvalidInputError
from investsim.domain.calculator.aggregation import ItemAggregator, aggregate, split_item
from investsim.domain.models.item import CreditType, InvestmentItem


class TestAggregate:
    """Tests for aggregate()."""

    def test_single_item_totals(self, single_item):
        result = aggregate(single_item)
        assert result.total_amount == 100_000
        assert result.total_advance == pytest.approx(20_000)
        assert result.total_financed == pytest.approx(80_000)

    def test_unselected_items_excluded(self, business_items):
        """The toggled-off office lease must not count."""
        result = aggregate(business_items)
        assert result.item_count == 3
        assert result.total_amount == 160_000
        assert "item-3" not in {s.item_id for s in result.per_item}

    def test_split_invariant(self, business_items):
        """advance + financed == amount for every selected item."""
        result = aggregate(business_items)
        for split in result.per_item:
            assert split.advance_amount + split.finance_balance == pytest.approx(split.amount)
        assert result.total_advance + result.total_financed == pytest.approx(result.total_amount, abs=1.0)

    def test_empty_portfolio(self):
        result = aggregate([])
        assert result.total_amount == 0.0
        assert result.per_item == []

    def test_full_precision_kept(self):
        """No currency rounding inside the engine."""
        result = aggregate([InvestmentItem(id="a", amount=1000, advance_percentage=33.333)])
        assert result.total_advance == pytest.approx(333.33)
        assert result.total_advance != round(result.total_advance)

    def test_accepts_generator(self, single_item):
        result = aggregate(item for item in single_item)
        assert result.item_count == 1

    def test_facade(self, single_item):
        assert ItemAggregator().aggregate(single_item) == aggregate(single_item)


class TestValidation:
    """Structural errors raise InvalidInputError."""

    def test_negative_amount(self):
        with pytest.raises(InvalidInputError) as exc:
            aggregate([InvestmentItem(id="bad", amount=-1)])
        assert exc.value.param_name == "items[bad].amount"

    @pytest.mark.parametrize("pct", [-0.1, 100.5])
    def test_percentage_out_of_range(self, pct):
        with pytest.raises(InvalidInputError):
            aggregate([InvestmentItem(id="bad", amount=100, advance_percentage=pct)])

    @pytest.mark.parametrize("amount", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_amount(self, amount):
        with pytest.raises(InvalidInputError, match=r"items\[bad\]\.amount"):
            aggregate([InvestmentItem(id="bad", amount=amount, advance_percentage=10)])

    def test_nan_percentage(self):
        with pytest.raises(InvalidInputError, match="advance_percentage"):
            aggregate([InvestmentItem(id="bad", amount=100, advance_percentage=float("nan"))])

    def test_unselected_invalid_item_still_rejected(self):
        with pytest.raises(InvalidInputError):
            aggregate([InvestmentItem(id="bad", amount=-5, is_selected=False)])

    def test_bounds_are_inclusive(self):
        result = aggregate([
            InvestmentItem(id="a", amount=100, advance_percentage=0),
            InvestmentItem(id="b", amount=100, advance_percentage=100),
        ])
        assert result.total_advance == pytest.approx(100)
        assert result.total_financed == pytest.approx(100)


class TestCreditTypeGrouping:
    """Tests for AggregateResult.financed_by_credit_type()."""

    def test_groups_positive_balances(self, business_items):
        groups = aggregate(business_items).financed_by_credit_type()
        assert set(groups) == {CreditType.MORTGAGE, CreditType.CAPITAL}
        total, ids = groups[CreditType.MORTGAGE]
        assert total == pytest.approx(80_000)
        assert ids == ["item-0"]

    def test_split_item_uses_label(self):
        split = split_item(InvestmentItem(id="a", name_key="simulator.item.franchise", amount=10))
        assert split.name == "simulator.item.franchise"

    def test_split_carries_custom_flag(self):
        result = aggregate([
            InvestmentItem(id="std", amount=10),
            InvestmentItem(id="own", name="Food truck", amount=20, is_custom=True),
        ])
        assert [s.is_custom for s in result.per_item] == [False, True]

    def test_each_item_validated_once(self, business_items, monkeypatch):
        from investsim.domain.calculator import aggregation

        seen = []
        original = aggregation.validate_item
        monkeypatch.setattr(aggregation, "validate_item", lambda item: seen.append(item.id) or original(item))
        aggregate(business_items)
        assert seen == ["item-0", "item-1", "item-2", "item-3"]
