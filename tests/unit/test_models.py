"""Unit tests for investsim.domain.models Pydantic models."""

import pytest
from pydantic import ValidationError

from investsim.domain.models.analysis import Alert, AlertType, FinancialAnalysis
from investsim.domain.models.item import CreditLine, CreditType, InvestmentItem, PricedCreditLine
from investsim.domain.models.projection import ScenarioParameters


class TestInvestmentItem:
    """Tests for InvestmentItem model."""

    def test_computed_split(self):
        """Advance and finance balance derive from amount and percentage."""
        item = InvestmentItem(id="a", amount=100_000, advance_percentage=20)
        assert item.advance_amount == pytest.approx(20_000)
        assert item.finance_balance == pytest.approx(80_000)
        assert item.financing_percentage == pytest.approx(80.0)

    def test_zero_amount_financing_percentage(self):
        """Zero amount should not divide by zero."""
        item = InvestmentItem(id="a", amount=0, advance_percentage=50)
        assert item.financing_percentage == 0.0

    def test_defaults(self):
        item = InvestmentItem(id="a")
        assert item.is_selected is True
        assert item.credit_type == CreditType.CAPITAL
        assert item.is_custom is False

    def test_frozen(self):
        """Items are immutable once built."""
        item = InvestmentItem(id="a", amount=10)
        with pytest.raises(ValidationError):
            item.amount = 20

    def test_label_falls_back_to_name_key(self):
        item = InvestmentItem(id="a", name_key="simulator.item.workingCapital")
        assert item.label == "simulator.item.workingCapital"

    def test_computed_fields_in_dump(self):
        dumped = InvestmentItem(id="a", amount=1000, advance_percentage=10).model_dump()
        assert dumped["advance_amount"] == pytest.approx(100)
        assert dumped["finance_balance"] == pytest.approx(900)


class TestCreditLine:
    """Tests for CreditLine and PricedCreditLine."""

    def test_item_ids_coerced_to_frozenset(self):
        line = CreditLine(id="l", item_ids=["a", "b", "a"], total_amount=10, annual_rate=0, term_months=1)
        assert line.item_ids == frozenset({"a", "b"})

    def test_priced_totals(self):
        line = CreditLine(id="l", total_amount=1200, annual_rate=0, term_months=12)
        priced = PricedCreditLine(line=line, monthly_payment=110)
        assert priced.total_paid == 1320
        assert priced.total_interest == 120


class TestAnalysisModels:
    """Tests for FinancialAnalysis and Alert."""

    def test_undefined_break_even_is_not_viable(self):
        analysis = FinancialAnalysis(total_investment=100, break_even_months=None)
        assert analysis.is_viable is False

    def test_alert_serializes_type_value(self):
        alert = Alert(type=AlertType.WARNING, code="x", message="m")
        assert alert.model_dump(mode="json")["type"] == "warning"

    def test_alert_rejects_unknown_type(self):
        with pytest.raises(ValidationError):
            Alert(type="fatal", code="x", message="m")


class TestScenarioParameters:

    def test_required_fields(self):
        with pytest.raises(ValidationError):
            ScenarioParameters(label="base")
