"""Integration tests for the full simulation pipeline.

Items -> aggregation -> credit lines -> installments -> analysis -> sensitivity.
"""

import pytest

from investsim.application.services.simulation import (
    SimulationRequest,
    build_credit_lines,
    default_credit_terms,
    run_indexation,
    run_simulation,
)
from investsim.core.exceptions import InvalidInputError
from investsim.domain.calculator.aggregation import aggregate
from investsim.domain.calculator.financial import monthly_payment
from investsim.domain.models.item import CreditLine, CreditType, InvestmentItem
from investsim.domain.models.projection import RiskLevel


class TestDefaultCreditLines:
    """Items grouped into one line per credit type."""

    def test_grouping(self, business_items, settings):
        lines = build_credit_lines(aggregate(business_items), default_credit_terms(settings))
        assert [line.id for line in lines] == ["capital", "mortgage"]
        capital, mortgage = lines
        assert capital.total_amount == pytest.approx(25_000)
        assert (capital.annual_rate, capital.term_months) == (25.0, 60)
        assert mortgage.item_ids == frozenset({"item-0"})
        assert (mortgage.annual_rate, mortgage.term_months) == (12.0, 240)

    def test_fully_advanced_items_need_no_line(self, settings):
        agg = aggregate([InvestmentItem(id="a", amount=1000, advance_percentage=100)])
        assert build_credit_lines(agg, default_credit_terms(settings)) == []


class TestRunSimulation:
    """Tests for run_simulation()."""

    def test_default_lines_pipeline(self, business_items, settings):
        request = SimulationRequest(items=business_items, estimated_monthly_income=20_000, gross_margin_percentage=30)
        result = run_simulation(request, settings)

        expected = monthly_payment(25_000, 25, 60) + monthly_payment(80_000, 12, 240)
        assert result.analysis.total_investment == 160_000
        assert result.analysis.total_financed == pytest.approx(105_000)
        assert result.analysis.monthly_payment_total == pytest.approx(expected)
        assert [p.line.id for p in result.credit_lines] == ["capital", "mortgage"]

    def test_custom_lines_drive_installments(self, single_item, custom_line, settings):
        request = SimulationRequest(
            items=single_item,
            credit_lines=[custom_line],
            estimated_monthly_income=20_000,
            gross_margin_percentage=30,
        )
        result = run_simulation(request, settings)

        assert result.analysis.monthly_payment_total == pytest.approx(monthly_payment(90_000, 12, 36))
        assert result.analysis.total_financed == pytest.approx(80_000)
        assert [a.code for a in result.alerts] == ["financed_total_mismatch"]

    def test_sensitivity_curve(self, single_item, settings):
        request = SimulationRequest(
            items=single_item,
            estimated_monthly_income=20_000,
            gross_margin_percentage=30,
            sensitivity_range=(-10, 10),
            sensitivity_step=5,
        )
        result = run_simulation(request, settings)

        assert [p.delta for p in result.sensitivity] == [-10, -5, 0, 5, 10]
        payments = [p.monthly_payment_total for p in result.sensitivity]
        assert payments == sorted(payments)
        roi = [p.roi for p in result.sensitivity]
        assert roi == sorted(roi)
        middle = result.sensitivity[2]
        assert middle.break_even == pytest.approx(result.analysis.break_even_months)

    def test_sensitivity_clamps_negative_rate(self, single_item, settings):
        """Rates shifted below zero fall back to straight-line installments."""
        request = SimulationRequest(
            items=single_item,
            estimated_monthly_income=20_000,
            sensitivity_rate_delta=-50,
            sensitivity_range=(0, 0),
        )
        result = run_simulation(request, settings)
        # single_item defaults to the capital line: 25% over 60 months
        assert result.sensitivity[0].monthly_payment_total == pytest.approx(80_000 / 60)

    def test_sensitivity_clamps_negative_income(self, single_item, settings):
        request = SimulationRequest(
            items=single_item,
            estimated_monthly_income=20_000,
            sensitivity_income_delta=-200,
            sensitivity_range=(0, 0),
        )
        result = run_simulation(request, settings)
        assert result.sensitivity[0].break_even is None
        assert result.sensitivity[0].roi == 0.0

    def test_invalid_item_propagates(self, settings):
        request = SimulationRequest(items=[InvestmentItem(id="bad", amount=-1)])
        with pytest.raises(InvalidInputError):
            run_simulation(request, settings)

    def test_invalid_custom_term_propagates(self, single_item, settings):
        line = CreditLine(id="l", total_amount=80_000, annual_rate=12, term_months=0)
        request = SimulationRequest(items=single_item, credit_lines=[line])
        with pytest.raises(InvalidInputError):
            run_simulation(request, settings)


class TestResultFrames:
    """Tabular views handed to presentation layers."""

    @pytest.fixture
    def result(self, business_items, settings):
        request = SimulationRequest(items=business_items, estimated_monthly_income=20_000)
        return run_simulation(request, settings)

    def test_items_frame(self, result):
        frame = result.items_frame()
        assert frame["item_id"].tolist() == ["item-0", "item-1", "item-2"]
        assert frame["amount"].sum() == 160_000
        assert not frame["is_custom"].any()

    def test_credit_lines_frame(self, result):
        frame = result.credit_lines_frame()
        assert frame["credit_type"].tolist() == ["capital", "mortgage"]
        assert (frame["total_interest"] > 0).all()

    def test_sensitivity_frame(self, result):
        assert len(result.sensitivity_frame()) == 9

    def test_to_dict(self, result):
        payload = result.to_dict()
        assert set(payload) == {"analysis", "alerts", "credit_lines", "sensitivity"}
        assert payload["analysis"]["total_investment"] == 160_000


class TestRunIndexation:
    """Indexed installment outlook with the default scenarios."""

    def test_flat_rates_keep_ratio(self, settings):
        report = run_indexation(1_000, 4_000, 24, 0.0, 0.0, settings)
        assert report.outlook.ratio_percent == pytest.approx(25.0)
        assert report.outlook.risk_level is RiskLevel.LOW
        assert all(s.installment == pytest.approx(1_000) for s in report.projection)

    def test_sampling_uses_configured_step(self, settings):
        report = run_indexation(1_000, 4_000, 24, 60.0, settings=settings)
        step = settings.default_sample_step_months
        assert list(report.projection.sampled_months()) == list(range(1, 25, step))

    def test_scenarios_and_comparison(self, settings):
        report = run_indexation(1_000, 4_000, 36, 100.0, 80.0, settings)
        assert [s.label for s in report.scenarios] == ["optimistic", "base", "pessimistic"]
        assert set(report.scenario_outlook) == {"optimistic", "base", "pessimistic"}
        assert "ratio_pessimistic" in report.comparison.columns
        assert (
            report.scenario_outlook["pessimistic"].ratio_percent
            > report.scenario_outlook["optimistic"].ratio_percent
        )
