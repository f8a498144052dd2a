"""End-to-end simulation pipeline.

Wires aggregation, credit line pricing, analysis and sensitivity for one
simulation request. Callers supply plain data and receive plain records.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pandas as pd
from pydantic import BaseModel, Field

from investsim.core.logging import get_logger
from investsim.core.settings import SimulatorSettings, get_settings
from investsim.domain.calculator.aggregation import aggregate
from investsim.domain.calculator.analysis import analyze
from investsim.domain.calculator.financial import total_monthly_payment
from investsim.domain.calculator.indexation import IndexationProjection, project
from investsim.domain.calculator.sensitivity import (
    DEFAULT_DELTA_RANGE,
    DEFAULT_DELTA_STEP,
    adjust_income,
    adjust_rate,
    compare_scenarios,
    default_scenarios,
    generate,
    scenario_final_metrics,
)
from investsim.domain.models.analysis import Alert, FinancialAnalysis
from investsim.domain.models.item import (
    AggregateResult,
    CreditLine,
    CreditType,
    InvestmentItem,
    PricedCreditLine,
)
from investsim.domain.models.projection import FinalMetrics, ScenarioParameters, SensitivityPoint

log = get_logger(__name__)


def default_credit_terms(settings: SimulatorSettings | None = None) -> dict[CreditType, tuple[float, int]]:
    """(annual rate %, term months) per credit type."""
    settings = settings or get_settings()
    return {CreditType(k): v for k, v in settings.credit_terms().items()}


def build_credit_lines(
    aggregate_result: AggregateResult,
    terms: dict[CreditType, tuple[float, int]] | None = None,
) -> list[CreditLine]:
    """One credit line per credit type that has a positive financed balance."""
    terms = terms or default_credit_terms()
    groups = aggregate_result.financed_by_credit_type()
    lines = []
    for credit_type in CreditType:
        group = groups.get(credit_type)
        if group is None:
            continue
        total, item_ids = group
        rate, term = terms[credit_type]
        lines.append(CreditLine(
            id=credit_type.value,
            item_ids=frozenset(item_ids),
            total_amount=total,
            annual_rate=rate,
            term_months=term,
            credit_type=credit_type,
        ))
    return lines


def shift_rates(lines: list[CreditLine], rate_delta: float) -> list[CreditLine]:
    """Copies of lines with every rate shifted by rate_delta points (floored at 0)."""
    return [
        line.model_copy(update={"annual_rate": adjust_rate(line.annual_rate, rate_delta)})
        for line in lines
    ]


class SimulationRequest(BaseModel):
    """Inputs for one simulation run."""

    items: list[InvestmentItem] = Field(default_factory=list)
    credit_lines: list[CreditLine] | None = Field(None, description="Custom credit line overrides")
    estimated_monthly_income: float = Field(default=0.0, description="Gross monthly income")
    gross_margin_percentage: float = Field(default=30.0, description="Margin on income, 0-100")

    # Sensitivity
    sensitivity_rate_delta: float = Field(default=0.0, description="Base rate offset, points")
    sensitivity_income_delta: float = Field(default=0.0, description="Base income offset, %")
    sensitivity_range: tuple[float, float] = DEFAULT_DELTA_RANGE
    sensitivity_step: float = DEFAULT_DELTA_STEP

    model_config = {
        "frozen": True,
    }

    @property
    def has_custom_credit_lines(self) -> bool:
        return bool(self.credit_lines)


@dataclass(frozen=True)
class SimulationResult:
    """Everything a caller needs to present one simulation."""

    aggregate: AggregateResult
    credit_lines: list[PricedCreditLine]
    analysis: FinancialAnalysis
    alerts: list[Alert] = field(default_factory=list)
    sensitivity: list[SensitivityPoint] = field(default_factory=list)

    def items_frame(self) -> pd.DataFrame:
        """Per-item advance / financed split."""
        return pd.DataFrame(
            [s.model_dump() for s in self.aggregate.per_item],
            columns=[
                "item_id", "name", "credit_type", "amount",
                "advance_amount", "finance_balance", "is_custom",
            ],
        )

    def credit_lines_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [
                {
                    "id": p.line.id,
                    "credit_type": p.line.credit_type.value if p.line.credit_type else None,
                    "total_amount": p.line.total_amount,
                    "annual_rate": p.line.annual_rate,
                    "term_months": p.line.term_months,
                    "monthly_payment": p.monthly_payment,
                    "total_paid": p.total_paid,
                    "total_interest": p.total_interest,
                }
                for p in self.credit_lines
            ],
            columns=[
                "id", "credit_type", "total_amount", "annual_rate",
                "term_months", "monthly_payment", "total_paid", "total_interest",
            ],
        )

    def sensitivity_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [p.to_dict() for p in self.sensitivity],
            columns=["scenario", "delta", "break_even", "roi", "monthly_payment_total"],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "analysis": self.analysis.model_dump(),
            "alerts": [a.model_dump(mode="json") for a in self.alerts],
            "credit_lines": self.credit_lines_frame().to_dict(orient="records"),
            "sensitivity": [p.to_dict() for p in self.sensitivity],
        }


def run_simulation(
    request: SimulationRequest,
    settings: SimulatorSettings | None = None,
) -> SimulationResult:
    """Run the full pipeline for one request.

    Totals always come from the items. Custom credit lines, when given,
    replace the default per-credit-type lines for installments and are
    reconciled against the item totals through an alert only.

    Raises:
        InvalidInputError: For structurally invalid items, lines or assumptions
    """
    settings = settings or get_settings()
    aggregate_result = aggregate(request.items)

    if request.has_custom_credit_lines:
        active_lines = list(request.credit_lines)
    else:
        active_lines = build_credit_lines(aggregate_result, default_credit_terms(settings))

    priced, payment_total = total_monthly_payment(active_lines)
    analysis, alerts = analyze(
        aggregate_result,
        payment_total,
        request.estimated_monthly_income,
        request.gross_margin_percentage,
        credit_lines=request.credit_lines if request.has_custom_credit_lines else None,
        settings=settings,
    )

    def analyze_shifted(rate_delta: float, income_delta: float) -> FinancialAnalysis:
        _, shifted_total = total_monthly_payment(shift_rates(active_lines, rate_delta))
        shifted, _ = analyze(
            aggregate_result,
            shifted_total,
            adjust_income(request.estimated_monthly_income, income_delta),
            request.gross_margin_percentage,
            settings=settings,
        )
        return shifted

    sensitivity = generate(
        analyze_shifted,
        delta_range=request.sensitivity_range,
        step=request.sensitivity_step,
        base_rate_delta=request.sensitivity_rate_delta,
        base_income_delta=request.sensitivity_income_delta,
    )

    log.info(
        "simulation_completed",
        items=aggregate_result.item_count,
        credit_lines=len(priced),
        custom_lines=request.has_custom_credit_lines,
        monthly_payment_total=payment_total,
        alerts=len(alerts),
    )
    return SimulationResult(
        aggregate=aggregate_result,
        credit_lines=priced,
        analysis=analysis,
        alerts=alerts,
        sensitivity=sensitivity,
    )


@dataclass(frozen=True, eq=False)
class IndexationReport:
    """Indexed installment outlook for one loan."""

    projection: IndexationProjection
    outlook: FinalMetrics
    scenarios: list[ScenarioParameters]
    comparison: pd.DataFrame
    scenario_outlook: dict[str, FinalMetrics]


def run_indexation(
    initial_installment: float,
    initial_income: float,
    term_months: int,
    inflation_rate_percent: float,
    salary_growth_rate_percent: float = 0.0,
    settings: SimulatorSettings | None = None,
) -> IndexationReport:
    """Project an indexed installment and compare the default scenarios.

    The main projection uses the given salary growth; the scenario
    comparison is built around inflation_rate_percent as the base case.
    """
    settings = settings or get_settings()
    step = settings.default_sample_step_months

    projection = project(
        initial_installment,
        initial_income,
        term_months,
        inflation_rate_percent,
        salary_growth_rate_percent,
        sample_step_months=step,
    )
    scenarios = default_scenarios(inflation_rate_percent)
    outlook = projection.final_metrics()

    log.info(
        "indexation_completed",
        term_months=term_months,
        samples=len(projection),
        risk_level=outlook.risk_level.value,
    )
    return IndexationReport(
        projection=projection,
        outlook=outlook,
        scenarios=scenarios,
        comparison=compare_scenarios(
            initial_installment, initial_income, term_months, scenarios, sample_step_months=step,
        ),
        scenario_outlook=scenario_final_metrics(initial_installment, initial_income, term_months, scenarios),
    )
