"""Portfolio viability analysis.

Combines aggregated totals and the summed installments into viability
metrics, and reports economically doubtful inputs as alerts rather than
exceptions.
"""

from __future__ import annotations

from math import isfinite
from typing import Sequence

from investsim.core.exceptions import InvalidInputError
from investsim.core.logging import get_logger
from investsim.core.settings import SimulatorSettings, get_settings
from investsim.domain.models.analysis import Alert, AlertType, FinancialAnalysis
from investsim.domain.models.item import AggregateResult, CreditLine

log = get_logger(__name__)

REMODELING_MARKERS = ("remodel", "remodelación", "remodelacion")


def _is_remodeling(name: str) -> bool:
    lowered = name.lower()
    return any(marker in lowered for marker in REMODELING_MARKERS)


def _require_non_negative(param_name: str, value: float) -> None:
    if not isfinite(value) or value < 0:
        raise InvalidInputError(param_name, value, "must be a finite number >= 0")


def _check_inputs(
    aggregate_result: AggregateResult,
    monthly_payment_total: float,
    estimated_monthly_income: float,
    gross_margin_percentage: float,
    credit_lines: Sequence[CreditLine] | None,
) -> None:
    _require_non_negative("aggregate.total_amount", aggregate_result.total_amount)
    _require_non_negative("aggregate.total_advance", aggregate_result.total_advance)
    _require_non_negative("aggregate.total_financed", aggregate_result.total_financed)
    for split in aggregate_result.per_item:
        _require_non_negative(f"aggregate.per_item[{split.item_id}].amount", split.amount)
    _require_non_negative("monthly_payment_total", monthly_payment_total)
    _require_non_negative("estimated_monthly_income", estimated_monthly_income)
    if not isfinite(gross_margin_percentage) or not 0.0 <= gross_margin_percentage <= 100.0:
        raise InvalidInputError("gross_margin_percentage", gross_margin_percentage, "must be within [0, 100]")
    for line in credit_lines or ():
        _require_non_negative(f"credit_lines[{line.id}].total_amount", line.total_amount)


def compute_metrics(
    aggregate_result: AggregateResult,
    monthly_payment_total: float,
    estimated_monthly_income: float,
    gross_margin_percentage: float,
) -> FinancialAnalysis:
    """Derive the viability metrics. Guards every division with a sentinel."""
    total_investment = aggregate_result.total_amount
    net_monthly_income = estimated_monthly_income * gross_margin_percentage / 100.0

    if estimated_monthly_income > 0:
        debt_to_income = monthly_payment_total / estimated_monthly_income * 100.0
    else:
        debt_to_income = 0.0

    break_even = total_investment / net_monthly_income if net_monthly_income > 0 else None

    if total_investment > 0:
        roi = net_monthly_income * 12 / total_investment * 100.0
        leverage = aggregate_result.total_financed / total_investment * 100.0
    else:
        roi = 0.0
        leverage = 0.0

    coverage = net_monthly_income / monthly_payment_total if monthly_payment_total > 0 else None

    return FinancialAnalysis(
        total_investment=total_investment,
        total_advances=aggregate_result.total_advance,
        total_financed=aggregate_result.total_financed,
        monthly_payment_total=monthly_payment_total,
        net_monthly_income=net_monthly_income,
        free_cash_flow=net_monthly_income - monthly_payment_total,
        debt_to_income_ratio=debt_to_income,
        break_even_months=break_even,
        payback_period=break_even,
        roi=roi,
        leverage=leverage,
        payment_coverage=coverage,
    )


def build_alerts(
    aggregate_result: AggregateResult,
    analysis: FinancialAnalysis,
    estimated_monthly_income: float,
    credit_lines: Sequence[CreditLine] | None = None,
    settings: SimulatorSettings | None = None,
) -> list[Alert]:
    """Flag implausible economics. Never corrects anything."""
    settings = settings or get_settings()
    alerts: list[Alert] = []

    if credit_lines:
        custom_total = sum(line.total_amount for line in credit_lines)
        gap = custom_total - aggregate_result.total_financed
        if abs(gap) > settings.mismatch_tolerance:
            alerts.append(Alert(
                type=AlertType.WARNING,
                code="financed_total_mismatch",
                message=(
                    f"Credit lines finance {custom_total:.2f} but the selected items "
                    f"leave {aggregate_result.total_financed:.2f} to finance "
                    f"(difference {gap:+.2f})."
                ),
            ))

    if analysis.debt_to_income_ratio > settings.max_debt_to_income_pct:
        alerts.append(Alert(
            type=AlertType.ERROR,
            code="high_debt_to_income",
            message=(
                f"Monthly debt service ({analysis.debt_to_income_ratio:.1f}%) exceeds "
                f"{settings.max_debt_to_income_pct:.0f}% of estimated income. Over-indebtedness risk."
            ),
        ))

    if estimated_monthly_income > 0 and analysis.free_cash_flow < 0:
        alerts.append(Alert(
            type=AlertType.WARNING,
            code="negative_free_cash_flow",
            message=(
                f"Net margin does not cover the installments "
                f"(free cash flow {analysis.free_cash_flow:.2f} per month)."
            ),
        ))

    for split in aggregate_result.per_item:
        if split.amount <= 0:
            continue
        financing_pct = split.finance_balance / split.amount * 100.0
        if financing_pct > settings.max_item_financing_pct:
            alerts.append(Alert(
                type=AlertType.WARNING,
                code="high_item_financing",
                message=f"{split.name} is {financing_pct:.1f}% financed. Consider a larger advance.",
            ))

    if aggregate_result.total_amount > 0:
        remodeling = sum(s.amount for s in aggregate_result.per_item if _is_remodeling(s.name))
        share = remodeling / aggregate_result.total_amount * 100.0
        if share > settings.max_remodeling_share_pct:
            alerts.append(Alert(
                type=AlertType.INFO,
                code="high_remodeling_share",
                message=f"Remodeling represents {share:.1f}% of the total investment. Consider reviewing its scope.",
            ))

    return alerts


def analyze(
    aggregate_result: AggregateResult,
    monthly_payment_total: float,
    estimated_monthly_income: float,
    gross_margin_percentage: float,
    credit_lines: Sequence[CreditLine] | None = None,
    settings: SimulatorSettings | None = None,
) -> tuple[FinancialAnalysis, list[Alert]]:
    """Compute portfolio metrics and alerts.

    Args:
        aggregate_result: Output of the item aggregator
        monthly_payment_total: Sum of all credit line installments
        estimated_monthly_income: Gross monthly income (>= 0)
        gross_margin_percentage: Margin applied to income, 0-100
        credit_lines: Custom credit lines; only used for the financed
            total reconciliation alert
        settings: Alert thresholds, defaults to cached settings

    Returns:
        Tuple of (FinancialAnalysis, alerts)

    Raises:
        InvalidInputError: For structurally invalid inputs only: negative or
            non-finite totals, income or installments, margin outside [0, 100]
    """
    _check_inputs(
        aggregate_result,
        monthly_payment_total,
        estimated_monthly_income,
        gross_margin_percentage,
        credit_lines,
    )

    analysis = compute_metrics(
        aggregate_result,
        monthly_payment_total,
        estimated_monthly_income,
        gross_margin_percentage,
    )
    alerts = build_alerts(aggregate_result, analysis, estimated_monthly_income, credit_lines, settings)

    for alert in alerts:
        log.info("analysis_alert", type=alert.type.value, code=alert.code)
    log.debug(
        "analysis_completed",
        total_investment=analysis.total_investment,
        monthly_payment_total=analysis.monthly_payment_total,
        alerts=len(alerts),
    )
    return analysis, alerts


class FinancialAnalysisEngine:
    """Analysis engine bound to a settings instance."""

    def __init__(self, settings: SimulatorSettings | None = None):
        self.settings = settings or get_settings()

    def analyze(
        self,
        aggregate_result: AggregateResult,
        monthly_payment_total: float,
        estimated_monthly_income: float,
        gross_margin_percentage: float,
        credit_lines: Sequence[CreditLine] | None = None,
    ) -> tuple[FinancialAnalysis, list[Alert]]:
        return analyze(
            aggregate_result,
            monthly_payment_total,
            estimated_monthly_income,
            gross_margin_percentage,
            credit_lines,
            self.settings,
        )
