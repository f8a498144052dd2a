"""Pure calculators over items, loans, mortgages, indexed installments and scenarios."""

from .aggregation import ItemAggregator, aggregate
from .analysis import FinancialAnalysisEngine, analyze
from .financial import (
    AmortizationCalculator,
    amortization_schedule,
    monthly_payment,
    price_credit_line,
    remaining_balance,
)
from .indexation import IndexationProjector, final_metrics, project
from .mortgage import evaluate_product, mortgage_viability
from .sensitivity import SensitivityScenarioGenerator, compare_scenarios, default_scenarios, generate

__all__ = [
    "AmortizationCalculator",
    "FinancialAnalysisEngine",
    "IndexationProjector",
    "ItemAggregator",
    "SensitivityScenarioGenerator",
    "aggregate",
    "amortization_schedule",
    "analyze",
    "compare_scenarios",
    "default_scenarios",
    "evaluate_product",
    "final_metrics",
    "generate",
    "monthly_payment",
    "mortgage_viability",
    "price_credit_line",
    "project",
    "remaining_balance",
]
