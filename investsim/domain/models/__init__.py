"""Data models for investsim."""

from .analysis import Alert, AlertType, FinancialAnalysis
from .item import (
    AggregateResult,
    CreditLine,
    CreditType,
    InvestmentItem,
    ItemSplit,
    PricedCreditLine,
)
from .mortgage import MortgageEvaluation, MortgageProduct, MortgageStatus
from .projection import (
    FinalMetrics,
    ProjectionSample,
    RiskLevel,
    ScenarioParameters,
    SensitivityPoint,
)

__all__ = [
    "AggregateResult",
    "Alert",
    "AlertType",
    "CreditLine",
    "CreditType",
    "FinalMetrics",
    "FinancialAnalysis",
    "InvestmentItem",
    "ItemSplit",
    "MortgageEvaluation",
    "MortgageProduct",
    "MortgageStatus",
    "PricedCreditLine",
    "ProjectionSample",
    "RiskLevel",
    "ScenarioParameters",
    "SensitivityPoint",
]
