"""Financial analysis result and alert models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class AlertType(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class Alert(BaseModel):
    """Non-fatal finding attached to an analysis."""

    type: AlertType
    code: str = Field(..., description="Stable machine-readable identifier")
    message: str

    model_config = {
        "frozen": True,
    }


class FinancialAnalysis(BaseModel):
    """Portfolio-level viability metrics.

    None marks a ratio that is undefined for the given inputs
    (non-positive net margin, no installment to cover).
    """

    total_investment: float = 0.0
    total_advances: float = 0.0
    total_financed: float = 0.0
    monthly_payment_total: float = 0.0

    net_monthly_income: float = 0.0
    free_cash_flow: float = 0.0
    debt_to_income_ratio: float = 0.0

    break_even_months: float | None = None
    payback_period: float | None = None
    roi: float = 0.0
    leverage: float = 0.0
    payment_coverage: float | None = None

    model_config = {
        "frozen": True,
    }

    @property
    def is_viable(self) -> bool:
        """Positive free cash flow and a defined break-even."""
        return self.free_cash_flow >= 0 and self.break_even_months is not None
