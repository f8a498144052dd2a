"""Indexation projection and sensitivity models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ScenarioParameters(BaseModel):
    """Named inflation / salary growth assumption."""

    label: str = Field(..., description="e.g. optimistic, base, pessimistic")
    inflation_rate: float = Field(..., description="Annual inflation %")
    salary_growth_rate: float = Field(..., description="Annual salary growth %")

    model_config = {
        "frozen": True,
    }


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class ProjectionSample:
    """Installment and income at one sampled month."""

    month: int
    installment: float
    income: float
    ratio_percent: float | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "month": self.month,
            "installment": self.installment,
            "income": self.income,
            "ratio_percent": self.ratio_percent,
        }


@dataclass(frozen=True)
class FinalMetrics:
    """Single-point outlook at the capped projection horizon."""

    horizon_months: int
    installment: float
    income: float
    ratio_percent: float | None
    initial_ratio_percent: float | None
    risk_level: RiskLevel


@dataclass(frozen=True)
class SensitivityPoint:
    """Analysis outcome for one delta step."""

    scenario_label: str
    delta: float
    break_even: float | None
    roi: float
    monthly_payment_total: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "scenario": self.scenario_label,
            "delta": self.delta,
            "break_even": self.break_even,
            "roi": self.roi,
            "monthly_payment_total": self.monthly_payment_total,
        }
