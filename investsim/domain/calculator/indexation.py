"""Indexed installment projection.

Simulates how an inflation-indexed installment (UVA-style) and a
reference income evolve under independent monthly compounding, and how
the installment-to-income ratio moves with them.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import isfinite
from typing import Iterator

import pandas as pd

from investsim.core.exceptions import InvalidInputError
from investsim.domain.models.projection import FinalMetrics, ProjectionSample, RiskLevel

PROJECTION_HORIZON_CAP_MONTHS = 60
DEFAULT_SAMPLE_STEP_MONTHS = 6

# Installment-to-income thresholds, % (strictly above)
RISK_THRESHOLDS = (
    (50.0, RiskLevel.CRITICAL),
    (40.0, RiskLevel.HIGH),
    (30.0, RiskLevel.MEDIUM),
)


def _ratio(installment: float, income: float) -> float | None:
    if income <= 0:
        return None
    return installment / income * 100.0


def classify_risk(ratio_percent: float | None) -> RiskLevel:
    """Map an installment-to-income ratio to a risk level."""
    if ratio_percent is None:
        return RiskLevel.CRITICAL
    for threshold, level in RISK_THRESHOLDS:
        if ratio_percent > threshold:
            return level
    return RiskLevel.LOW


@dataclass(frozen=True)
class IndexationProjection:
    """Lazy, restartable sequence of projection samples.

    Each iteration recomputes samples from the stored inputs, so iterating
    twice yields identical values.
    """

    initial_installment: float
    initial_income: float
    term_months: int
    inflation_rate_percent: float
    salary_growth_rate_percent: float
    sample_step_months: int = DEFAULT_SAMPLE_STEP_MONTHS

    @property
    def monthly_inflation(self) -> float:
        return self.inflation_rate_percent / 100.0 / 12.0

    @property
    def monthly_salary_growth(self) -> float:
        return self.salary_growth_rate_percent / 100.0 / 12.0

    def sampled_months(self) -> range:
        """Month 1, then every sample_step_months after it, up to the term."""
        if self.term_months < 1:
            return range(0)
        return range(1, self.term_months + 1, self.sample_step_months)

    def sample_at(self, month: int) -> ProjectionSample:
        installment = self.initial_installment * (1 + self.monthly_inflation) ** (month - 1)
        income = self.initial_income * (1 + self.monthly_salary_growth) ** (month - 1)
        return ProjectionSample(
            month=month,
            installment=installment,
            income=income,
            ratio_percent=_ratio(installment, income),
        )

    def __iter__(self) -> Iterator[ProjectionSample]:
        for month in self.sampled_months():
            yield self.sample_at(month)

    def __len__(self) -> int:
        return len(self.sampled_months())

    def to_frame(self) -> pd.DataFrame:
        """Samples as a DataFrame indexed by month."""
        frame = pd.DataFrame(
            [s.to_dict() for s in self],
            columns=["month", "installment", "income", "ratio_percent"],
        )
        return frame.set_index("month")

    def final_metrics(self) -> FinalMetrics:
        """Outlook at min(term, 60) months for summary cards."""
        horizon = max(0, min(self.term_months, PROJECTION_HORIZON_CAP_MONTHS))
        installment = self.initial_installment * (1 + self.monthly_inflation) ** horizon
        income = self.initial_income * (1 + self.monthly_salary_growth) ** horizon
        ratio = _ratio(installment, income)
        return FinalMetrics(
            horizon_months=horizon,
            installment=installment,
            income=income,
            ratio_percent=ratio,
            initial_ratio_percent=_ratio(self.initial_installment, self.initial_income),
            risk_level=classify_risk(ratio),
        )


def project(
    initial_installment: float,
    initial_income: float,
    term_months: int,
    inflation_rate_percent: float,
    salary_growth_rate_percent: float,
    sample_step_months: int = DEFAULT_SAMPLE_STEP_MONTHS,
) -> IndexationProjection:
    """Project an indexed installment against a growing income.

    Args:
        initial_installment: First-month installment
        initial_income: First-month reference income
        term_months: Loan term; < 1 yields an empty projection
        inflation_rate_percent: Annual inflation %, compounded monthly
        salary_growth_rate_percent: Annual salary growth %, compounded monthly
        sample_step_months: Sampling cadence after month 1

    Returns:
        IndexationProjection (iterable of ProjectionSample)
    """
    for param_name, value in (("initial_installment", initial_installment), ("initial_income", initial_income)):
        if not isfinite(value) or value < 0:
            raise InvalidInputError(param_name, value, "must be a finite number >= 0")
    if sample_step_months < 1:
        raise InvalidInputError("sample_step_months", sample_step_months, "must be >= 1")
    if not (isfinite(inflation_rate_percent) and isfinite(salary_growth_rate_percent)):
        raise InvalidInputError(
            "rates",
            (inflation_rate_percent, salary_growth_rate_percent),
            "must be finite",
        )
    if inflation_rate_percent <= -1200 or salary_growth_rate_percent <= -1200:
        raise InvalidInputError(
            "rates",
            (inflation_rate_percent, salary_growth_rate_percent),
            "monthly rate must stay above -100%",
        )

    return IndexationProjection(
        initial_installment=initial_installment,
        initial_income=initial_income,
        term_months=term_months,
        inflation_rate_percent=inflation_rate_percent,
        salary_growth_rate_percent=salary_growth_rate_percent,
        sample_step_months=sample_step_months,
    )


def final_metrics(
    initial_installment: float,
    initial_income: float,
    term_months: int,
    inflation_rate_percent: float,
    salary_growth_rate_percent: float,
) -> FinalMetrics:
    """Single-point outlook at the 60-month capped horizon."""
    return project(
        initial_installment,
        initial_income,
        term_months,
        inflation_rate_percent,
        salary_growth_rate_percent,
    ).final_metrics()


class IndexationProjector:
    """Stateless facade over project() / final_metrics()."""

    project = staticmethod(project)
    final_metrics = staticmethod(final_metrics)
