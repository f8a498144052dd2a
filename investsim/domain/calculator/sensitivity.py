"""Sensitivity and scenario generation.

Re-runs the analysis pipeline under perturbed rate / income assumptions,
and the indexation projector under named inflation scenarios.
"""

from __future__ import annotations

import math
from typing import Callable, Sequence

import numpy as np
import pandas as pd

from investsim.core.exceptions import InvalidInputError
from investsim.domain.calculator.indexation import DEFAULT_SAMPLE_STEP_MONTHS, project
from investsim.domain.models.analysis import FinancialAnalysis
from investsim.domain.models.projection import FinalMetrics, ScenarioParameters, SensitivityPoint

DEFAULT_DELTA_RANGE = (-20.0, 20.0)
DEFAULT_DELTA_STEP = 5.0

# analyze_fn(rate_delta_points, income_delta_pct) -> FinancialAnalysis
AnalyzeFn = Callable[[float, float], FinancialAnalysis]


def adjust_rate(annual_rate_percent: float, delta_points: float) -> float:
    """Additive rate shift in percentage points, floored at zero."""
    return max(0.0, annual_rate_percent + delta_points)


def adjust_income(income: float, delta_percent: float) -> float:
    """Relative income shift in %, floored at zero."""
    return max(0.0, income * (1 + delta_percent / 100.0))


def scenario_label(delta: float) -> str:
    value = int(delta) if float(delta).is_integer() else delta
    sign = "+" if delta >= 0 else ""
    return f"{sign}{value}%"


def delta_steps(
    delta_range: tuple[float, float] = DEFAULT_DELTA_RANGE,
    step: float = DEFAULT_DELTA_STEP,
) -> list[float]:
    """Ascending deltas from low to high inclusive, spaced by step."""
    low, high = delta_range
    if step <= 0:
        raise InvalidInputError("step", step, "must be > 0")
    if low > high:
        raise InvalidInputError("delta_range", delta_range, "low bound above high bound")

    count = int(math.floor((high - low) / step + 1e-9)) + 1
    return np.round(low + step * np.arange(count), 10).tolist()


def generate(
    analyze_fn: AnalyzeFn,
    delta_range: tuple[float, float] = DEFAULT_DELTA_RANGE,
    step: float = DEFAULT_DELTA_STEP,
    base_rate_delta: float = 0.0,
    base_income_delta: float = 0.0,
) -> list[SensitivityPoint]:
    """Build a sensitivity curve over a symmetric delta range.

    For each delta d (ascending), analyze_fn receives
    (base_rate_delta + d, base_income_delta + d); the callee applies them
    with adjust_rate / adjust_income.

    Returns:
        One SensitivityPoint per delta, in ascending delta order
    """
    points = []
    for delta in delta_steps(delta_range, step):
        analysis = analyze_fn(base_rate_delta + delta, base_income_delta + delta)
        points.append(SensitivityPoint(
            scenario_label=scenario_label(delta),
            delta=delta,
            break_even=analysis.break_even_months,
            roi=analysis.roi,
            monthly_payment_total=analysis.monthly_payment_total,
        ))
    return points


def default_scenarios(base_inflation_rate: float) -> list[ScenarioParameters]:
    """Optimistic / base / pessimistic assumptions around a base inflation."""
    optimistic_inflation = max(20.0, base_inflation_rate - 50.0)
    pessimistic_inflation = base_inflation_rate + 50.0
    return [
        ScenarioParameters(
            label="optimistic",
            inflation_rate=optimistic_inflation,
            salary_growth_rate=optimistic_inflation,
        ),
        ScenarioParameters(
            label="base",
            inflation_rate=base_inflation_rate,
            salary_growth_rate=base_inflation_rate,
        ),
        ScenarioParameters(
            label="pessimistic",
            inflation_rate=pessimistic_inflation,
            salary_growth_rate=max(0.0, pessimistic_inflation - 30.0),
        ),
    ]


def compare_scenarios(
    initial_installment: float,
    initial_income: float,
    term_months: int,
    scenarios: Sequence[ScenarioParameters],
    sample_step_months: int = DEFAULT_SAMPLE_STEP_MONTHS,
) -> pd.DataFrame:
    """Side-by-side projections, one column group per scenario.

    Returns:
        DataFrame indexed by month with installment_<label>,
        income_<label> and ratio_<label> columns
    """
    labels = [s.label for s in scenarios]
    if len(set(labels)) != len(labels):
        raise InvalidInputError("scenarios", labels, "labels must be unique")

    frames = []
    for scenario in scenarios:
        frame = project(
            initial_installment,
            initial_income,
            term_months,
            scenario.inflation_rate,
            scenario.salary_growth_rate,
            sample_step_months,
        ).to_frame()
        frames.append(frame.rename(columns={
            "installment": f"installment_{scenario.label}",
            "income": f"income_{scenario.label}",
            "ratio_percent": f"ratio_{scenario.label}",
        }))

    if not frames:
        return pd.DataFrame()
    return pd.concat(frames, axis=1)


def scenario_final_metrics(
    initial_installment: float,
    initial_income: float,
    term_months: int,
    scenarios: Sequence[ScenarioParameters],
) -> dict[str, FinalMetrics]:
    """Capped-horizon outlook per scenario label."""
    return {
        s.label: project(
            initial_installment,
            initial_income,
            term_months,
            s.inflation_rate,
            s.salary_growth_rate,
        ).final_metrics()
        for s in scenarios
    }


class SensitivityScenarioGenerator:
    """Stateless facade over the sensitivity and scenario functions."""

    generate = staticmethod(generate)
    default_scenarios = staticmethod(default_scenarios)
    compare = staticmethod(compare_scenarios)
    final_metrics = staticmethod(scenario_final_metrics)
