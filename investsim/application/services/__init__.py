"""Application services."""

from .simulation import (
    IndexationReport,
    SimulationRequest,
    SimulationResult,
    build_credit_lines,
    run_indexation,
    run_simulation,
)

__all__ = [
    "IndexationReport",
    "SimulationRequest",
    "SimulationResult",
    "build_credit_lines",
    "run_indexation",
    "run_simulation",
]
