"""Custom exceptions for investsim.

Structural input errors only. Economically non-viable results are not
exceptions; they are reported as alerts on the analysis.
"""

from __future__ import annotations

from typing import Any


class InvestSimError(Exception):
    """Base exception for all investsim errors."""
    pass


# --- Input Errors ---

class InvalidInputError(InvestSimError):
    """Structurally invalid input (negative amount, out-of-range percentage, bad term)."""

    def __init__(self, param_name: str, value: Any, reason: str = ""):
        self.param_name = param_name
        self.value = value
        self.reason = reason
        msg = f"Invalid input '{param_name}': {value}"
        if reason:
            msg += f" - {reason}"
        super().__init__(msg)


# --- Calculation Errors ---

class AmortizationError(InvestSimError):
    """Error computing an installment or amortization schedule."""
    pass


# --- Configuration Errors ---

class ConfigurationError(InvestSimError):
    """Error in engine configuration."""
    pass
