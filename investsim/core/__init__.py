"""Core engine support: exceptions, logging and settings."""

from .exceptions import (
    AmortizationError,
    ConfigurationError,
    InvalidInputError,
    InvestSimError,
)
from .settings import SimulatorSettings, get_settings

__all__ = [
    "SimulatorSettings",
    "get_settings",
    # Exceptions
    "InvestSimError",
    "InvalidInputError",
    "AmortizationError",
    "ConfigurationError",
]
