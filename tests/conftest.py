"""Pytest fixtures for investsim tests."""

import os
import sys

import pytest

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from investsim.core.settings import SimulatorSettings
from investsim.domain.models.item import CreditLine, CreditType, InvestmentItem


@pytest.fixture
def settings():
    """Settings with default thresholds, independent of the environment cache."""
    return SimulatorSettings()


@pytest.fixture
def single_item():
    """One 100k item with a 20% advance."""
    return [InvestmentItem(id="item-0", name="Compra de Propiedad", amount=100_000, advance_percentage=20)]


@pytest.fixture
def business_items():
    """Typical business plan: property, equipment, working capital, one line toggled off."""
    return [
        InvestmentItem(
            id="item-0",
            name="Compra de Propiedad",
            amount=100_000,
            advance_percentage=20,
            credit_type=CreditType.MORTGAGE,
        ),
        InvestmentItem(
            id="item-1",
            name="Equipamiento y Activos",
            amount=50_000,
            advance_percentage=50,
            credit_type=CreditType.CAPITAL,
        ),
        InvestmentItem(
            id="item-2",
            name="Capital de Trabajo",
            amount=10_000,
            advance_percentage=100,
            credit_type=CreditType.PERSONAL,
        ),
        InvestmentItem(
            id="item-3",
            name="Alquiler de Oficina",
            amount=30_000,
            advance_percentage=0,
            is_selected=False,
            credit_type=CreditType.PERSONAL,
        ),
    ]


@pytest.fixture
def custom_line():
    """Custom credit line overriding the financed total."""
    return CreditLine(
        id="custom-1",
        item_ids={"item-0"},
        total_amount=90_000,
        annual_rate=12.0,
        term_months=36,
    )
