"""Mortgage product and viability models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class MortgageStatus(str, Enum):
    """Outcome of checking one product against the borrower's income."""

    VIABLE = "viable"
    EXTEND_TERM = "extend_term"
    NOT_VIABLE = "not_viable"


class MortgageProduct(BaseModel):
    """One bank mortgage offer as published in a product catalog.

    Catalog rows are often incomplete; a product missing any field needed
    for the evaluation is skipped rather than rejected.
    """

    bank_code: int = Field(default=0, description="Lender identifier used to group offers")
    bank_name: str = Field(default="", description="Lender display name")
    product_name: str = Field(default="", description="Short product name")
    effective_annual_rate_pct: float | None = Field(None, ge=0, description="Maximum effective annual rate (TEA) %")
    loan_to_value_pct: float | None = Field(None, ge=0, description="Maximum loan / appraisal %")
    installment_to_income_pct: float | None = Field(None, ge=0, description="Maximum installment / income %")
    max_loan_amount: float | None = Field(None, ge=0, description="Maximum principal granted")
    max_term_months: int | None = Field(None, ge=0, description="Maximum term granted")
    total_financial_cost_pct: float | None = Field(None, ge=0, description="Maximum total financial cost (CFT) %")

    model_config = {
        "frozen": True,
    }

    @property
    def is_complete(self) -> bool:
        """True when every figure the evaluation needs is present and non-zero."""
        return all((
            self.effective_annual_rate_pct,
            self.loan_to_value_pct,
            self.installment_to_income_pct,
            self.max_loan_amount,
            self.max_term_months,
        ))


class MortgageEvaluation(BaseModel):
    """Viability of one product for a given property, income and desired term."""

    bank_code: int
    bank_name: str
    product_name: str
    financed_amount: float = Field(..., description="min(property value x LTV, max loan)")
    required_down_payment: float = Field(..., description="Part of the property value not financed")
    initial_installment: float = Field(..., description="Installment at the desired term")
    max_allowed_installment: float = Field(..., description="Income x installment-to-income ratio")
    desired_term_months: int
    recommended_term_months: int | None = Field(
        None, description="Shortest affordable term, or the product maximum when not viable"
    )
    max_term_months: int
    status: MortgageStatus
    monthly_rate_pct: float
    effective_annual_rate_pct: float
    total_financial_cost_pct: float = 0.0

    model_config = {
        "frozen": True,
    }

    @property
    def is_viable(self) -> bool:
        return self.status is MortgageStatus.VIABLE
