"""Financial calculation functions.

Fixed-rate (annuity) installments, amortization schedules and related
loan arithmetic. Every loan figure in the engine goes through here so
installments are identical wherever they are shown.
"""

from __future__ import annotations

import math

import numpy_financial as npf
import pandas as pd

from investsim.core.exceptions import AmortizationError, InvalidInputError
from investsim.domain.models.item import CreditLine, PricedCreditLine

SCHEDULE_COLUMNS = [
    "month",
    "opening_balance",
    "payment",
    "interest",
    "principal",
    "closing_balance",
]


def _check_loan(principal: float, annual_rate_percent: float, term_months: int) -> None:
    if term_months <= 0:
        raise InvalidInputError("term_months", term_months, "must be >= 1")
    if not math.isfinite(principal) or principal < 0:
        raise InvalidInputError("principal", principal, "must be a finite number >= 0")
    if not math.isfinite(annual_rate_percent) or annual_rate_percent < 0:
        raise InvalidInputError("annual_rate_percent", annual_rate_percent, "must be a finite number >= 0")


def monthly_payment(
    principal: float,
    annual_rate_percent: float,
    term_months: int,
) -> float:
    """Calculate the fixed monthly installment of a loan.

    Args:
        principal: Financed amount
        annual_rate_percent: Nominal annual rate as percentage (e.g., 12 for 12%)
        term_months: Loan term in months

    Returns:
        Monthly installment, unrounded

    Raises:
        InvalidInputError: If term_months <= 0 or principal / rate is negative
    """
    _check_loan(principal, annual_rate_percent, term_months)

    if annual_rate_percent == 0:
        return principal / term_months

    monthly_rate = (annual_rate_percent / 100.0) / 12.0
    payment = float(-npf.pmt(monthly_rate, term_months, principal))
    if not math.isfinite(payment):
        raise AmortizationError(
            f"Non-finite installment for principal={principal}, "
            f"rate={annual_rate_percent}%, term={term_months}"
        )
    return payment


def price_credit_line(line: CreditLine) -> PricedCreditLine:
    """Attach the monthly installment to a credit line."""
    if not math.isfinite(line.total_amount) or line.total_amount < 0:
        raise InvalidInputError(
            f"credit_lines[{line.id}].total_amount",
            line.total_amount,
            "must be a finite number >= 0",
        )
    payment = monthly_payment(line.total_amount, line.annual_rate, line.term_months)
    return PricedCreditLine(line=line, monthly_payment=payment)


def total_monthly_payment(lines: list[CreditLine]) -> tuple[list[PricedCreditLine], float]:
    """Price each line independently and sum the installments."""
    priced = [price_credit_line(line) for line in lines]
    return priced, sum(p.monthly_payment for p in priced)


def amortization_schedule(
    principal: float,
    annual_rate_percent: float,
    term_months: int,
) -> pd.DataFrame:
    """Generate the full French-system amortization schedule.

    Args:
        principal: Financed amount
        annual_rate_percent: Nominal annual rate %
        term_months: Loan term in months

    Returns:
        DataFrame with one row per month and columns
        month, opening_balance, payment, interest, principal, closing_balance
    """
    payment = monthly_payment(principal, annual_rate_percent, term_months)
    monthly_rate = (annual_rate_percent / 100.0) / 12.0

    rows = []
    balance = principal
    for month in range(1, term_months + 1):
        interest = balance * monthly_rate
        principal_payment = payment - interest
        # Last month absorbs floating drift
        new_balance = 0.0 if month == term_months else max(0.0, balance - principal_payment)
        rows.append({
            "month": month,
            "opening_balance": balance,
            "payment": payment,
            "interest": interest,
            "principal": principal_payment,
            "closing_balance": new_balance,
        })
        balance = new_balance

    return pd.DataFrame(rows, columns=SCHEDULE_COLUMNS)


def remaining_balance(
    principal: float,
    annual_rate_percent: float,
    term_months: int,
    months_paid: int,
) -> float:
    """Calculate remaining loan balance after N installments.

    Returns:
        Outstanding principal, 0 once the term is over
    """
    _check_loan(principal, annual_rate_percent, term_months)

    if months_paid >= term_months:
        return 0.0
    if months_paid <= 0:
        return principal

    monthly_rate = (annual_rate_percent / 100.0) / 12.0
    if monthly_rate == 0:
        return principal * (1 - months_paid / term_months)

    # Balance = P * [(1+r)^n - (1+r)^p] / [(1+r)^n - 1]
    factor_n = (1 + monthly_rate) ** term_months
    factor_p = (1 + monthly_rate) ** months_paid
    return max(0.0, principal * (factor_n - factor_p) / (factor_n - 1))


def monthly_rate_from_effective_annual(effective_annual_rate_percent: float) -> float:
    """Convert an effective annual rate (TEA, %) to the equivalent monthly rate (fraction)."""
    if effective_annual_rate_percent <= -100:
        raise InvalidInputError("effective_annual_rate_percent", effective_annual_rate_percent, "must be > -100")
    return (1 + effective_annual_rate_percent / 100.0) ** (1.0 / 12.0) - 1


def recommended_term(
    principal: float,
    monthly_rate: float,
    max_installment: float,
) -> int | None:
    """Shortest term whose installment fits under max_installment.

    Inverse of the annuity formula, rounded up to whole months.

    Returns:
        Term in months, or None when no term can amortize the loan
        (installment does not even cover the first month's interest)
    """
    if monthly_rate <= 0 or max_installment <= 0 or principal <= 0:
        return None

    denominator = max_installment - principal * monthly_rate
    if denominator <= 0:
        return None

    ratio = max_installment / denominator
    if ratio <= 1:
        return None

    term = math.log(ratio) / math.log(1 + monthly_rate)
    return math.ceil(term - 1e-9)


class AmortizationCalculator:
    """Stateless facade over the module-level loan functions."""

    monthly_payment = staticmethod(monthly_payment)
    schedule = staticmethod(amortization_schedule)
    remaining_balance = staticmethod(remaining_balance)
    price = staticmethod(price_credit_line)
